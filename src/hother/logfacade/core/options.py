"""
Options configuring a Logger.

Options are applied in order; every setting is last-write-wins except hooks,
which accumulate.
"""

import os
from collections.abc import Callable
from typing import Any, Protocol, TextIO

from hother.logfacade.core.config import LoggerSettings
from hother.logfacade.core.engine import Engine, OutputFormat
from hother.logfacade.core.hooks import Hook, HookEntry, HookFunc, as_hook
from hother.logfacade.core.level import Level, level_name_to_level
from hother.logfacade.core.logger import ExitFunc, LoggerConfig, NowFunc

INVALID_LEVEL_WARNING = "Invalid log level, defaulting to Warn"
LEVEL_ENV_VAR = "LOG_LEVEL"


class LoggerOption(Protocol):
    """Something that can configure a Logger."""

    def apply(self, config: LoggerConfig) -> None:
        """Apply this option to ``config``."""
        ...


class LoggerOptionFunc:
    """Adapt a plain function to the LoggerOption interface."""

    def __init__(self, func: Callable[[LoggerConfig], None]):
        self.func = func

    def apply(self, config: LoggerConfig) -> None:
        self.func(config)

    def __repr__(self) -> str:
        return f"LoggerOptionFunc({getattr(self.func, '__qualname__', self.func)!r})"


def _set(**changes: Any) -> LoggerOptionFunc:
    def apply(config: LoggerConfig) -> None:
        for name, value in changes.items():
            setattr(config, name, value)

    return LoggerOptionFunc(apply)


def _apply_level_name(config: LoggerConfig, name: str) -> None:
    level, ok = level_name_to_level(name)
    config.level = level
    if not ok:
        config.pending_warnings.append(INVALID_LEVEL_WARNING)


def with_now_func(now: NowFunc) -> LoggerOption:
    """Use ``now`` as the time source for record timestamps."""
    return _set(now=now)


def with_output(output: TextIO) -> LoggerOption:
    """Write records to ``output``."""
    return _set(output=output)


def with_level(level: Level) -> LoggerOption:
    """Write only records at ``level`` or more severe."""
    return _set(level=Level(level))


def with_level_name(name: str) -> LoggerOption:
    """
    Set the level by name.

    Accepted names are ``fatal``, ``error``, ``warn``, ``info`` and
    ``debug``. Any other name sets warn and logs a warning once the options
    are applied.
    """
    return LoggerOptionFunc(lambda config: _apply_level_name(config, name))


def with_level_from_env(var: str = LEVEL_ENV_VAR) -> LoggerOption:
    """
    Set the level from the environment variable ``var``.

    The variable is read when the option is applied. Unset or invalid values
    behave as an invalid name passed to ``with_level_name``.
    """
    return LoggerOptionFunc(lambda config: _apply_level_name(config, os.environ.get(var, "")))


def with_report_caller(enable: bool) -> LoggerOption:
    """Toggle the ``file`` and ``function`` fields on records."""
    return _set(report_caller=enable)


def with_hook(hook: Hook | Callable[[HookEntry], bool]) -> LoggerOption:
    """Add a hook fired on every record. Hooks run in registration order."""
    hook = as_hook(hook)

    def apply(config: LoggerConfig) -> None:
        config.hooks = (*config.hooks, hook)

    return LoggerOptionFunc(apply)


def with_hook_func(func: Callable[[HookEntry], bool]) -> LoggerOption:
    """Add a plain function as a hook."""
    return with_hook(HookFunc(func))


def with_sort_keys(enable: bool = True) -> LoggerOption:
    """Sort the keys of written records."""
    return _set(sort_keys=enable)


def with_output_format(output_format: OutputFormat | str) -> LoggerOption:
    """Choose the record encoding."""
    return _set(output_format=OutputFormat(output_format))


def with_exit_func(exit_func: ExitFunc) -> LoggerOption:
    """Call ``exit_func(1)`` instead of ``sys.exit`` after a fatal record."""
    return _set(exit_func=exit_func)


def with_engine(engine: Engine) -> LoggerOption:
    """Write records through ``engine`` instead of the structlog engine."""
    return _set(engine=engine)


def with_settings(settings: LoggerSettings) -> LoggerOption:
    """Apply declarative settings, e.g. from ``LoggerSettings.from_env()``."""

    def apply(config: LoggerConfig) -> None:
        _apply_level_name(config, settings.level)
        config.report_caller = settings.report_caller
        config.output_format = settings.output_format
        config.sort_keys = settings.sort_keys

    return LoggerOptionFunc(apply)
