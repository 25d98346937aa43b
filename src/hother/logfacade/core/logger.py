"""
The Logger: configuration holder and entry point of the facade.
"""

import sys
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TextIO

from hother.logfacade.core.caller import CallerFrame
from hother.logfacade.core.engine import Engine, OutputFormat, StructlogEngine
from hother.logfacade.core.entry import Entry
from hother.logfacade.core.hooks import Hook
from hother.logfacade.core.level import Level

if TYPE_CHECKING:
    from hother.logfacade.core.options import LoggerOption

Fields = dict[str, Any]
NowFunc = Callable[[], datetime]
ExitFunc = Callable[[int], Any]


def utc_now() -> datetime:
    """Default time source."""
    return datetime.now(UTC)


@dataclass
class LoggerConfig:
    """
    Settings of a Logger.

    A Logger never mutates the config it is using. Options are applied to a
    copy which then replaces the current one as a whole, so a record is
    always produced from one consistent set of settings.

    Attributes:
        level: Minimum level that is written
        output: Stream records are written to (None means the current stdout)
        report_caller: Whether ``file`` and ``function`` fields are attached
        now: Time source for record timestamps
        hooks: Hooks fired on every record, in registration order
        sort_keys: Whether written records have their keys sorted
        output_format: Encoding of written records
        exit_func: Called with exit code 1 after a fatal record
        engine: Engine records are written through (None means a structlog engine)
        pending_warnings: Warnings raised while applying options, logged once applied
    """

    level: Level = Level.WARN
    output: TextIO | None = None
    report_caller: bool = True
    now: NowFunc = utc_now
    hooks: tuple[Hook, ...] = ()
    sort_keys: bool = False
    output_format: OutputFormat = OutputFormat.JSON
    exit_func: ExitFunc = sys.exit
    engine: Engine | None = None
    pending_warnings: list[str] = field(default_factory=list)


class Logger:
    """
    Structured logger writing leveled records with fields.

    Defaults: level warn, JSON output to stdout, caller reporting on, time
    from ``datetime.now(UTC)``, process exit on fatal.

    Example:
        logger = Logger(with_level(Level.INFO), with_output(sys.stderr))
        logger.with_field("user", user_id).info("signed in")
    """

    def __init__(self, *options: "LoggerOption"):
        """
        Initialize the logger.

        Args:
            *options: Options applied in order over the defaults
        """
        self._lock = threading.Lock()
        self._config = LoggerConfig()
        self.apply_options(*options)

    def apply_options(self, *options: "LoggerOption") -> None:
        """
        Apply options over the current configuration.

        Safe to call while other threads are logging. Warnings produced by
        the options are logged after the new configuration is in place.
        """
        with self._lock:
            config = replace(self._config, pending_warnings=[])
            for option in options:
                option.apply(config)

            if config.output is None:
                config.output = sys.stdout
            if config.engine is None:
                config.engine = StructlogEngine()

            config.engine.set_output(config.output)
            config.engine.set_level(config.level)
            if isinstance(config.engine, StructlogEngine):
                config.engine.set_format(config.output_format, config.sort_keys)

            self._config = config

        for message in config.pending_warnings:
            self.warn(message)

    @property
    def config(self) -> LoggerConfig:
        """The configuration currently in use."""
        return self._config

    @property
    def level(self) -> Level:
        return self._config.level

    @property
    def output(self) -> TextIO:
        return self._config.output

    @property
    def report_caller(self) -> bool:
        return self._config.report_caller

    @property
    def hooks(self) -> tuple[Hook, ...]:
        return self._config.hooks

    @property
    def engine(self) -> Engine:
        return self._config.engine

    def is_level_enabled(self, level: Level) -> bool:
        """Whether records at ``level`` would be written."""
        return level.enabled_for(self._config.level)

    # Entry derivation
    def entry(self) -> Entry:
        """Return an empty entry bound to this logger."""
        return Entry(self)

    def with_field(self, key: str, value: Any) -> Entry:
        return Entry(self, {key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> Entry:
        return Entry(self, fields)

    def with_error(self, err: BaseException | Any) -> Entry:
        return Entry(self).with_error(err)

    def with_context(self, context: Any) -> Entry:
        return Entry(self, context=context)

    def with_caller(self, caller: CallerFrame | None) -> Entry:
        return Entry(self, caller=caller)

    # Leveled methods, each delegating to a fresh entry
    def debug(self, *args: Any) -> None:
        Entry(self).debug(*args)

    def debugf(self, format: str, *args: Any) -> None:
        Entry(self).debugf(format, *args)

    def info(self, *args: Any) -> None:
        Entry(self).info(*args)

    def infof(self, format: str, *args: Any) -> None:
        Entry(self).infof(format, *args)

    def warn(self, *args: Any) -> None:
        Entry(self).warn(*args)

    def warnf(self, format: str, *args: Any) -> None:
        Entry(self).warnf(format, *args)

    def warning(self, *args: Any) -> None:
        Entry(self).warn(*args)

    def warningf(self, format: str, *args: Any) -> None:
        Entry(self).warnf(format, *args)

    def error(self, *args: Any) -> None:
        Entry(self).error(*args)

    def errorf(self, format: str, *args: Any) -> None:
        Entry(self).errorf(format, *args)

    def fatal(self, *args: Any) -> None:
        """Log at fatal level, then terminate the process with exit code 1."""
        Entry(self).fatal(*args)

    def fatalf(self, format: str, *args: Any) -> None:
        Entry(self).fatalf(format, *args)

    def log(self, level: Level | int, *args: Any) -> None:
        Entry(self).log(level, *args)

    def logf(self, level: Level | int, format: str, *args: Any) -> None:
        Entry(self).logf(level, format, *args)
