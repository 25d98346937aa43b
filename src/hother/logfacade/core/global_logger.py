"""
Process-wide logger and module-level logging functions.

The global logger is created on first use with default options. Every
module-level function resolves it at call time, so reconfiguring it affects
all subsequent calls.
"""

import threading
from collections.abc import Mapping
from typing import Any, TextIO

from hother.logfacade.core.caller import CallerFrame
from hother.logfacade.core.entry import Entry
from hother.logfacade.core.level import Level
from hother.logfacade.core.logger import Logger, NowFunc
from hother.logfacade.core.options import (
    LoggerOption,
    with_level,
    with_now_func,
    with_output,
    with_report_caller,
)

_global_logger: Logger | None = None
_lock = threading.Lock()


def global_logger() -> Logger:
    """
    Get the process-wide logger, creating it on first use.

    Returns:
        The global Logger instance
    """
    global _global_logger

    if _global_logger is None:
        with _lock:
            # Double-check after acquiring lock
            if _global_logger is None:
                _global_logger = Logger()
    return _global_logger


def configure_global_logger(*options: LoggerOption) -> None:
    """Apply options to the global logger."""
    global_logger().apply_options(*options)


def set_global_logger(logger: Logger | None) -> Logger | None:
    """
    Replace the global logger.

    Passing None makes the next use create a fresh default logger.

    Returns:
        The logger that was replaced, if any
    """
    global _global_logger

    with _lock:
        previous = _global_logger
        _global_logger = logger
    return previous


def set_output(output: TextIO) -> None:
    """Write records of the global logger to ``output``."""
    configure_global_logger(with_output(output))


def set_level(level: Level) -> None:
    configure_global_logger(with_level(level))


def set_now_func(now: NowFunc) -> None:
    configure_global_logger(with_now_func(now))


def set_report_caller(enable: bool) -> None:
    configure_global_logger(with_report_caller(enable))


# Entry derivation
def with_field(key: str, value: Any) -> Entry:
    return global_logger().with_field(key, value)


def with_fields(fields: Mapping[str, Any]) -> Entry:
    return global_logger().with_fields(fields)


def with_error(err: BaseException | Any) -> Entry:
    return global_logger().with_error(err)


def with_context(context: Any) -> Entry:
    return global_logger().with_context(context)


def with_caller(caller: CallerFrame | None) -> Entry:
    return global_logger().with_caller(caller)


# Leveled functions
def debug(*args: Any) -> None:
    global_logger().debug(*args)


def debugf(format: str, *args: Any) -> None:
    global_logger().debugf(format, *args)


def info(*args: Any) -> None:
    global_logger().info(*args)


def infof(format: str, *args: Any) -> None:
    global_logger().infof(format, *args)


def warn(*args: Any) -> None:
    global_logger().warn(*args)


def warnf(format: str, *args: Any) -> None:
    global_logger().warnf(format, *args)


def warning(*args: Any) -> None:
    global_logger().warning(*args)


def warningf(format: str, *args: Any) -> None:
    global_logger().warningf(format, *args)


def error(*args: Any) -> None:
    global_logger().error(*args)


def errorf(format: str, *args: Any) -> None:
    global_logger().errorf(format, *args)


def fatal(*args: Any) -> None:
    """Log at fatal level on the global logger, then terminate the process."""
    global_logger().fatal(*args)


def fatalf(format: str, *args: Any) -> None:
    global_logger().fatalf(format, *args)


def log(level: Level | int, *args: Any) -> None:
    global_logger().log(level, *args)


def logf(level: Level | int, format: str, *args: Any) -> None:
    global_logger().logf(level, format, *args)
