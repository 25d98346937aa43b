"""
Log levels and their mapping to names and engine levels.
"""

import logging
from enum import IntEnum

from hother.logfacade.core.exceptions import InvalidLevelNameError


class Level(IntEnum):
    """
    Severity of a log record.

    Lower values are more severe. A logger configured at level ``L`` emits a
    record at level ``V`` iff ``V <= L``.
    """

    # Predictable errors that make the service unusable, eg misconfiguration.
    # The process is shut down after the record is written.
    FATAL = 0
    # Recoverable errors that limit the service's functionality, eg timeouts.
    ERROR = 1
    # Non-critical errors that may require some attention.
    WARN = 2
    # Monitoring of successful interactions, eg run time or job result.
    INFO = 3
    # Only for dev/test environments.
    DEBUG = 4

    @property
    def method_name(self) -> str:
        """Name of the engine method used to emit at this level."""
        return _METHOD_NAMES[self]

    @property
    def display_name(self) -> str:
        """Name rendered in the ``level`` key of emitted records."""
        return _DISPLAY_NAMES[self]

    def enabled_for(self, minimum: "Level") -> bool:
        """Whether a record at this level passes a logger set to ``minimum``."""
        return self <= minimum

    @classmethod
    def parse(cls, name: str) -> "Level":
        """
        Parse a level name.

        Args:
            name: Case-insensitive level name

        Returns:
            The matching level

        Raises:
            InvalidLevelNameError: If the name is unknown
        """
        try:
            return _NAME_MAPPING[name.strip().lower()]
        except (KeyError, AttributeError):
            raise InvalidLevelNameError(str(name)) from None


_METHOD_NAMES = {
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warn",
    Level.INFO: "info",
    Level.DEBUG: "debug",
}

_DISPLAY_NAMES = {
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warning",
    Level.INFO: "info",
    Level.DEBUG: "debug",
}

_NAME_MAPPING = {
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
}

_ENGINE_LEVELS = {
    Level.FATAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARN: logging.WARNING,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
}


def level_names() -> dict[str, Level]:
    """All accepted level names and the level each one selects."""
    return dict(_NAME_MAPPING)


def level_name_to_level(name: str) -> tuple[Level, bool]:
    """
    Map a level name to a level without raising.

    Args:
        name: Case-insensitive level name

    Returns:
        ``(level, True)`` for a known name, ``(Level.WARN, False)`` otherwise
    """
    try:
        return Level.parse(name), True
    except InvalidLevelNameError:
        return Level.WARN, False


def level_to_engine_level(level: int) -> int:
    """
    Map a level to the numeric level used by the engine.

    Values outside the enumeration fall back to the most verbose level.
    """
    return _ENGINE_LEVELS.get(level, logging.DEBUG)


def engine_level_to_level(engine_level: int) -> Level:
    """
    Map a numeric engine (stdlib) level to the nearest level at or below it.

    ``CRITICAL`` maps to ``ERROR``: records coming from other libraries must
    never terminate the process.
    """
    if engine_level >= logging.ERROR:
        return Level.ERROR
    if engine_level >= logging.WARNING:
        return Level.WARN
    if engine_level >= logging.INFO:
        return Level.INFO
    return Level.DEBUG
