"""
Log entries: immutable field builders that dispatch leveled records.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from hother.logfacade.core.caller import CallerFrame, resolve_caller
from hother.logfacade.core.hooks import HookEntry, run_hooks
from hother.logfacade.core.level import Level

if TYPE_CHECKING:
    from hother.logfacade.core.logger import Logger

ERROR_KEY = "error"
FILE_KEY = "file"
FUNCTION_KEY = "function"


def _as_level(level: int) -> Level:
    try:
        return Level(level)
    except ValueError:
        return Level.DEBUG


def _sprint(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args)


def _sprintf(format: str, args: tuple[Any, ...]) -> str:
    if not args:
        return format
    try:
        return format % args
    except (TypeError, ValueError):
        # A bad format string must not take the logging call down.
        return f"{format} {_sprint(args)}"


class Entry:
    """
    Accumulated fields and context bound to a Logger.

    Entries are never mutated: every ``with_*`` call returns a new entry
    holding its own copy of the fields, so one entry can be shared and
    derived from concurrently.

    Example:
        entry = logger.with_field("job", "sync")
        entry.info("started")
        entry.with_error(err).error("failed")
    """

    __slots__ = ("_logger", "_fields", "_context", "_caller")

    def __init__(
        self,
        logger: "Logger",
        fields: Mapping[str, Any] | None = None,
        context: Any = None,
        caller: CallerFrame | None = None,
    ):
        self._logger = logger
        self._fields: dict[str, Any] = dict(fields) if fields else {}
        self._context = context
        self._caller = caller

    def __repr__(self) -> str:
        return f"Entry(fields={self._fields!r}, context={self._context!r})"

    @property
    def logger(self) -> "Logger":
        return self._logger

    @property
    def fields(self) -> dict[str, Any]:
        """Copy of the accumulated fields."""
        return dict(self._fields)

    @property
    def context(self) -> Any:
        return self._context

    @property
    def caller(self) -> CallerFrame | None:
        """Explicit call site set with ``with_caller``, if any."""
        return self._caller

    # Derivation
    def with_field(self, key: str, value: Any) -> "Entry":
        """Return a new entry with one more field."""
        return self.with_fields({key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> "Entry":
        """Return a new entry with ``fields`` merged over the current ones."""
        merged = dict(self._fields)
        merged.update(fields)
        return Entry(self._logger, merged, self._context, self._caller)

    def with_error(self, err: BaseException | Any) -> "Entry":
        """Convenience wrapper for ``with_field("error", err)``."""
        return self.with_field(ERROR_KEY, err)

    def with_context(self, context: Any) -> "Entry":
        """Return a new entry carrying ``context`` for hooks."""
        return Entry(self._logger, self._fields, context, self._caller)

    def with_caller(self, caller: CallerFrame | None) -> "Entry":
        """
        Return a new entry that reports ``caller`` instead of resolving one.

        Meant for adapters that already know the original call site, e.g. a
        stdlib ``LogRecord``.
        """
        return Entry(self._logger, self._fields, self._context, caller)

    # Leveled methods
    def debug(self, *args: Any) -> None:
        """Log at debug level. Arguments are joined with spaces."""
        self._log(Level.DEBUG, _sprint(args))

    def debugf(self, format: str, *args: Any) -> None:
        """Log a printf-style formatted message at debug level."""
        self._log(Level.DEBUG, _sprintf(format, args))

    def info(self, *args: Any) -> None:
        self._log(Level.INFO, _sprint(args))

    def infof(self, format: str, *args: Any) -> None:
        self._log(Level.INFO, _sprintf(format, args))

    def warn(self, *args: Any) -> None:
        self._log(Level.WARN, _sprint(args))

    def warnf(self, format: str, *args: Any) -> None:
        self._log(Level.WARN, _sprintf(format, args))

    warning = warn
    warningf = warnf

    def error(self, *args: Any) -> None:
        self._log(Level.ERROR, _sprint(args))

    def errorf(self, format: str, *args: Any) -> None:
        self._log(Level.ERROR, _sprintf(format, args))

    def fatal(self, *args: Any) -> None:
        """Log at fatal level, then terminate the process with exit code 1."""
        self._log(Level.FATAL, _sprint(args))

    def fatalf(self, format: str, *args: Any) -> None:
        """Log a formatted message at fatal level, then terminate the process."""
        self._log(Level.FATAL, _sprintf(format, args))

    def log(self, level: Level | int, *args: Any) -> None:
        """Log at ``level``. Fatal terminates the process as with ``fatal``."""
        self._log(_as_level(level), _sprint(args))

    def logf(self, level: Level | int, format: str, *args: Any) -> None:
        self._log(_as_level(level), _sprintf(format, args))

    def _log(self, level: Level, message: str) -> None:
        # Must only be called directly from a leveled method: the caller
        # resolver skips a fixed number of frames before inspecting them.
        config = self._logger.config
        try:
            if not level.enabled_for(config.level):
                return

            fields = dict(self._fields)
            caller = None
            if config.report_caller:
                caller = self._caller or resolve_caller()
            if caller is not None:
                fields[FILE_KEY] = caller.location
                fields[FUNCTION_KEY] = caller.function

            record = HookEntry(data=fields, level=level, message=message, context=self._context)
            if config.hooks:
                record = run_hooks(config.hooks, record)

            config.engine.log(record.level, record.message, record.data, config.now(), record.context)
        finally:
            if level is Level.FATAL:
                config.exit_func(1)
