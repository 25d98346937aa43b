"""
The structured-logging engine the facade writes through.

The facade decides *what* gets logged (level, message, fields, time); the
engine decides whether the level passes, how the record is encoded and where
it is written. The default engine is built on structlog.
"""

import json
import sys
import threading
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Protocol, TextIO

import structlog
from pydantic import BaseModel

from hother.logfacade.core.level import Level, level_to_engine_level
from hother.logfacade.utils.logging import get_logger

# Keys owned by the record itself; user fields with these names are renamed.
RESERVED_KEYS = ("level", "time", "msg")
CLASH_PREFIX = "fields."

# structlog keeps the message under "event"; a user field of that name is
# carried under this key and restored by EventRenamer.
_EVENT_FIELD = "_event_field"


class OutputFormat(str, Enum):
    """Encoding of written records."""

    JSON = "json"
    CONSOLE = "console"
    KEY_VALUE = "key_value"


class Engine(Protocol):
    """Filtering, formatting and writing of records."""

    def set_output(self, output: TextIO) -> None:
        """Write subsequent records to ``output``."""
        ...

    def set_level(self, level: Level) -> None:
        """Drop subsequent records less severe than ``level``."""
        ...

    def log(
        self,
        level: Level,
        message: str,
        fields: Mapping[str, Any],
        timestamp: datetime,
        context: Any = None,
    ) -> None:
        """Write one record if ``level`` passes."""
        ...


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp as RFC3339 with at most millisecond precision.

    Sub-second digits are truncated to milliseconds, trailing zeros are
    trimmed, and the fraction is omitted when it is zero. UTC is written as
    ``Z``. Naive datetimes are taken to be local time.

    Examples:
        >>> from datetime import UTC
        >>> format_timestamp(datetime(2020, 2, 3, 4, 5, 6, 789012, tzinfo=UTC))
        '2020-02-03T04:05:06.789Z'
        >>> format_timestamp(datetime(2020, 2, 3, 4, 5, 8, 120000, tzinfo=UTC))
        '2020-02-03T04:05:08.12Z'
        >>> format_timestamp(datetime(2020, 2, 3, 4, 5, 8, 999, tzinfo=UTC))
        '2020-02-03T04:05:08Z'
    """
    if ts.tzinfo is None:
        ts = ts.astimezone()

    text = ts.strftime("%Y-%m-%dT%H:%M:%S")
    millis = ts.microsecond // 1000
    if millis:
        text += "." + f"{millis:03d}".rstrip("0")

    offset = ts.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"

    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def encode_value(value: Any) -> Any:
    """
    JSON fallback for field values the json module cannot encode.

    Exceptions are written as their message.
    """
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    return repr(value)


def _is_encodable(value: Any) -> bool:
    try:
        json.dumps(value, default=encode_value)
    except (TypeError, ValueError, RecursionError):
        return False
    return True


def prefix_field_clashes(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Rename user fields that collide with the record's own keys."""
    data = dict(fields)
    for key in RESERVED_KEYS:
        if key in data:
            data[CLASH_PREFIX + key] = data.pop(key)
    return data


def _errors_as_messages(logger: Any, method_name: str, event_dict: dict) -> dict:
    # Console and key/value renderers use repr() otherwise.
    for key, value in event_dict.items():
        if isinstance(value, BaseException):
            event_dict[key] = str(value)
    return event_dict


def _order_keys(logger: Any, method_name: str, event_dict: dict) -> dict:
    ordered = {key: event_dict.pop(key) for key in RESERVED_KEYS if key in event_dict}
    ordered.update(event_dict)
    return ordered


class StructlogEngine:
    """
    Engine writing one rendered line per record through structlog.

    Writes go through a ``structlog.PrintLogger``, which serializes writes to
    the same file, so concurrent records never interleave.
    """

    def __init__(
        self,
        output: TextIO | None = None,
        level: Level = Level.WARN,
        output_format: OutputFormat = OutputFormat.JSON,
        sort_keys: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            output: Text stream to write to (defaults to the current stdout)
            level: Minimum level to write
            output_format: Encoding of written records
            sort_keys: Whether to sort keys in written records
        """
        self._lock = threading.Lock()
        self._sink = structlog.PrintLogger(output if output is not None else sys.stdout)
        self._min_engine_level = level_to_engine_level(level)
        self._output_format = OutputFormat(output_format)
        self._sort_keys = sort_keys
        self._processors = self._build_processors(self._output_format, sort_keys)

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    @property
    def sort_keys(self) -> bool:
        return self._sort_keys

    def set_output(self, output: TextIO) -> None:
        with self._lock:
            self._sink = structlog.PrintLogger(output)

    def set_level(self, level: Level) -> None:
        with self._lock:
            self._min_engine_level = level_to_engine_level(level)

    def set_format(self, output_format: OutputFormat, sort_keys: bool = False) -> None:
        """Change the encoding of subsequent records."""
        output_format = OutputFormat(output_format)
        with self._lock:
            self._output_format = output_format
            self._sort_keys = sort_keys
            self._processors = self._build_processors(output_format, sort_keys)

    def is_enabled(self, level: Level) -> bool:
        return level_to_engine_level(level) >= self._min_engine_level

    def log(
        self,
        level: Level,
        message: str,
        fields: Mapping[str, Any],
        timestamp: datetime,
        context: Any = None,
    ) -> None:
        if not self.is_enabled(level):
            return

        data = prefix_field_clashes(fields)
        data["time"] = format_timestamp(timestamp)
        if "event" in data:
            data[_EVENT_FIELD] = data.pop("event")

        # The user fields become the bound context directly so that no field
        # name can collide with a keyword parameter of the logging call.
        bound = structlog.BoundLogger(self._sink, self._processors, data)
        try:
            getattr(bound, level.method_name)(message)
        except (TypeError, ValueError, RecursionError) as e:
            self._write_degraded(level, message, data, e)

    def _write_degraded(self, level: Level, message: str, data: dict[str, Any], error: Exception) -> None:
        """
        Write a record whose fields could not be encoded.

        Values the encoder rejects (non-string keys inside a mapping, circular
        references) are written as their repr. If the record still cannot be
        written it is dropped and the failure reported on stderr.

        Args:
            level: Record level
            message: Record message
            data: Record fields, already renamed and timestamped
            error: The error raised by the first attempt
        """
        fallback = {key: value if _is_encodable(value) else repr(value) for key, value in data.items()}
        bound = structlog.BoundLogger(self._sink, self._processors, fallback)
        try:
            getattr(bound, level.method_name)(message)
        except (TypeError, ValueError, RecursionError) as e:
            get_logger(__name__).error(
                "Failed to write record",
                msg=message,
                error=str(e),
                error_type=type(e).__name__,
                first_error=str(error),
            )

    @staticmethod
    def _build_processors(output_format: OutputFormat, sort_keys: bool) -> list:
        processors: list = [
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("msg", replace_by=_EVENT_FIELD),
        ]

        if output_format is OutputFormat.JSON:
            processors.append(_order_keys)
            processors.append(structlog.processors.JSONRenderer(serializer=json.dumps, sort_keys=sort_keys, default=encode_value))
        elif output_format is OutputFormat.CONSOLE:
            processors.append(_errors_as_messages)
            processors.append(structlog.dev.ConsoleRenderer(colors=False, event_key="msg", timestamp_key="time", sort_keys=sort_keys))
        else:
            processors.append(_errors_as_messages)
            processors.append(
                structlog.processors.KeyValueRenderer(
                    sort_keys=sort_keys,
                    key_order=None if sort_keys else list(RESERVED_KEYS),
                    drop_missing=True,
                )
            )
        return processors


def default_engine(output: TextIO | None = None) -> StructlogEngine:
    """Engine used by loggers that were not given one."""
    return StructlogEngine(output=output)
