"""
Key/value logger for frameworks logging ``(level, k1, v1, k2, v2, ...)``.
"""

from typing import Any

from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.level import Level
from hother.logfacade.core.logger import Logger

EXTRA_KEY = "extra"
MESSAGE_KEY = "msg"


class KeyValueLogger:
    """
    Logger taking alternating keys and values.

    Pairs become fields of the record, except a ``msg`` pair which becomes
    the message. A trailing key without a value is kept under ``extra``.
    Calls without key/values are ignored.

    Example:
        kv = KeyValueLogger(logger)
        kv.log(Level.INFO, "msg", "user created", "user", user_id)
    """

    def __init__(self, logger: Logger | None = None):
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or global_logger()

    def log(self, level: Level | int, *keyvals: Any) -> None:
        if not keyvals:
            return

        fields = {}
        pairs = len(keyvals) - len(keyvals) % 2
        for i in range(0, pairs, 2):
            fields[str(keyvals[i])] = keyvals[i + 1]
        if len(keyvals) % 2:
            fields[EXTRA_KEY] = keyvals[-1]

        message = fields.pop(MESSAGE_KEY, "")
        self.logger.with_fields(fields).log(level, message)
