"""
Printf-style logger for tools that expect ``printf``/``fatalf``.
"""

from typing import Any

from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.logger import Logger


class PrintfLogger:
    """
    Minimal printf-style logger writing through the facade.

    ``printf`` logs at info. ``fatalf`` logs at fatal and terminates the
    process through the logger's exit function.
    """

    def __init__(self, logger: Logger | None = None):
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or global_logger()

    def printf(self, format: str, *args: Any) -> None:
        self.logger.infof(format, *args)

    def fatalf(self, format: str, *args: Any) -> None:
        self.logger.fatalf(format, *args)
