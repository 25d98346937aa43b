"""
Standard library ``logging`` integration.

Routes records of libraries that log through ``logging`` (migration tools,
servers, tracers) into the facade.
"""

import logging
import os
import sys

from hother.logfacade.core.caller import CallerFrame, frame_to_caller
from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.level import engine_level_to_level
from hother.logfacade.core.logger import Logger

LOGGER_KEY = "logger"
EXCEPTION_KEY = "exception"


def record_caller(record: logging.LogRecord) -> CallerFrame:
    """
    Describe the call site of ``record`` the way caller resolution does.

    While a handler runs synchronously the frame that made the record is
    still on the stack, so its module name and qualified function name are
    used. Records handled elsewhere (queued, unpickled) only carry the file
    stem and the bare function name.

    Args:
        record: The stdlib record

    Returns:
        The record's call site
    """
    frame = sys._getframe(1)
    while frame is not None:
        code = frame.f_code
        if (
            frame.f_lineno == record.lineno
            and code.co_name == record.funcName
            and os.path.normcase(code.co_filename) == record.pathname
        ):
            return frame_to_caller(frame)
        frame = frame.f_back

    return CallerFrame(
        file=record.pathname,
        line=record.lineno,
        function=f"{record.module}.{record.funcName}",
    )


class FacadeHandler(logging.Handler):
    """
    Logging handler forwarding stdlib records to the facade.

    Records keep the call site of the original ``logging`` call and the
    name of the stdlib logger under ``logger``. ``CRITICAL`` is written at
    error: a library logging through ``logging`` must not terminate the
    process.

    Example:
        logging.getLogger("uvicorn").addHandler(FacadeHandler(logger))
    """

    def __init__(self, logger: Logger | None = None, level: int = logging.NOTSET):
        """
        Initialize the handler.

        Args:
            logger: Logger to write to (defaults to the global logger)
            level: Minimum stdlib level handled
        """
        super().__init__(level)
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or global_logger()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            fields = {LOGGER_KEY: record.name}
            if record.exc_info:
                fields[EXCEPTION_KEY] = self.formatException(record.exc_info)
            elif record.exc_text:
                fields[EXCEPTION_KEY] = record.exc_text

            entry = self.logger.with_fields(fields).with_caller(record_caller(record))
            entry.log(engine_level_to_level(record.levelno), message)
        except Exception:
            self.handleError(record)

    def formatException(self, exc_info) -> str:
        formatter = self.formatter or logging.Formatter()
        return formatter.formatException(exc_info)


def install_handler(
    logger: Logger | None = None,
    name: str | None = None,
    level: int = logging.NOTSET,
) -> FacadeHandler:
    """
    Attach a FacadeHandler to a stdlib logger.

    Args:
        logger: Logger to write to (defaults to the global logger)
        name: Name of the stdlib logger (defaults to the root logger)
        level: Minimum stdlib level handled

    Returns:
        The attached handler, for later removal
    """
    handler = FacadeHandler(logger, level)
    logging.getLogger(name).addHandler(handler)
    return handler
