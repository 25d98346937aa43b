"""
SQLAlchemy integration logging database activity through the facade.
"""

import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine

from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.logger import Logger

_START_KEY = "logfacade_query_start"


class SQLAlchemyLogger:
    """
    Database logger writing through the facade.

    Statement tracing logs the affected row count and the elapsed time of
    each statement at debug, or at error with the exception when the
    statement failed. The SQL text itself is never logged since it may
    contain personal data.

    Example:
        db_logger = SQLAlchemyLogger(logger, trace_enabled=True)
        db_logger.install(engine)
    """

    def __init__(self, logger: Logger | None = None, trace_enabled: bool = False):
        """
        Initialize the database logger.

        Args:
            logger: Logger to write to (defaults to the global logger)
            trace_enabled: Whether ``trace`` writes anything
        """
        self._logger = logger
        self.trace_enabled = trace_enabled

    @property
    def logger(self) -> Logger:
        return self._logger or global_logger()

    def info(self, context: Any, msg: str, *args: Any) -> None:
        self.logger.with_context(context).infof(msg, *args)

    def warn(self, context: Any, msg: str, *args: Any) -> None:
        self.logger.with_context(context).warnf(msg, *args)

    def error(self, context: Any, msg: str, *args: Any) -> None:
        self.logger.with_context(context).errorf(msg, *args)

    def trace(
        self,
        context: Any,
        begin: float,
        fc: Callable[[], tuple[str, int]],
        err: BaseException | None = None,
    ) -> None:
        """
        Log the outcome of one statement.

        Args:
            context: Context attached to the record (e.g. the execution context)
            begin: ``time.perf_counter()`` value taken before the statement ran
            fc: Returns the SQL text and the number of affected rows
            err: Exception raised by the statement, if any
        """
        if not self.trace_enabled:
            return

        elapsed = timedelta(seconds=time.perf_counter() - begin)
        # SQL is dropped for privacy
        _, rows = fc()
        entry = self.logger.with_context(context).with_fields({"rows": rows, "elapsed": elapsed})
        if err is not None:
            entry.with_error(err).error()
            return
        entry.debug()

    def install(self, engine: Engine | AsyncEngine) -> None:
        """Trace every statement executed on ``engine``."""
        engine = _sync_engine(engine)
        event.listen(engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(engine, "after_cursor_execute", self._after_cursor_execute)
        event.listen(engine, "handle_error", self._handle_error)

    def uninstall(self, engine: Engine | AsyncEngine) -> None:
        """Stop tracing statements executed on ``engine``."""
        engine = _sync_engine(engine)
        event.remove(engine, "before_cursor_execute", self._before_cursor_execute)
        event.remove(engine, "after_cursor_execute", self._after_cursor_execute)
        event.remove(engine, "handle_error", self._handle_error)

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault(_START_KEY, []).append(time.perf_counter())

    def _after_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        begin = _pop_start(conn.info)
        rows = cursor.rowcount
        self.trace(context, begin, lambda: (statement, rows))

    def _handle_error(self, exception_context):
        conn = exception_context.connection
        begin = _pop_start(conn.info) if conn is not None else time.perf_counter()
        statement = exception_context.statement
        self.trace(
            exception_context.execution_context,
            begin,
            lambda: (statement, -1),
            exception_context.original_exception,
        )


def _sync_engine(engine: Engine | AsyncEngine) -> Engine:
    if isinstance(engine, AsyncEngine):
        return engine.sync_engine
    return engine


def _pop_start(info: dict) -> float:
    starts = info.get(_START_KEY)
    if starts:
        return starts.pop()
    return time.perf_counter()
