"""
FastAPI integration for request-scoped logging.
"""

import time

from fastapi import Request

from hother.logfacade.core.entry import Entry
from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.logger import Logger

SCOPE_KEY = "log_entry"


class RequestLoggingMiddleware:
    """
    ASGI middleware that logs every HTTP request through the facade.

    A request entry carrying ``method``, ``path`` and ``client`` is stored
    in the ASGI scope for handlers to log with (see ``get_request_entry``).
    Completion is logged with ``status`` and ``elapsed_ms``: at info for
    successful responses, warn for 4xx and error for 5xx. Unhandled
    exceptions are logged at error and re-raised.

    Example:
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware, logger=logger)
    """

    def __init__(self, app, logger: Logger | None = None):
        """
        Initialize middleware.

        Args:
            app: ASGI application
            logger: Logger to write to (defaults to the global logger)
        """
        self.app = app
        self.logger = logger

    async def __call__(self, scope, receive, send):
        """ASGI middleware implementation."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        logger = self.logger or global_logger()
        client = scope.get("client")
        entry = logger.with_fields(
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "client": client[0] if client else None,
            }
        ).with_context(scope)
        scope[SCOPE_KEY] = entry

        status_code = 500
        start = time.perf_counter()

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            entry.with_fields({"elapsed_ms": _elapsed_ms(start)}).with_error(e).error("Request failed")
            raise

        done = entry.with_fields({"status": status_code, "elapsed_ms": _elapsed_ms(start)})
        if status_code >= 500:
            done.error("Request completed")
        elif status_code >= 400:
            done.warn("Request completed")
        else:
            done.info("Request completed")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def get_request_entry(request: Request) -> Entry:
    """
    Get the log entry of a request.

    Usable directly or as a FastAPI dependency.

    Args:
        request: FastAPI request

    Returns:
        Entry bound to this request

    Example:
        @app.get("/items")
        async def list_items(log: Entry = Depends(get_request_entry)):
            log.info("Listing items")
    """
    if SCOPE_KEY in request.scope:
        return request.scope[SCOPE_KEY]

    # Create a new entry if middleware not installed
    entry = global_logger().with_fields({"method": request.method, "path": request.url.path}).with_context(request.scope)
    request.scope[SCOPE_KEY] = entry
    return entry
