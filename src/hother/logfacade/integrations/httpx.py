"""
HTTPX integration logging outgoing requests through the facade.
"""

import time

import httpx

from hother.logfacade.core.global_logger import global_logger
from hother.logfacade.core.logger import Logger

_START_KEY = "logfacade_start"


class HTTPXLogger:
    """
    Event hooks logging each request and its response.

    Requests are logged at debug. Responses are logged with ``status`` and
    ``elapsed_ms`` at info, warn for 4xx and error for 5xx.

    Example:
        http_logger = HTTPXLogger(logger)
        async with httpx.AsyncClient(event_hooks=http_logger.async_event_hooks()) as client:
            await client.get("https://example.com")
    """

    def __init__(self, logger: Logger | None = None):
        """
        Initialize the hooks.

        Args:
            logger: Logger to write to (defaults to the global logger)
        """
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or global_logger()

    def log_request(self, request: httpx.Request) -> None:
        """Request hook for ``httpx.Client``."""
        request.extensions[_START_KEY] = time.perf_counter()
        self.logger.with_fields({"method": request.method, "url": str(request.url)}).debug("HTTP request")

    def log_response(self, response: httpx.Response) -> None:
        """Response hook for ``httpx.Client``."""
        request = response.request
        fields = {"method": request.method, "url": str(request.url), "status": response.status_code}
        start = request.extensions.get(_START_KEY)
        if start is not None:
            fields["elapsed_ms"] = round((time.perf_counter() - start) * 1000, 3)

        entry = self.logger.with_fields(fields)
        if response.status_code >= 500:
            entry.error("HTTP response")
        elif response.status_code >= 400:
            entry.warn("HTTP response")
        else:
            entry.info("HTTP response")

    async def alog_request(self, request: httpx.Request) -> None:
        """Request hook for ``httpx.AsyncClient``."""
        self.log_request(request)

    async def alog_response(self, response: httpx.Response) -> None:
        """Response hook for ``httpx.AsyncClient``."""
        self.log_response(response)

    def event_hooks(self) -> dict[str, list]:
        """Event hooks for ``httpx.Client(event_hooks=...)``."""
        return {"request": [self.log_request], "response": [self.log_response]}

    def async_event_hooks(self) -> dict[str, list]:
        """Event hooks for ``httpx.AsyncClient(event_hooks=...)``."""
        return {"request": [self.alog_request], "response": [self.alog_response]}
