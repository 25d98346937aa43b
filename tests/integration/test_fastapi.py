"""
Tests for the FastAPI integration.
"""

import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from hother.logfacade import Entry, Level, set_global_logger, with_level
from hother.logfacade.integrations.fastapi import RequestLoggingMiddleware, get_request_entry


@pytest.fixture
def app(logger):
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, logger=logger)

    @app.get("/items")
    async def list_items(log: Entry = Depends(get_request_entry)):
        log.with_field("count", 2).info("Listing items")
        return ["a", "b"]

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="Not found")

    @app.get("/broken")
    async def broken():
        raise RuntimeError("database down")

    return app


class TestRequestLoggingMiddleware:
    """Test request logging through the middleware."""

    def test_successful_request(self, app, capture):
        """Test the handler log and the completion log carry request fields."""
        client = TestClient(app)

        response = client.get("/items")

        assert response.status_code == 200
        handler, done = capture.records()
        assert handler["msg"] == "Listing items"
        assert handler["count"] == 2
        assert handler["method"] == "GET"
        assert handler["path"] == "/items"
        assert handler["function"].endswith("list_items")

        assert done["msg"] == "Request completed"
        assert done["level"] == "info"
        assert done["status"] == 200
        assert done["path"] == "/items"
        assert done["client"] == "testclient"
        assert done["elapsed_ms"] >= 0

    def test_client_error_logged_as_warning(self, app, capture):
        """Test 4xx responses are logged at warn."""
        client = TestClient(app)

        response = client.get("/missing")

        assert response.status_code == 404
        done = capture.last()
        assert done["level"] == "warning"
        assert done["status"] == 404

    def test_unhandled_exception_logged_and_reraised(self, app, capture):
        """Test exceptions are logged at error and propagate."""
        client = TestClient(app)

        with pytest.raises(RuntimeError, match="database down"):
            client.get("/broken")

        failed = capture.last()
        assert failed["level"] == "error"
        assert failed["msg"] == "Request failed"
        assert failed["error"] == "database down"
        assert failed["path"] == "/broken"

    def test_level_applies(self, make_logger, capture):
        """Test completion records respect the logger level."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware, logger=make_logger(with_level(Level.WARN)))

        @app.get("/ok")
        async def ok():
            return {}

        TestClient(app).get("/ok")

        assert capture.lines() == []


class TestGetRequestEntry:
    """Test the request entry dependency."""

    def test_without_middleware(self, logger, capture):
        """Test an entry is created from the global logger when needed."""
        set_global_logger(logger)
        app = FastAPI()

        @app.get("/plain")
        async def plain(log: Entry = Depends(get_request_entry)):
            log.info("No middleware")
            return {}

        TestClient(app).get("/plain")

        record = capture.last()
        assert record["msg"] == "No middleware"
        assert record["method"] == "GET"
        assert record["path"] == "/plain"
