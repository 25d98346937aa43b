"""
Tests for the standard library logging integration.
"""

import inspect
import logging
import os

import pytest

from hother.logfacade import Level, with_exit_func, with_level
from hother.logfacade.integrations.stdlib import FacadeHandler, install_handler


@pytest.fixture
def stdlib_logger():
    logger = logging.getLogger("tests.thirdparty")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.handlers.clear()
    logger.propagate = True


class TestFacadeHandler:
    """Test forwarding stdlib records to the facade."""

    def test_record_forwarded(self, logger, capture, stdlib_logger):
        """Test message, level, logger name and call site."""
        stdlib_logger.addHandler(FacadeHandler(logger))

        line = inspect.currentframe().f_lineno + 1
        stdlib_logger.warning("disk at %d%%", 91)

        record = capture.last()
        assert record["msg"] == "disk at 91%"
        assert record["level"] == "warning"
        assert record["logger"] == "tests.thirdparty"
        assert record["file"].endswith(f"{os.path.basename(__file__)}:{line}")
        assert record["function"] == f"{__name__}.TestFacadeHandler.test_record_forwarded"

    def test_function_matches_direct_logging(self, logger, capture, stdlib_logger):
        """Test a forwarded record names its function like a direct facade call."""
        stdlib_logger.addHandler(FacadeHandler(logger))

        def work():
            stdlib_logger.info("via logging")
            logger.info("direct")

        work()

        forwarded, direct = capture.records()
        assert forwarded["function"] == direct["function"]
        assert forwarded["function"].endswith("test_function_matches_direct_logging.<locals>.work")

    def test_record_from_elsewhere(self, logger, capture):
        """Test a record not made on this stack keeps its own file and function."""
        record = logging.makeLogRecord(
            {
                "name": "jobs",
                "levelno": logging.INFO,
                "levelname": "INFO",
                "msg": "queued",
                "pathname": "/srv/app/jobs.py",
                "module": "jobs",
                "funcName": "run",
                "lineno": 42,
            }
        )

        FacadeHandler(logger).handle(record)

        forwarded = capture.last()
        assert forwarded["msg"] == "queued"
        assert forwarded["file"] == "/srv/app/jobs.py:42"
        assert forwarded["function"] == "jobs.run"

    @pytest.mark.parametrize(
        "method,level",
        [
            ("debug", "debug"),
            ("info", "info"),
            ("warning", "warning"),
            ("error", "error"),
            ("critical", "error"),
        ],
    )
    def test_level_mapping(self, make_logger, capture, stdlib_logger, method, level):
        """Test stdlib levels map onto facade levels, critical never fatal."""
        codes = []
        stdlib_logger.addHandler(FacadeHandler(make_logger(with_exit_func(codes.append))))

        getattr(stdlib_logger, method)("message")

        assert capture.last()["level"] == level
        assert codes == []

    def test_facade_level_applies(self, make_logger, capture, stdlib_logger):
        """Test records below the facade level are dropped."""
        stdlib_logger.addHandler(FacadeHandler(make_logger(with_level(Level.ERROR))))

        stdlib_logger.info("dropped")
        stdlib_logger.error("kept")

        assert [r["msg"] for r in capture.records()] == ["kept"]

    def test_exception_text(self, logger, capture, stdlib_logger):
        """Test tracebacks are attached under exception."""
        stdlib_logger.addHandler(FacadeHandler(logger))

        try:
            raise ValueError("broken input")
        except ValueError:
            stdlib_logger.exception("parse failed")

        record = capture.last()
        assert record["level"] == "error"
        assert "Traceback" in record["exception"]
        assert "ValueError: broken input" in record["exception"]

    def test_install_handler(self, logger, capture, stdlib_logger):
        """Test attaching a handler by logger name."""
        handler = install_handler(logger, name="tests.thirdparty")

        stdlib_logger.info("installed")

        assert handler in stdlib_logger.handlers
        assert capture.last()["msg"] == "installed"
