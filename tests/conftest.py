"""
Shared fixtures for logfacade tests.
"""

import io
import json
from datetime import UTC, datetime

import pytest

from hother.logfacade import Level, Logger, set_global_logger, with_level, with_now_func, with_output

FIXED_TIME = datetime(2020, 10, 10, 10, 10, 10, 123000, tzinfo=UTC)


class LogCapture:
    """In-memory output with helpers to read back JSON records."""

    def __init__(self):
        self.stream = io.StringIO()

    def lines(self) -> list[str]:
        return [line for line in self.stream.getvalue().splitlines() if line]

    def records(self) -> list[dict]:
        return [json.loads(line) for line in self.lines()]

    def last(self) -> dict:
        records = self.records()
        assert records, "nothing was logged"
        return records[-1]

    def clear(self) -> None:
        self.stream.seek(0)
        self.stream.truncate()


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def capture():
    """Fresh in-memory log output."""
    return LogCapture()


@pytest.fixture
def make_logger(capture):
    """Factory for loggers writing to ``capture`` at debug with a fixed clock."""

    def factory(*options) -> Logger:
        return Logger(
            with_output(capture.stream),
            with_now_func(lambda: FIXED_TIME),
            with_level(Level.DEBUG),
            *options,
        )

    return factory


@pytest.fixture
def logger(make_logger):
    """Debug-level logger writing to ``capture``."""
    return make_logger()


@pytest.fixture(autouse=True)
def clean_global_logger():
    """Give each test its own global logger."""
    previous = set_global_logger(None)
    yield
    set_global_logger(previous)
