"""
Custom exceptions for the logging facade.
"""


class LogFacadeError(Exception):
    """
    Base exception for logging facade errors.

    Attributes:
        message: Human-readable description of the problem
    """

    def __init__(self, message: str | None = None):
        self.message = message or "Logging facade error"
        super().__init__(self.message)


class InvalidLevelNameError(LogFacadeError, ValueError):
    """A level name did not match any of the available log levels."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        default_message = f"Invalid name passed to available log levels: {name!r}"
        super().__init__(message or default_message)
