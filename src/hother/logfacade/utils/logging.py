"""
Diagnostics logging for the facade itself.

Problems inside the facade (a failing hook, an unusable configuration value)
must not go through the facade, since they may be caused by it. They are
written as key/value lines to the process stderr instead.
"""

import sys

import structlog


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a structured diagnostics logger.

    The logger writes to the ``sys.stderr`` that is current when this is
    called, so callers should fetch it when reporting rather than caching it.

    Args:
        name: Logger name. If None, uses the calling module's name

    Returns:
        A structlog bound logger writing to stderr
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "hother.logfacade")
        else:
            name = "hother.logfacade"

    return structlog.wrap_logger(
        structlog.PrintLogger(sys.stderr),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "logger", "event"]),
        ],
        wrapper_class=structlog.BoundLogger,
        context_class=dict,
    ).bind(logger=name)
