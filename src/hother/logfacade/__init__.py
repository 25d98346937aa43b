"""
Logfacade - Structured Logging Facade for Python

Leveled, structured JSON logging with fields, caller reporting, hooks and a
process-wide logger, plus adapters exposing the facade to web frameworks,
database layers, HTTP clients and the standard ``logging`` module.
"""

import importlib.metadata

from .core.caller import CallerFrame, resolve_caller
from .core.config import LoggerSettings
from .core.engine import Engine, OutputFormat, StructlogEngine, format_timestamp
from .core.entry import Entry
from .core.exceptions import InvalidLevelNameError, LogFacadeError
from .core.global_logger import (
    configure_global_logger,
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    global_logger,
    info,
    infof,
    log,
    logf,
    set_global_logger,
    set_level,
    set_now_func,
    set_output,
    set_report_caller,
    warn,
    warnf,
    warning,
    warningf,
    with_caller,
    with_context,
    with_error,
    with_field,
    with_fields,
)
from .core.hooks import ContextFieldsHook, Hook, HookEntry, HookFunc, RedactionHook
from .core.level import Level, engine_level_to_level, level_name_to_level, level_names, level_to_engine_level
from .core.logger import Fields, Logger, LoggerConfig
from .core.options import (
    LoggerOption,
    LoggerOptionFunc,
    with_engine,
    with_exit_func,
    with_hook,
    with_hook_func,
    with_level,
    with_level_from_env,
    with_level_name,
    with_now_func,
    with_output,
    with_output_format,
    with_report_caller,
    with_settings,
    with_sort_keys,
)

try:
    __version__ = importlib.metadata.version("hother-logfacade")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0+dev"

__all__ = [
    # Levels
    "Level",
    "level_names",
    "level_name_to_level",
    "level_to_engine_level",
    "engine_level_to_level",
    # Core
    "Logger",
    "LoggerConfig",
    "Entry",
    "Fields",
    "CallerFrame",
    "resolve_caller",
    # Engine
    "Engine",
    "StructlogEngine",
    "OutputFormat",
    "format_timestamp",
    # Hooks
    "Hook",
    "HookEntry",
    "HookFunc",
    "ContextFieldsHook",
    "RedactionHook",
    # Configuration
    "LoggerSettings",
    "LoggerOption",
    "LoggerOptionFunc",
    "with_engine",
    "with_exit_func",
    "with_hook",
    "with_hook_func",
    "with_level",
    "with_level_from_env",
    "with_level_name",
    "with_now_func",
    "with_output",
    "with_output_format",
    "with_report_caller",
    "with_settings",
    "with_sort_keys",
    # Exceptions
    "LogFacadeError",
    "InvalidLevelNameError",
    # Global logger
    "global_logger",
    "configure_global_logger",
    "set_global_logger",
    "set_output",
    "set_level",
    "set_now_func",
    "set_report_caller",
    "with_field",
    "with_fields",
    "with_error",
    "with_context",
    "with_caller",
    "debug",
    "debugf",
    "info",
    "infof",
    "warn",
    "warnf",
    "warning",
    "warningf",
    "error",
    "errorf",
    "fatal",
    "fatalf",
    "log",
    "logf",
]
