"""Structured logging primitives for the jirawalk core package."""

from ..logger import (
    DEFAULT_LOG_LEVEL,
    LogConfig,
    LogFormat,
    UnifiedLogger,
    configure_logging,
    get_logger,
)
from .diagnostics import CollectingDiagnosticSink, DiagnosticSink, StructlogDiagnosticSink
from .log_events import LogEvents

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogConfig",
    "LogFormat",
    "UnifiedLogger",
    "configure_logging",
    "get_logger",
    "LogEvents",
    "DiagnosticSink",
    "StructlogDiagnosticSink",
    "CollectingDiagnosticSink",
]
