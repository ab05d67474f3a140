"""Diagnostic side-channel for failures that are recovered instead of raised."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from structlog.stdlib import BoundLogger

from jirawalk.core.logger import UnifiedLogger
from jirawalk.core.logging.log_events import LogEvents

__all__ = ["DiagnosticSink", "StructlogDiagnosticSink", "CollectingDiagnosticSink"]


@runtime_checkable
class DiagnosticSink(Protocol):
    """Anything that can record one line of diagnostic text."""

    def write(self, line: str) -> None: ...


class StructlogDiagnosticSink:
    """Write diagnostic lines as ``walker.fetch.failed`` warnings."""

    def __init__(self, logger: BoundLogger | None = None) -> None:
        self._log = logger or UnifiedLogger.get(__name__).bind(component="diagnostics")

    def write(self, line: str) -> None:
        self._log.warning(LogEvents.WALKER_FETCH_FAILED, error=line)


class CollectingDiagnosticSink:
    """Keep diagnostic lines in memory, optionally forwarding them to another sink.

    Useful for callers that need to tell a truncated walk from a complete one.
    """

    def __init__(self, forward_to: DiagnosticSink | None = None) -> None:
        self.lines: list[str] = []
        self._forward_to = forward_to

    def write(self, line: str) -> None:
        self.lines.append(line)
        if self._forward_to is not None:
            self._forward_to.write(line)

    def clear(self) -> None:
        self.lines.clear()
