# src/logging/event_log.py — v1
"""Observability sink for pipeline events.

An append-only list of timestamped messages with severity info, success
or error. Entries are also mirrored to the standard logger so they reach
the configured handlers.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

Severity = Literal["info", "success", "error"]

_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "success": logging.INFO,
    "error": logging.ERROR,
}


class LogSink(Protocol):
    """Anything the engine can report events to."""

    def log(self, message: str, severity: Severity = "info") -> None: ...


class LogEntry(BaseModel):
    """One event reported to the sink."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: datetime
    message: str
    severity: Severity


class EventLog:
    """In-memory append-only event log."""

    def __init__(self, mirror: logging.Logger | None = logger) -> None:
        self._entries: list[LogEntry] = []
        self._mirror = mirror

    def log(self, message: str, severity: Severity = "info") -> None:
        if severity not in _LEVELS:
            raise ValueError(f"Unknown severity: {severity!r}")
        entry = LogEntry(
            id=len(self._entries) + 1,
            timestamp=datetime.now(timezone.utc),
            message=message,
            severity=severity,
        )
        self._entries.append(entry)
        if self._mirror is not None:
            self._mirror.log(_LEVELS[severity], "%s", message)

    @property
    def entries(self) -> list[LogEntry]:
        """All entries in insertion order."""
        return list(self._entries)

    def filter(self, severity: Severity) -> list[LogEntry]:
        return [e for e in self._entries if e.severity == severity]

    def __len__(self) -> int:
        return len(self._entries)
