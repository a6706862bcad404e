# src/logging/context.py — v1
"""Contextual logging support — attach session_id, step_id, run_id to log records."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

# Context variables for structured logging — set per session and per step run.
_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_step_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step_id", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    session_id: str | None = None
    step_id: str | None = None
    run_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        session_id=_session_id.get(),
        step_id=_step_id.get(),
        run_id=_run_id.get(),
    )


def set_session_context(session_id: str) -> None:
    """Set session-level context (called once per pipeline session)."""
    _session_id.set(session_id)


@contextmanager
def step_context(step_id: str, run_id: str | None = None) -> Iterator[None]:
    """Bind step_id/run_id for the duration of one step run.

    Each asyncio task runs in its own context copy, so concurrent runs of
    different steps do not see each other's values.
    """
    step_token = _step_id.set(step_id)
    run_token = _run_id.set(run_id)
    try:
        yield
    finally:
        _run_id.reset(run_token)
        _step_id.reset(step_token)


def clear_context() -> None:
    """Reset all context variables."""
    _session_id.set(None)
    _step_id.set(None)
    _run_id.set(None)
