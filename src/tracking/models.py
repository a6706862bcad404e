# src/tracking/models.py — v1
"""Tracking domain models: LLMCallRecord, CallStats."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class LLMCallRecord(BaseModel):
    """Individual provider call log entry."""

    call_id: str
    timestamp: datetime
    step_id: str
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int = 0
    status: Literal["success", "failed"]
    error: str | None = None


class CallStats(BaseModel):
    """Aggregate over recorded calls, per step or for a whole session."""

    total_calls: int = 0
    failed_calls: int = 0
    total_tokens: int = 0
    avg_latency_ms: float = 0.0
