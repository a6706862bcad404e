# src/api/models.py — v1
"""API-level models: StepReport, PipelineReport."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from reviewchain.tracking.models import CallStats


class StepReport(BaseModel):
    """Configuration and latest result of one step, for display or export."""

    position: int
    step_id: str
    name: str
    provider: str
    model: str
    status: str
    output: str = ""
    error: str | None = None
    error_tag: str | None = None
    timestamp: datetime | None = None


class PipelineReport(BaseModel):
    """Snapshot of a whole session: counters, steps and provider usage."""

    session_id: str
    mana: int
    experience: int
    steps: list[StepReport] = Field(default_factory=list)
    calls: CallStats = Field(default_factory=CallStats)

    @property
    def completed(self) -> int:
        return sum(1 for s in self.steps if s.status == "completed")
