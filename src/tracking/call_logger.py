# src/tracking/call_logger.py — v1
"""Provider call logging — one record per text generation call.

Records accumulate in memory for the lifetime of a session and can be
saved as JSON Lines for post-run analysis.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from reviewchain.llm.models import LLMResponse
from reviewchain.tracking.models import CallStats, LLMCallRecord

logger = logging.getLogger(__name__)


class CallLogger:
    """Accumulates provider call records during a session."""

    def __init__(self) -> None:
        self._records: list[LLMCallRecord] = []

    def record(self, step_id: str, response: LLMResponse) -> LLMCallRecord:
        """Record a successful provider call.

        Args:
            step_id: Pipeline step the call was made for.
            response: Normalized provider response with token usage.

        Returns:
            The recorded LLMCallRecord.
        """
        record = LLMCallRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            step_id=step_id,
            provider=response.provider,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            total_tokens=response.input_tokens + response.output_tokens,
            latency_ms=response.latency_ms,
            status="success",
        )
        self._records.append(record)
        return record

    def record_failure(
        self,
        step_id: str,
        provider: str,
        model: str,
        error: str,
        latency_ms: int = 0,
    ) -> LLMCallRecord:
        """Record a provider call that raised."""
        record = LLMCallRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            step_id=step_id,
            provider=provider,
            model=model,
            latency_ms=latency_ms,
            status="failed",
            error=error,
        )
        self._records.append(record)
        return record

    @property
    def records(self) -> list[LLMCallRecord]:
        """All recorded calls."""
        return list(self._records)

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed across all calls."""
        return sum(r.total_tokens for r in self._records)

    @property
    def total_calls(self) -> int:
        """Total number of provider calls."""
        return len(self._records)

    def stats(self, step_id: str | None = None) -> CallStats:
        """Aggregate stats, optionally restricted to one step."""
        records = [
            r for r in self._records if step_id is None or r.step_id == step_id
        ]
        if not records:
            return CallStats()
        return CallStats(
            total_calls=len(records),
            failed_calls=sum(1 for r in records if r.status == "failed"),
            total_tokens=sum(r.total_tokens for r in records),
            avg_latency_ms=sum(r.latency_ms for r in records) / len(records),
        )

    def save(self, path: Path) -> None:
        """Save all records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(), default=str) + "\n")
        logger.info("Saved %d call records to %s", len(self._records), path)
