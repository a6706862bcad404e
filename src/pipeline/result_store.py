# src/pipeline/result_store.py — v1
"""Per-step execution results and their lifecycle.

State machine per step::

    idle ──▶ running ──▶ completed
                │   ▲        │
                ▼   └────────┤  (re-run is always permitted)
              error ─────────┘

Every run holds a token (``run_id``). Only the holder of the current token
may finish a run, so a late response from a cancelled or superseded run
cannot overwrite fresher state.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from reviewchain.pipeline.errors import StepBusyError
from reviewchain.pipeline.models import StepResult

logger = logging.getLogger(__name__)


class ResultStore:
    """Single-writer map of step id → most recent StepResult."""

    def __init__(self) -> None:
        self._results: dict[str, StepResult] = {}

    def get(self, step_id: str) -> StepResult:
        """Current result; an ``idle`` placeholder if the step never ran."""
        return self._results.get(step_id) or StepResult(step_id=step_id)

    def has(self, step_id: str) -> bool:
        return step_id in self._results

    def snapshot(self) -> dict[str, StepResult]:
        return dict(self._results)

    # --- Run lifecycle ---

    def begin_run(self, step_id: str) -> str:
        """Move a step to ``running`` and hand out a fresh run token.

        The previous output and timestamp are kept so collaborators can
        show the last known value while the run is in flight.

        Raises:
            StepBusyError: If the step is already running.
        """
        current = self.get(step_id)
        if current.is_running:
            raise StepBusyError(f"Step {step_id!r} is already running")
        run_id = uuid.uuid4().hex
        self._results[step_id] = StepResult(
            step_id=step_id,
            status="running",
            output=current.output,
            timestamp=current.timestamp,
            run_id=run_id,
        )
        return run_id

    def is_current(self, step_id: str, run_id: str) -> bool:
        """Whether ``run_id`` is still the live run of ``step_id``."""
        current = self._results.get(step_id)
        return (
            current is not None and current.is_running and current.run_id == run_id
        )

    def complete_run(self, step_id: str, run_id: str, output: str) -> bool:
        """Record a successful run. Returns False if the token is stale."""
        if not self.is_current(step_id, run_id):
            logger.warning("Discarding stale completion for step %s", step_id)
            return False
        self._results[step_id] = StepResult(
            step_id=step_id,
            status="completed",
            output=output,
            timestamp=datetime.now(timezone.utc),
            run_id=run_id,
        )
        return True

    def fail_run(self, step_id: str, run_id: str, error: str, error_tag: str) -> bool:
        """Record a failed run, keeping the previous output.

        Returns False if the token is stale.
        """
        current = self._results.get(step_id)
        if current is None or not self.is_current(step_id, run_id):
            logger.warning("Discarding stale failure for step %s", step_id)
            return False
        self._results[step_id] = StepResult(
            step_id=step_id,
            status="error",
            output=current.output,
            error=error,
            error_tag=error_tag,
            timestamp=current.timestamp,
            run_id=run_id,
        )
        return True

    def abort_run(self, step_id: str, error: str, error_tag: str) -> bool:
        """Fail whatever run of ``step_id`` is in flight and revoke its token.

        Used when the owner of the run is gone (engine closed). Any
        completion that arrives afterwards is discarded. Returns False if
        the step was not running.
        """
        current = self._results.get(step_id)
        if current is None or not current.is_running:
            return False
        self._results[step_id] = current.model_copy(
            update={
                "status": "error",
                "error": error,
                "error_tag": error_tag,
                "run_id": None,
            }
        )
        return True

    def running_steps(self) -> list[str]:
        return [sid for sid, r in self._results.items() if r.is_running]

    # --- Manual edits ---

    def override_output(self, step_id: str, text: str) -> StepResult:
        """Replace the stored output; status and error are left alone."""
        current = self.get(step_id)
        updated = current.model_copy(update={"output": text})
        self._results[step_id] = updated
        return updated

    def discard(self, step_id: str) -> None:
        """Forget the result of a step (e.g. after it was removed)."""
        self._results.pop(step_id, None)

    def prune(self, valid_ids: set[str] | list[str]) -> list[str]:
        """Drop results whose step no longer exists. Returns dropped ids."""
        keep = set(valid_ids)
        orphaned = [sid for sid in self._results if sid not in keep]
        for sid in orphaned:
            del self._results[sid]
        return orphaned
