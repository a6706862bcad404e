# src/pipeline/engine.py — v1
"""Execution engine — runs one pipeline step at a time.

Run protocol for step ``i``:
  1. Resolve input: the seed text for step 0, otherwise the output of
     step i-1, which must be ``completed`` and non-empty.
  2. Reject empty or whitespace-only input.
  3. Debit the run cost from the mana pool (never refunded).
  4. Mark the step ``running``, keeping its previous output.
  5. Call the text generation service with the step's system prompt
     followed by the task input.
  6. Record ``completed`` (+experience) or ``error`` (output kept).

Failures never propagate out of ``run()``: they are recorded on the step
(when it got as far as running), reported to the event sink with their
taxonomy tag, and returned in a RunOutcome.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from reviewchain.llm.models import GenerationOptions
from reviewchain.llm.service import TextGenerationService
from reviewchain.logging.context import step_context
from reviewchain.logging.event_log import LogSink
from reviewchain.pipeline.config_store import PipelineConfigStore
from reviewchain.pipeline.errors import (
    DependencyError,
    EngineClosedError,
    PipelineError,
    ProviderError,
    ResourceError,
    RunCancelledError,
    StepBusyError,
    StepNotFoundError,
    ValidationError,
)
from reviewchain.pipeline.models import StepConfig, StepResult
from reviewchain.pipeline.resource_gate import (
    DEFAULT_RUN_COST,
    DEFAULT_SUCCESS_REWARD,
    ResourceGate,
)
from reviewchain.pipeline.result_store import ResultStore

logger = logging.getLogger(__name__)

TASK_INPUT_MARKER = "[TASK INPUT]:"

CredentialLookup = Callable[[str], str]


def build_prompt(system_prompt: str, task_input: str) -> str:
    """System prompt, a task boundary marker, then the task input."""
    return f"{system_prompt}\n\n{TASK_INPUT_MARKER}\n{task_input}"


@dataclass
class RunOutcome:
    """What happened to one ``run()`` request."""

    step_id: str
    step_index: int
    result: StepResult
    error: PipelineError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def error_tag(self) -> str | None:
        return self.error.tag if self.error is not None else None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class ExecutionEngine:
    """Runs pipeline steps against injected stores and services.

    Args:
        configs: Ordered step configurations (read only here).
        results: Per-step result store (written only through its run API).
        gate: Mana pool and experience counter.
        service: Text generation collaborator.
        credentials: Provider name → credential lookup, read at call time.
        log_sink: Observability sink for transitions and outcomes.
        seed_text: Input of step 0.
        run_cost: Mana debited per run attempt.
        success_reward: Experience credited per successful run.
    """

    def __init__(
        self,
        configs: PipelineConfigStore,
        results: ResultStore,
        gate: ResourceGate,
        service: TextGenerationService,
        credentials: CredentialLookup,
        log_sink: LogSink,
        seed_text: str = "",
        run_cost: int = DEFAULT_RUN_COST,
        success_reward: int = DEFAULT_SUCCESS_REWARD,
    ) -> None:
        self._configs = configs
        self._results = results
        self._gate = gate
        self._service = service
        self._credentials = credentials
        self._sink = log_sink
        self.seed_text = seed_text
        self._run_cost = run_cost
        self._success_reward = success_reward
        self._tasks: dict[str, asyncio.Task[RunOutcome]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Running ---

    async def run(self, step_index: int) -> RunOutcome:
        """Execute the step at ``step_index``.

        Raises:
            IndexError: If there is no step at that position.
        """
        configs = self._configs.list()
        if not 0 <= step_index < len(configs):
            raise IndexError(f"No step at position {step_index}")
        # Snapshot: edits made while the call is in flight apply to the next run.
        config = configs[step_index]

        if self._closed:
            return self._reject(config, step_index, EngineClosedError("Engine is closed"))
        if self._results.get(config.id).is_running:
            return self._reject(
                config, step_index, StepBusyError(f"{config.name} is already running")
            )

        try:
            task_input = self._resolve_input(step_index, configs)
        except DependencyError as exc:
            return self._reject(config, step_index, exc)

        if not task_input.strip():
            return self._reject(
                config, step_index, ValidationError(f"Input for {config.name} is empty")
            )

        if not self._gate.try_debit(self._run_cost):
            return self._reject(
                config, step_index, ResourceError(self._run_cost, self._gate.mana)
            )

        run_id = self._results.begin_run(config.id)
        self._sink.log(f"Agent {config.name} started...", "info")

        with step_context(config.id, run_id):
            return await self._invoke(config, step_index, run_id, task_input)

    def start(self, step_index: int) -> asyncio.Task[RunOutcome]:
        """Schedule ``run(step_index)`` as a task keyed by step id.

        The task can be cancelled with ``cancel()`` or ``aclose()``. While
        a scheduled run of the same step is still pending, that task is
        returned instead of scheduling a second one.
        """
        config = self._configs.list()[step_index]
        existing = self._tasks.get(config.id)
        if existing is not None and not existing.done():
            return existing
        task = asyncio.create_task(self.run(step_index), name=f"step:{config.id}")
        self._tasks[config.id] = task
        task.add_done_callback(lambda t, sid=config.id: self._forget_task(sid, t))
        return task

    async def run_all(self, stop_on_error: bool = True) -> list[RunOutcome]:
        """Run every step in order, feeding each output to the next step."""
        outcomes: list[RunOutcome] = []
        for idx in range(len(self._configs)):
            outcome = await self.run(idx)
            outcomes.append(outcome)
            if not outcome.success and stop_on_error:
                logger.info("Stopping pipeline at step %d (%s)", idx, outcome.error_tag)
                break
        return outcomes

    # --- Cancellation ---

    async def cancel(self, step_id: str) -> bool:
        """Cancel the scheduled run of ``step_id``.

        The step ends in ``error`` (tag ``cancelled``); the mana already
        debited is not refunded. Returns False if nothing was in flight.
        """
        task = self._tasks.get(step_id)
        if task is None or task.done():
            return False
        task.cancel()
        await asyncio.wait([task])
        return True

    async def aclose(self) -> None:
        """Cancel all in-flight runs and refuse new ones.

        Responses arriving after close are discarded instead of being
        applied to stale state.
        """
        self._closed = True
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
        # Runs awaited directly by a caller have no task to cancel.
        for step_id in self._results.running_steps():
            self._results.abort_run(step_id, "Pipeline closed", EngineClosedError.tag)
        self._tasks.clear()

    # --- Manual edits ---

    def override_output(self, step_id: str, text: str) -> StepResult:
        """Replace a step's output by hand.

        Status, error and resource counters are untouched.

        Raises:
            StepNotFoundError: If the step is not in the pipeline.
        """
        if step_id not in self._configs:
            raise StepNotFoundError(step_id)
        logger.debug("Output of step %s overridden (%d chars)", step_id, len(text))
        return self._results.override_output(step_id, text)

    # --- Internal helpers ---

    def _resolve_input(self, step_index: int, configs: tuple[StepConfig, ...]) -> str:
        if step_index == 0:
            return self.seed_text
        upstream = configs[step_index - 1]
        result = self._results.get(upstream.id)
        if not result.is_usable_upstream:
            raise DependencyError(
                f"Cannot run {configs[step_index].name}: previous step "
                f"{upstream.name!r} has no completed output (status={result.status})",
                upstream_step_id=upstream.id,
            )
        return result.output

    async def _invoke(
        self, config: StepConfig, step_index: int, run_id: str, task_input: str
    ) -> RunOutcome:
        options = GenerationOptions(
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            provider=config.provider,
        )
        prompt = build_prompt(config.system_prompt, task_input)

        try:
            response = await self._service.generate_text(
                prompt, self._credentials(config.provider), options
            )
        except asyncio.CancelledError:
            if self._closed:
                reason, tag = "Pipeline closed", EngineClosedError.tag
            else:
                reason, tag = "Run cancelled", RunCancelledError.tag
            if self._results.fail_run(config.id, run_id, reason, tag):
                self._sink.log(f"Agent {config.name} cancelled [{tag}].", "error")
            raise
        except Exception as exc:
            logger.debug("Provider call failed for %s", config.id, exc_info=True)
            return self._fail(
                config, step_index, run_id, ProviderError(str(exc) or type(exc).__name__)
            )

        if not response or not response.strip():
            return self._fail(
                config, step_index, run_id, ProviderError("Empty response")
            )

        if not self._results.complete_run(config.id, run_id, response):
            self._sink.log(
                f"Agent {config.name} finished after its run was superseded; "
                "result discarded.",
                "info",
            )
            return RunOutcome(
                config.id,
                step_index,
                self._results.get(config.id),
                RunCancelledError("Result discarded: run no longer current"),
            )

        self._gate.credit(self._success_reward)
        self._sink.log(f"Agent {config.name} completed.", "success")
        return RunOutcome(config.id, step_index, self._results.get(config.id))

    def _fail(
        self, config: StepConfig, step_index: int, run_id: str, error: PipelineError
    ) -> RunOutcome:
        if self._results.fail_run(config.id, run_id, error.message, error.tag):
            self._sink.log(
                f"Agent {config.name} failed [{error.tag}]: {error.message}", "error"
            )
        return RunOutcome(config.id, step_index, self._results.get(config.id), error)

    def _reject(
        self, config: StepConfig, step_index: int, error: PipelineError
    ) -> RunOutcome:
        """Refuse a run before it starts: no debit, no state change."""
        self._sink.log(f"Cannot run {config.name} [{error.tag}]: {error.message}", "error")
        return RunOutcome(config.id, step_index, self._results.get(config.id), error)

    def _forget_task(self, step_id: str, task: asyncio.Task[RunOutcome]) -> None:
        if self._tasks.get(step_id) is task:
            del self._tasks[step_id]
