# src/api/facade.py — v1
"""Public API facade — one object wiring a review pipeline session.

Usage:
    from reviewchain.api.facade import ReviewSession
    session = ReviewSession()
    session.seed_text = "Device X indications..."
    outcomes = await session.run_all()
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from reviewchain.api.models import PipelineReport, StepReport
from reviewchain.config.defaults import default_pipeline
from reviewchain.config.settings import Settings
from reviewchain.llm.service import ProviderTextGenerationService, TextGenerationService
from reviewchain.logging.context import set_session_context
from reviewchain.logging.event_log import EventLog
from reviewchain.pipeline.config_store import PipelineConfigStore
from reviewchain.pipeline.engine import ExecutionEngine, RunOutcome
from reviewchain.pipeline.errors import SerializationError
from reviewchain.pipeline.models import StepConfig, StepResult
from reviewchain.pipeline.resource_gate import ResourceGate
from reviewchain.pipeline.result_store import ResultStore
from reviewchain.pipeline.serializer import ConfigSerializer
from reviewchain.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)


class ReviewSession:
    """Owns one pipeline session: steps, results, counters and event log.

    Args:
        settings: Global settings. Loaded from .env if None.
        configs: Initial steps. Defaults to ``settings.pipeline_config_path``
            when set, else the built-in review pipeline.
        service: Text generation service. Defaults to provider dispatch.
        events: Observability sink. Defaults to an in-memory EventLog.
        seed_text: Input of the first step.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        configs: list[StepConfig] | None = None,
        service: TextGenerationService | None = None,
        events: EventLog | None = None,
        seed_text: str = "",
    ) -> None:
        self.settings = settings or Settings()
        self.session_id = _generate_session_id()
        set_session_context(self.session_id)

        self.serializer = ConfigSerializer(self.settings.fallback_provider)
        if configs is None:
            configs = self._initial_configs()
        self.configs = PipelineConfigStore(
            configs, fallback_provider=self.settings.fallback_provider
        )
        self.results = ResultStore()
        self.gate = ResourceGate(
            mana=self.settings.initial_mana,
            experience=self.settings.initial_experience,
        )
        self.events = events if events is not None else EventLog()
        self.call_logger = CallLogger()
        self.service = service or ProviderTextGenerationService(
            settings=self.settings, call_logger=self.call_logger
        )
        self.engine = ExecutionEngine(
            configs=self.configs,
            results=self.results,
            gate=self.gate,
            service=self.service,
            credentials=self.settings.api_key_for,
            log_sink=self.events,
            seed_text=seed_text,
            run_cost=self.settings.run_cost,
            success_reward=self.settings.success_reward,
        )
        logger.info(
            "Session %s ready: %d steps, mana=%d", self.session_id,
            len(self.configs), self.gate.mana,
        )

    # --- Input ---

    @property
    def seed_text(self) -> str:
        return self.engine.seed_text

    @seed_text.setter
    def seed_text(self, value: str) -> None:
        self.engine.seed_text = value

    # --- Execution ---

    async def run_step(self, step_index: int) -> RunOutcome:
        return await self.engine.run(step_index)

    async def run_all(self, stop_on_error: bool = True) -> list[RunOutcome]:
        return await self.engine.run_all(stop_on_error=stop_on_error)

    def override_output(self, step_id: str, text: str) -> StepResult:
        return self.engine.override_output(step_id, text)

    def result(self, step_id: str) -> StepResult:
        return self.results.get(step_id)

    async def aclose(self) -> None:
        await self.engine.aclose()
        if self.settings.call_log_path is not None and self.call_logger.total_calls:
            self.call_logger.save(Path(self.settings.call_log_path).expanduser())

    # --- Configuration import/export ---

    def export_config(self) -> bytes:
        data = self.serializer.export(self.configs.list())
        self.events.log("Agent configurations exported.", "success")
        return data

    def import_config(self, data: bytes | str) -> list[StepConfig]:
        """Replace the pipeline with an imported configuration.

        Raises:
            SerializationError: If the payload does not import; the
                current pipeline is left unchanged.
        """
        try:
            configs = self.serializer.load_into(self.configs, data)
        except SerializationError as exc:
            self._log_import_failure(exc)
            raise
        self.events.log("Agent configurations loaded successfully.", "success")
        return configs

    def save_config(self, path: Path) -> Path:
        return self.serializer.save_file(path, self.configs.list())

    def load_config(self, path: Path) -> list[StepConfig]:
        """Replace the pipeline with the configuration stored in ``path``."""
        try:
            configs = self.serializer.load_file(path)
        except SerializationError as exc:
            self._log_import_failure(exc)
            raise
        self.configs.replace_all(configs)
        self.events.log("Agent configurations loaded successfully.", "success")
        return configs

    # --- Reporting ---

    def report(self) -> PipelineReport:
        steps: list[StepReport] = []
        for position, config in enumerate(self.configs.list()):
            result = self.results.get(config.id)
            steps.append(
                StepReport(
                    position=position,
                    step_id=config.id,
                    name=config.name,
                    provider=config.provider,
                    model=config.model,
                    status=result.status,
                    output=result.output,
                    error=result.error,
                    error_tag=result.error_tag,
                    timestamp=result.timestamp,
                )
            )
        return PipelineReport(
            session_id=self.session_id,
            mana=self.gate.mana,
            experience=self.gate.experience,
            steps=steps,
            calls=self.call_logger.stats(),
        )

    def _log_import_failure(self, exc: SerializationError) -> None:
        self.events.log(
            f"Failed to parse settings file [{exc.tag}]: {exc.message}", "error"
        )

    def _initial_configs(self) -> list[StepConfig]:
        path = self.settings.pipeline_config_path
        if path is None:
            return default_pipeline()
        return self.serializer.load_file(Path(path))


def _generate_session_id() -> str:
    """Generate a session ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_{uuid.uuid4().hex[:8]}"
