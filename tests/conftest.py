# tests/conftest.py — v1
"""Shared test fixtures for unit and integration tests.

Provides sample step configurations, the stores, a resource gate, an
in-memory event log and a mocked text generation service. No network I/O.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from reviewchain.logging.event_log import EventLog
from reviewchain.pipeline.config_store import PipelineConfigStore
from reviewchain.pipeline.engine import ExecutionEngine
from reviewchain.pipeline.models import StepConfig
from reviewchain.pipeline.resource_gate import ResourceGate
from reviewchain.pipeline.result_store import ResultStore


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_step() -> StepConfig:
    """Minimal valid StepConfig."""
    return StepConfig(
        id="step-summary",
        name="Summarizer",
        description="Summarizes the submission.",
        provider="gemini",
        model="gemini-2.5-flash",
        max_tokens=1024,
        temperature=0.2,
        system_prompt="Summarize the device submission.",
    )


@pytest.fixture
def sample_steps(sample_step: StepConfig) -> list[StepConfig]:
    """Three chained steps."""
    s2 = sample_step.model_copy(
        update={
            "id": "step-compare",
            "name": "Comparator",
            "provider": "openai",
            "model": "gpt-4o-mini",
            "system_prompt": "Compare with the predicate.",
        }
    )
    s3 = sample_step.model_copy(
        update={
            "id": "step-memo",
            "name": "Memo Writer",
            "provider": "anthropic",
            "model": "claude-sonnet-4-20250514",
            "temperature": 0.5,
            "system_prompt": "Write the review memo.",
        }
    )
    return [sample_step, s2, s3]


# === FIXTURES: Pipeline components ===


@pytest.fixture
def config_store(sample_steps: list[StepConfig]) -> PipelineConfigStore:
    return PipelineConfigStore(sample_steps)


@pytest.fixture
def result_store() -> ResultStore:
    return ResultStore()


@pytest.fixture
def gate() -> ResourceGate:
    """Pool of 100 mana, experience 0."""
    return ResourceGate(mana=100, experience=0)


@pytest.fixture
def event_log() -> EventLog:
    return EventLog(mirror=None)


@pytest.fixture
def credentials() -> dict[str, str]:
    return {"gemini": "g-key", "openai": "o-key", "anthropic": "a-key", "xai": "x-key"}


# === FIXTURES: Mock text generation service ===


@pytest.fixture
def mock_service() -> AsyncMock:
    """Mock TextGenerationService returning a fixed text."""
    service = AsyncMock()
    service.generate_text = AsyncMock(return_value="Generated text")
    return service


@pytest.fixture
def engine(
    config_store: PipelineConfigStore,
    result_store: ResultStore,
    gate: ResourceGate,
    mock_service: AsyncMock,
    credentials: dict[str, str],
    event_log: EventLog,
) -> ExecutionEngine:
    """Engine over the sample steps with seed text set."""
    return ExecutionEngine(
        configs=config_store,
        results=result_store,
        gate=gate,
        service=mock_service,
        credentials=lambda provider: credentials.get(provider, ""),
        log_sink=event_log,
        seed_text="Device X indications for use: ...",
    )
