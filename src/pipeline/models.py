# src/pipeline/models.py — v1
"""Pipeline domain models: StepConfig, StepResult.

Both models are frozen; stores replace whole instances so an observer
never sees fields from two different edits or runs mixed together.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from reviewchain.config.settings import ProviderName
from reviewchain.llm.catalog import DEFAULT_FALLBACK_PROVIDER, provider_for_model

StepStatus = Literal["idle", "running", "completed", "error"]


class StepConfig(BaseModel):
    """Definition of one pipeline step (agent).

    The wire format uses camelCase keys (``maxTokens``, ``systemPrompt``);
    both spellings are accepted on input.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    provider: ProviderName
    model: str = Field(min_length=1)
    max_tokens: int = Field(default=2048, gt=0, alias="maxTokens")
    temperature: float = 0.3
    system_prompt: str = Field(default="", alias="systemPrompt")

    @model_validator(mode="before")
    @classmethod
    def _derive_provider(cls, data: Any, info: ValidationInfo) -> Any:
        """Fill a missing provider from the model catalog.

        The fallback for unknown models can be passed as validation
        context: ``model_validate(data, context={"fallback_provider": ...})``.
        """
        if isinstance(data, dict) and not data.get("provider") and data.get("model"):
            fallback = (info.context or {}).get(
                "fallback_provider", DEFAULT_FALLBACK_PROVIDER
            )
            data = {**data, "provider": provider_for_model(str(data["model"]), fallback)}
        return data

    def to_record(self) -> dict[str, Any]:
        """Serializable record with wire (camelCase) keys, in field order."""
        return self.model_dump(by_alias=True)


class StepResult(BaseModel):
    """Most recent execution state of one step, keyed by step id.

    ``output`` survives failed re-runs; ``timestamp`` is the time of the
    last successful completion and travels with the output it describes.
    """

    model_config = ConfigDict(frozen=True)

    step_id: str
    status: StepStatus = "idle"
    output: str = ""
    error: str | None = None
    error_tag: str | None = None
    timestamp: datetime | None = None
    run_id: str | None = None

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def is_usable_upstream(self) -> bool:
        """Whether the next step may consume this result as input."""
        return self.status == "completed" and bool(self.output)
