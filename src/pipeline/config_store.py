# src/pipeline/config_store.py — v1
"""Ordered, single-writer store of step configurations.

The order of the list is the dependency chain: step i consumes the output
of step i-1. Nothing outside this class mutates the list; callers get
read-only tuples of frozen StepConfig instances.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from pydantic import ValidationError as PydanticValidationError

from reviewchain.llm.catalog import DEFAULT_FALLBACK_PROVIDER, provider_for_model
from reviewchain.pipeline.errors import (
    DuplicateStepError,
    InvalidFieldError,
    StepNotFoundError,
)
from reviewchain.pipeline.models import StepConfig

logger = logging.getLogger(__name__)

# Closed set of updatable fields; wire aliases map onto field names.
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "description", "model", "max_tokens", "temperature", "system_prompt"}
)
_FIELD_ALIASES: dict[str, str] = {
    "maxTokens": "max_tokens",
    "systemPrompt": "system_prompt",
}


class PipelineConfigStore:
    """Holds the ordered list of step configurations.

    Args:
        configs: Initial steps, in dependency order.
        fallback_provider: Provider assigned when a step selects a model
            missing from the catalog.
    """

    def __init__(
        self,
        configs: Iterable[StepConfig] = (),
        fallback_provider: str = DEFAULT_FALLBACK_PROVIDER,
    ) -> None:
        self._fallback_provider = fallback_provider
        self._configs: list[StepConfig] = []
        self.replace_all(configs)

    # --- Read access ---

    def list(self) -> tuple[StepConfig, ...]:
        """Current ordered sequence (read-only view)."""
        return tuple(self._configs)

    def get(self, step_id: str) -> StepConfig:
        return self._configs[self.index_of(step_id)]

    def index_of(self, step_id: str) -> int:
        for idx, config in enumerate(self._configs):
            if config.id == step_id:
                return idx
        raise StepNotFoundError(step_id)

    def __contains__(self, step_id: object) -> bool:
        return any(c.id == step_id for c in self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __iter__(self) -> Iterator[StepConfig]:
        return iter(tuple(self._configs))

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self._configs]

    # --- Field updates ---

    def update_field(self, step_id: str, field: str, value: Any) -> StepConfig:
        """Replace one field on the step with matching id.

        Writing ``model`` also recomputes ``provider`` from the model
        catalog. ``id`` and ``provider`` are not directly writable.

        Args:
            step_id: Target step.
            field: One of UPDATABLE_FIELDS (camelCase aliases accepted).
            value: New value, validated against the field type.

        Returns:
            The updated StepConfig.

        Raises:
            StepNotFoundError: If no step has this id.
            InvalidFieldError: If the field is not updatable or the value
                does not validate.
        """
        name = _FIELD_ALIASES.get(field, field)
        if name not in UPDATABLE_FIELDS:
            raise InvalidFieldError(f"Field {field!r} cannot be updated")

        idx = self.index_of(step_id)
        current = self._configs[idx]
        changes: dict[str, Any] = {name: value}
        if name == "model":
            changes["provider"] = provider_for_model(
                str(value), fallback=self._fallback_provider
            )

        try:
            updated = StepConfig.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as exc:
            raise InvalidFieldError(
                f"Invalid value for {field!r} on step {step_id!r}: {exc.errors()[0]['msg']}"
            ) from exc

        self._configs[idx] = updated
        logger.debug("Step %s: %s updated", step_id, name)
        return updated

    def set_name(self, step_id: str, name: str) -> StepConfig:
        return self.update_field(step_id, "name", name)

    def set_description(self, step_id: str, description: str) -> StepConfig:
        return self.update_field(step_id, "description", description)

    def set_model(self, step_id: str, model: str) -> StepConfig:
        """Select a model; the provider follows from the catalog."""
        return self.update_field(step_id, "model", model)

    def set_max_tokens(self, step_id: str, max_tokens: int) -> StepConfig:
        return self.update_field(step_id, "max_tokens", max_tokens)

    def set_temperature(self, step_id: str, temperature: float) -> StepConfig:
        return self.update_field(step_id, "temperature", temperature)

    def set_system_prompt(self, step_id: str, system_prompt: str) -> StepConfig:
        return self.update_field(step_id, "system_prompt", system_prompt)

    # --- Structural edits ---

    def insert(self, index: int, config: StepConfig) -> None:
        """Insert a step at ``index`` (list.insert semantics)."""
        if config.id in self:
            raise DuplicateStepError(config.id)
        self._configs.insert(index, config)
        logger.info("Inserted step %s at position %d", config.id, index)

    def append(self, config: StepConfig) -> None:
        self.insert(len(self._configs), config)

    def remove(self, step_id: str) -> StepConfig:
        """Remove and return a step."""
        removed = self._configs.pop(self.index_of(step_id))
        logger.info("Removed step %s", step_id)
        return removed

    def move(self, step_id: str, new_index: int) -> None:
        """Reorder a step to ``new_index`` (clamped to the list bounds)."""
        config = self._configs.pop(self.index_of(step_id))
        new_index = max(0, min(new_index, len(self._configs)))
        self._configs.insert(new_index, config)
        logger.info("Moved step %s to position %d", step_id, new_index)

    def replace_all(self, configs: Iterable[StepConfig]) -> None:
        """Replace the whole pipeline (no merge).

        Raises:
            DuplicateStepError: If two configs share an id. The store is
                left unchanged in that case.
        """
        new_configs = list(configs)
        seen: set[str] = set()
        for config in new_configs:
            if config.id in seen:
                raise DuplicateStepError(config.id)
            seen.add(config.id)
        self._configs = new_configs
