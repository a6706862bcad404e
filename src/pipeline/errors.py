# src/pipeline/errors.py — v1
"""Pipeline error taxonomy.

Every error carries a stable ``tag`` so that a failure can be told apart
in the event log and in a step's result ("not enough mana" vs "upstream
not ready" vs "provider failed").
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""

    tag: str = "pipeline"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PipelineError):
    """Resolved step input is empty or whitespace-only."""

    tag = "validation"


class DependencyError(PipelineError):
    """Upstream step has not completed or produced no output."""

    tag = "dependency"

    def __init__(self, message: str, upstream_step_id: str) -> None:
        self.upstream_step_id = upstream_step_id
        super().__init__(message)


class ResourceError(PipelineError):
    """Not enough mana in the pool to pay for a run."""

    tag = "resource"

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Not enough mana: {available} available, {required} required")


class ProviderError(PipelineError):
    """Provider call failed or returned an empty response."""

    tag = "provider"


class SerializationError(PipelineError):
    """Configuration payload is malformed, empty or lacks step ids."""

    tag = "serialization"


class StepBusyError(PipelineError):
    """A run of the same step is already in flight."""

    tag = "busy"


class RunCancelledError(PipelineError):
    """The in-flight run was cancelled before the provider answered."""

    tag = "cancelled"


class EngineClosedError(PipelineError):
    """The engine was closed; no new runs are accepted."""

    tag = "closed"


# --- Config store errors (raised to the caller) ---


class ConfigStoreError(PipelineError):
    """Invalid operation on the pipeline configuration."""

    tag = "config"


class StepNotFoundError(ConfigStoreError):
    """No step with the given id."""

    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        super().__init__(f"Unknown step id: {step_id!r}")


class DuplicateStepError(ConfigStoreError):
    """A step id already exists in the pipeline."""

    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        super().__init__(f"Duplicate step id: {step_id!r}")


class InvalidFieldError(ConfigStoreError):
    """Field is not updatable or the value does not fit the field."""
