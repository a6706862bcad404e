# tests/unit/pipeline/test_pipeline_models.py — v1
"""Tests for pipeline/models.py and pipeline/errors.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from reviewchain.pipeline.errors import (
    ConfigStoreError,
    DependencyError,
    EngineClosedError,
    InvalidFieldError,
    PipelineError,
    ProviderError,
    ResourceError,
    RunCancelledError,
    SerializationError,
    StepBusyError,
    StepNotFoundError,
    ValidationError,
)
from reviewchain.pipeline.models import StepConfig, StepResult


class TestStepConfig:
    def test_frozen(self, sample_step):
        with pytest.raises(PydanticValidationError):
            sample_step.name = "x"

    def test_accepts_aliases_and_field_names(self):
        a = StepConfig(id="a", model="gpt-4o", maxTokens=10, systemPrompt="p")
        b = StepConfig(id="a", model="gpt-4o", max_tokens=10, system_prompt="p")
        assert a == b

    def test_provider_derived_when_missing(self):
        assert StepConfig(id="a", model="grok-3-mini").provider == "xai"

    def test_provider_fallback_from_context(self):
        step = StepConfig.model_validate(
            {"id": "a", "model": "unknown"}, context={"fallback_provider": "openai"}
        )
        assert step.provider == "openai"

    def test_unknown_provider_rejected(self):
        with pytest.raises(PydanticValidationError):
            StepConfig(id="a", model="gpt-4o", provider="mistral")

    @pytest.mark.parametrize("field,value", [("id", ""), ("model", ""), ("max_tokens", 0)])
    def test_invalid_values(self, field, value):
        data = {"id": "a", "model": "gpt-4o", field: value}
        with pytest.raises(PydanticValidationError):
            StepConfig(**data)

    def test_to_record_uses_wire_keys(self, sample_step):
        record = sample_step.to_record()
        assert list(record) == [
            "id", "name", "description", "provider", "model",
            "maxTokens", "temperature", "systemPrompt",
        ]


class TestStepResult:
    def test_defaults(self):
        result = StepResult(step_id="a")
        assert result.status == "idle"
        assert result.is_running is False
        assert result.is_usable_upstream is False

    @pytest.mark.parametrize(
        "status,output,usable",
        [
            ("completed", "text", True),
            ("completed", "", False),
            ("error", "text", False),
            ("running", "text", False),
        ],
    )
    def test_usable_upstream(self, status, output, usable):
        assert StepResult(step_id="a", status=status, output=output).is_usable_upstream is usable


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        "error,tag",
        [
            (ValidationError("x"), "validation"),
            (DependencyError("x", upstream_step_id="a"), "dependency"),
            (ResourceError(20, 15), "resource"),
            (ProviderError("x"), "provider"),
            (SerializationError("x"), "serialization"),
            (StepBusyError("x"), "busy"),
            (RunCancelledError("x"), "cancelled"),
            (EngineClosedError("x"), "closed"),
            (StepNotFoundError("a"), "config"),
            (InvalidFieldError("x"), "config"),
        ],
    )
    def test_tags(self, error, tag):
        assert isinstance(error, PipelineError)
        assert error.tag == tag

    def test_resource_error_message(self):
        err = ResourceError(required=20, available=15)
        assert "15" in err.message and "20" in err.message

    def test_config_errors_share_base(self):
        assert issubclass(StepNotFoundError, ConfigStoreError)
        assert str(StepNotFoundError("x")) == "Unknown step id: 'x'"
