# tests/unit/llm/test_service.py — v1
"""Tests for llm/service.py — provider dispatch and call logging."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from reviewchain.llm.client_factory import UnsupportedProviderError
from reviewchain.llm.models import GenerationOptions, LLMResponse
from reviewchain.llm.service import ProviderTextGenerationService
from reviewchain.logging.context import step_context
from reviewchain.tracking.call_logger import CallLogger

OPTIONS = GenerationOptions(
    model="gpt-4o-mini", max_tokens=256, temperature=0.5, provider="openai"
)


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.complete = AsyncMock(
        return_value=LLMResponse(
            content="Result",
            input_tokens=10,
            output_tokens=4,
            model="gpt-4o-mini",
            provider="openai",
            latency_ms=42,
        )
    )
    return client


class TestProviderTextGenerationService:
    @pytest.mark.asyncio
    async def test_generate_text(self, mock_client):
        factory = MagicMock(return_value=mock_client)
        service = ProviderTextGenerationService(client_factory=factory)

        text = await service.generate_text("prompt body", "secret", OPTIONS)

        assert text == "Result"
        factory.assert_called_once_with(
            "openai", "gpt-4o-mini", api_key="secret", settings=None
        )
        messages = mock_client.complete.await_args.args[0]
        assert [(m.role, m.content) for m in messages] == [("user", "prompt body")]
        assert mock_client.complete.await_args.kwargs == {
            "max_tokens": 256,
            "temperature": 0.5,
        }

    @pytest.mark.asyncio
    async def test_records_success_under_step(self, mock_client):
        calls = CallLogger()
        service = ProviderTextGenerationService(
            call_logger=calls, client_factory=MagicMock(return_value=mock_client)
        )
        with step_context("step-a", "run-1"):
            await service.generate_text("p", "k", OPTIONS)

        record = calls.records[0]
        assert record.step_id == "step-a"
        assert record.status == "success"
        assert record.total_tokens == 14

    @pytest.mark.asyncio
    async def test_failure_recorded_and_reraised(self, mock_client):
        mock_client.complete.side_effect = TimeoutError("timed out")
        calls = CallLogger()
        service = ProviderTextGenerationService(
            call_logger=calls, client_factory=MagicMock(return_value=mock_client)
        )
        with pytest.raises(TimeoutError):
            await service.generate_text("p", "k", OPTIONS)

        record = calls.records[0]
        assert record.status == "failed"
        assert record.error == "timed out"
        assert record.step_id == "unknown"

    @pytest.mark.asyncio
    async def test_unsupported_provider_propagates(self):
        service = ProviderTextGenerationService()
        options = OPTIONS.model_copy(update={"provider": "mistral"})
        with pytest.raises(UnsupportedProviderError):
            await service.generate_text("p", "k", options)
