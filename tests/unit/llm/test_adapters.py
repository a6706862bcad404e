# tests/unit/llm/test_adapters.py — v1
"""Tests for provider adapters with the SDK clients mocked out."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reviewchain.llm.adapters.anthropic_adapter import AnthropicAdapter
from reviewchain.llm.adapters.google_adapter import GoogleAdapter
from reviewchain.llm.adapters.openai_adapter import OpenAIAdapter
from reviewchain.llm.adapters.xai_adapter import XAIAdapter
from reviewchain.llm.models import Message

USER = [Message(role="user", content="Hello")]


class TestAnthropicAdapter:
    @pytest.mark.asyncio
    async def test_complete_joins_text_blocks(self):
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text="Hello "),
                SimpleNamespace(type="tool_use", text="ignored"),
                SimpleNamespace(type="text", text="world"),
            ],
            usage=SimpleNamespace(input_tokens=12, output_tokens=3),
            model="claude-sonnet-4-20250514",
        )
        adapter = AnthropicAdapter(api_key="k")
        fake = MagicMock()
        fake.messages.create = AsyncMock(return_value=response)
        adapter._AnthropicAdapter__client = fake

        result = await adapter.complete(USER, max_tokens=100, temperature=0.1)

        assert result.content == "Hello world"
        assert result.input_tokens == 12
        assert result.output_tokens == 3
        assert result.provider == "anthropic"
        kwargs = fake.messages.create.await_args.kwargs
        assert kwargs["max_tokens"] == 100
        assert kwargs["temperature"] == 0.1
        assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]
        assert "system" not in kwargs


class TestOpenAIAdapter:
    def _response(self, content="Answer"):
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(prompt_tokens=5, completion_tokens=7),
        )

    @pytest.mark.asyncio
    async def test_complete(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=self._response())
        with patch("openai.AsyncOpenAI", return_value=client) as ctor:
            result = await OpenAIAdapter(model="gpt-4o", api_key="k").complete(
                USER, system="Be terse."
            )
        assert result.content == "Answer"
        assert result.output_tokens == 7
        assert result.provider == "openai"
        ctor.assert_called_once_with(api_key="k", base_url=None)
        messages = client.chat.completions.create.await_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "Be terse."}

    @pytest.mark.asyncio
    async def test_xai_uses_own_endpoint(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=self._response(None))
        with patch("openai.AsyncOpenAI", return_value=client) as ctor:
            result = await XAIAdapter(api_key="k").complete(USER)
        assert result.content == ""
        assert result.provider == "xai"
        assert ctor.call_args.kwargs["base_url"] == "https://api.x.ai/v1"


class TestGoogleAdapter:
    def test_extract_text_blocked_candidate(self):
        class Blocked:
            @property
            def text(self):
                raise ValueError("blocked")

        assert GoogleAdapter._extract_text(Blocked()) == ""
        assert GoogleAdapter._extract_text(SimpleNamespace(text="ok")) == "ok"

    def test_identity(self):
        adapter = GoogleAdapter(model="gemini-2.5-pro", api_key="k")
        assert adapter.provider_name == "gemini"
        assert adapter.model == "gemini-2.5-pro"
