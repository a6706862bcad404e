# src/llm/adapters/xai_adapter.py — v1
"""xAI Grok adapter.

xAI exposes an OpenAI-compatible chat completions endpoint, so this is the
OpenAI adapter pointed at a different base URL.
"""

from __future__ import annotations

from typing import Any

from reviewchain.llm.adapters.openai_adapter import OpenAIAdapter

XAI_BASE_URL = "https://api.x.ai/v1"


class XAIAdapter(OpenAIAdapter):
    """xAI Grok adapter."""

    _provider = "xai"

    def __init__(
        self,
        model: str = "grok-3-mini",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(model=model, api_key=api_key, base_url=base_url or XAI_BASE_URL)
