# src/llm/base_client.py — v1
"""Abstract text generation provider interface.

One implementation per backend; the provider registry in
llm/client_factory.py selects the adapter from a step's provider name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from reviewchain.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all text generation providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.3,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (gemini, openai, anthropic, xai)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier this client was created for."""
