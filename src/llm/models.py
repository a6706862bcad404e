# src/llm/models.py — v1
"""LLM-specific types: Message, GenerationOptions, LLMResponse, ModelInfo."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class GenerationOptions(BaseModel):
    """Per-call generation options forwarded to a provider.

    Temperature is passed through untouched; providers decide what an
    out-of-range value means.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    max_tokens: int = Field(gt=0)
    temperature: float
    provider: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    raw_response: Any = None


class ModelInfo(BaseModel):
    """Catalog entry: a selectable model and the provider serving it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    provider: str
