# src/llm/catalog.py — v1
"""Static model catalog: which provider serves which model.

Selecting a model is authoritative for the provider. Lookups for models
missing from the catalog fall back to a configured provider instead of
failing.
"""

from __future__ import annotations

from reviewchain.llm.models import ModelInfo

DEFAULT_FALLBACK_PROVIDER = "gemini"

AI_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo(id="gemini-2.5-flash", name="Gemini 2.5 Flash", provider="gemini"),
    ModelInfo(id="gemini-2.5-pro", name="Gemini 2.5 Pro", provider="gemini"),
    ModelInfo(id="gemini-2.0-flash", name="Gemini 2.0 Flash", provider="gemini"),
    ModelInfo(id="gpt-4o", name="GPT-4o", provider="openai"),
    ModelInfo(id="gpt-4o-mini", name="GPT-4o mini", provider="openai"),
    ModelInfo(id="gpt-4.1-mini", name="GPT-4.1 mini", provider="openai"),
    ModelInfo(
        id="claude-sonnet-4-20250514", name="Claude Sonnet 4", provider="anthropic"
    ),
    ModelInfo(
        id="claude-3-5-haiku-latest", name="Claude 3.5 Haiku", provider="anthropic"
    ),
    ModelInfo(id="grok-3-mini", name="Grok 3 mini", provider="xai"),
)

_MODEL_INDEX: dict[str, ModelInfo] = {m.id: m for m in AI_MODELS}


def find_model(model_id: str) -> ModelInfo | None:
    """Return the catalog entry for a model id, or None."""
    return _MODEL_INDEX.get(model_id)


def provider_for_model(
    model_id: str, fallback: str = DEFAULT_FALLBACK_PROVIDER
) -> str:
    """Resolve the provider for a model id.

    Args:
        model_id: Model identifier as stored on a step.
        fallback: Provider returned when the model is not in the catalog.

    Returns:
        Provider name.
    """
    info = _MODEL_INDEX.get(model_id)
    return info.provider if info is not None else fallback


def models_for_provider(provider: str) -> list[ModelInfo]:
    """All catalog models served by one provider, in catalog order."""
    return [m for m in AI_MODELS if m.provider == provider]
