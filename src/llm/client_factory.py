# src/llm/client_factory.py — v2
"""Factory: instantiate a text generation provider from its name.

The registry maps provider name to adapter class path (lazy import), so a
step's ``provider`` field selects the backend without conditional
branching in the engine.
"""

from __future__ import annotations

import importlib
import logging

from reviewchain.config.settings import Settings
from reviewchain.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "gemini": "reviewchain.llm.adapters.google_adapter.GoogleAdapter",
    "openai": "reviewchain.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "reviewchain.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "xai": "reviewchain.llm.adapters.xai_adapter.XAIAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    api_key: str | None = None,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (gemini, openai, anthropic, xai).
        model: Model name (e.g. gemini-2.5-flash).
        api_key: Credential for the provider. Falls back to settings if None.
        settings: Application settings (API keys, xAI base URL).
        **kwargs: Additional provider-specific arguments.

    Returns:
        Configured BaseLLMClient instance.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model
    if api_key is not None:
        init_kwargs["api_key"] = api_key
    elif settings is not None:
        init_kwargs["api_key"] = settings.api_key_for(provider)

    if provider == "xai" and settings is not None:
        init_kwargs.setdefault("base_url", settings.xai_base_url)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def registered_providers() -> list[str]:
    """Names of all registered providers."""
    return sorted(_PROVIDER_REGISTRY)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
