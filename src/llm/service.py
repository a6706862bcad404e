# src/llm/service.py — v1
"""Text generation service used by the execution engine.

The engine only knows ``generate_text(prompt, credential, options)``; the
default implementation resolves a provider adapter through the registry
in llm/client_factory.py and returns the generated text.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from reviewchain.config.settings import Settings
from reviewchain.llm.base_client import BaseLLMClient
from reviewchain.llm.client_factory import create_llm_client
from reviewchain.llm.models import GenerationOptions, Message
from reviewchain.logging.context import get_context
from reviewchain.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., BaseLLMClient]


class TextGenerationService(Protocol):
    """External text generation collaborator."""

    async def generate_text(
        self, prompt: str, credential: str, options: GenerationOptions
    ) -> str: ...


class ProviderTextGenerationService:
    """Dispatches a prompt to the adapter registered for ``options.provider``.

    Args:
        settings: Application settings (provider base URLs).
        call_logger: Optional call logger; one record per call.
        client_factory: Adapter factory, defaults to create_llm_client.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        call_logger: CallLogger | None = None,
        client_factory: ClientFactory = create_llm_client,
    ) -> None:
        self._settings = settings
        self._call_logger = call_logger
        self._client_factory = client_factory

    async def generate_text(
        self, prompt: str, credential: str, options: GenerationOptions
    ) -> str:
        """Generate text for a single prompt.

        Raises:
            UnsupportedProviderError: If no adapter is registered for the provider.
            Exception: Whatever the provider SDK raises on transport failure.
        """
        client = self._client_factory(
            options.provider,
            options.model,
            api_key=credential,
            settings=self._settings,
        )
        step_id = get_context().step_id or "unknown"
        logger.debug(
            "Calling %s:%s (max_tokens=%d, temperature=%s)",
            options.provider, options.model, options.max_tokens, options.temperature,
        )

        t0 = time.monotonic()
        try:
            response = await client.complete(
                [Message(role="user", content=prompt)],
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        except Exception as exc:
            if self._call_logger is not None:
                self._call_logger.record_failure(
                    step_id,
                    options.provider,
                    options.model,
                    str(exc),
                    latency_ms=int((time.monotonic() - t0) * 1000),
                )
            raise

        if self._call_logger is not None:
            self._call_logger.record(step_id, response)
        return response.content
