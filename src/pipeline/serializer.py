# src/pipeline/serializer.py — v1
"""Step configuration import/export as a portable JSON document.

The document is a JSON array of step records in pipeline order, using
camelCase keys::

    [{"id": "...", "name": "...", "description": "...", "provider": "gemini",
      "model": "gemini-2.5-flash", "maxTokens": 2048, "temperature": 0.3,
      "systemPrompt": "..."}]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from reviewchain.llm.catalog import DEFAULT_FALLBACK_PROVIDER
from reviewchain.pipeline.config_store import PipelineConfigStore
from reviewchain.pipeline.errors import SerializationError
from reviewchain.pipeline.models import StepConfig

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILENAME = "fda_agents_config.json"


class ConfigSerializer:
    """Converts the ordered step list to/from JSON bytes."""

    def __init__(self, fallback_provider: str = DEFAULT_FALLBACK_PROVIDER) -> None:
        self._fallback_provider = fallback_provider

    def export(self, configs: Iterable[StepConfig]) -> bytes:
        """Serialize steps in document order."""
        records = [c.to_record() for c in configs]
        return json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")

    def import_(self, data: bytes | str) -> list[StepConfig]:
        """Parse and validate a configuration document.

        The top-level value must be a non-empty array whose first element
        is an object carrying ``id``; every element must be a valid step
        and ids must be unique.

        Raises:
            SerializationError: On any violation.
        """
        try:
            parsed: Any = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SerializationError(f"Malformed configuration: {exc}") from exc

        if not isinstance(parsed, list):
            raise SerializationError("Configuration must be a JSON array of steps")
        if not parsed:
            raise SerializationError("Configuration contains no steps")
        first = parsed[0]
        if not isinstance(first, dict) or not first.get("id"):
            raise SerializationError("First step has no 'id' field")

        configs: list[StepConfig] = []
        seen: set[str] = set()
        context = {"fallback_provider": self._fallback_provider}
        for position, record in enumerate(parsed):
            try:
                config = StepConfig.model_validate(record, context=context)
            except PydanticValidationError as exc:
                err = exc.errors()[0]
                loc = ".".join(str(p) for p in err["loc"]) or "record"
                raise SerializationError(
                    f"Invalid step at position {position}: {loc}: {err['msg']}"
                ) from exc
            if config.id in seen:
                raise SerializationError(f"Duplicate step id: {config.id!r}")
            seen.add(config.id)
            configs.append(config)
        return configs

    def load_into(self, store: PipelineConfigStore, data: bytes | str) -> list[StepConfig]:
        """Import ``data`` and replace the store content with it.

        The store is untouched when the import fails.
        """
        configs = self.import_(data)
        store.replace_all(configs)
        logger.info("Loaded %d step configurations", len(configs))
        return configs

    def save_file(self, path: Path, configs: Iterable[StepConfig]) -> Path:
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.export(configs))
        logger.info("Step configurations written to %s", path)
        return path

    def load_file(self, path: Path) -> list[StepConfig]:
        """Read and import a configuration file.

        Raises:
            SerializationError: If the file cannot be read or does not import.
        """
        try:
            data = Path(path).expanduser().read_bytes()
        except OSError as exc:
            raise SerializationError(f"Cannot read configuration {path}: {exc}") from exc
        return self.import_(data)
