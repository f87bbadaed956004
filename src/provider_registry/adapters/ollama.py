"""Adapter for local Ollama servers."""

from __future__ import annotations

import logging

from provider_registry.adapters.base import ProviderAdapter
from provider_registry.errors import UnavailableError
from provider_registry.models import ConnectionConfig, RemoteModel

logger = logging.getLogger(__name__)


class OllamaAdapter(ProviderAdapter):
    """Lists the tags pulled into an Ollama server."""

    display_name = "Ollama"

    async def discover(self, connection: ConnectionConfig) -> list[RemoteModel]:
        """List models at ``{base_url}/api/tags``.

        Ollama has no separate display name, so each tag name is used as
        both id and label.

        Raises:
            UnavailableError: On any transport, HTTP or parse failure.
        """
        base_url = self._require_base_url(connection)
        data = await self._get_json(f"{base_url}/api/tags")

        tags = data.get("models") if isinstance(data, dict) else None
        if not isinstance(tags, list):
            raise UnavailableError(f"Unexpected tag listing format from {base_url}/api/tags")

        models = [
            RemoteModel(id=str(tag["name"]), label=str(tag["name"]))
            for tag in tags
            if isinstance(tag, dict) and tag.get("name")
        ]
        logger.debug(f"Discovered {len(models)} Ollama models at {base_url}")
        return models
