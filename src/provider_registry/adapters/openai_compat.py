"""Adapter for OpenAI-compatible model listing endpoints."""

from __future__ import annotations

import logging
from typing import Any

from provider_registry.adapters.base import ProviderAdapter
from provider_registry.errors import UnavailableError
from provider_registry.models import ConnectionConfig, RemoteModel

logger = logging.getLogger(__name__)


class OpenAICompatibleAdapter(ProviderAdapter):
    """Lists models from any server implementing ``GET /models``."""

    display_name = "OpenAI-compatible endpoint"

    def _build_headers(self, api_key: str | None) -> dict[str, str]:
        headers = {
            "HTTP-Referer": self._config.client_referer,
            "X-Title": self._config.client_title,
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def discover(self, connection: ConnectionConfig) -> list[RemoteModel]:
        """List models at ``{base_url}/models``.

        Args:
            connection: Endpoint and optional bearer credential.

        Returns:
            Models reported by the endpoint.

        Raises:
            UnavailableError: On any transport, HTTP or parse failure.
        """
        base_url = self._require_base_url(connection)
        data = await self._get_json(
            f"{base_url}/models",
            headers=self._build_headers(connection.api_key),
        )

        # Some servers return a bare list instead of {"data": [...]}
        items = data if isinstance(data, list) else None
        if isinstance(data, dict):
            items = data.get("data")
        if not isinstance(items, list):
            raise UnavailableError(f"Unexpected model listing format from {base_url}/models")

        models = []
        for item in items:
            model = self._parse_model(item)
            if model is not None:
                models.append(model)
        logger.debug(f"Discovered {len(models)} models at {base_url}")
        return models

    def _parse_model(self, item: Any) -> RemoteModel | None:
        """Parse a model from the listing response."""
        if isinstance(item, str):
            return RemoteModel(id=item, label=item)
        if not isinstance(item, dict):
            return None
        model_id = item.get("id") or item.get("name")
        if not model_id:
            return None
        return RemoteModel(id=str(model_id), label=str(item.get("name") or model_id))
