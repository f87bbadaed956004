"""Response formatting for MCP tools.

Tool responses never carry provider credentials: the API key is reduced to
a flag saying whether one is configured.
"""

from enum import Enum
from typing import Any

from provider_registry.models import CatalogListing, ModelEntry, RemoteModel


class Verbosity(str, Enum):
    """Response verbosity levels.

    - MINIMAL: id, model id and visibility only
    - STANDARD: key fields for browsing the catalog
    - FULL: everything, including connection details
    """

    MINIMAL = "minimal"
    STANDARD = "standard"
    FULL = "full"

    @classmethod
    def from_str(cls, value: str | None) -> "Verbosity":
        """Parse verbosity from string, defaulting to STANDARD."""
        if value is None:
            return cls.STANDARD
        try:
            return cls(value.lower())
        except ValueError:
            return cls.STANDARD


class ResponseBuilder:
    """Builds formatted responses at different verbosity levels."""

    @staticmethod
    def model_entry(entry: ModelEntry, verbosity: Verbosity = Verbosity.STANDARD) -> dict[str, Any]:
        """Format a catalog entry.

        Args:
            entry: Catalog entry.
            verbosity: Response verbosity level.

        Returns:
            Formatted entry dict.
        """
        if verbosity == Verbosity.MINIMAL:
            return {
                "id": entry.id,
                "model_id": entry.model_id,
                "hidden": entry.hidden,
            }

        result: dict[str, Any] = {
            "id": entry.id,
            "model_id": entry.model_id,
            "name": entry.display_name,
            "model_type": entry.model_kind.value,
            "model_provider": entry.provider_kind,
            "local_model": entry.is_local,
            "stream_available": entry.stream_capable,
            "hidden": entry.hidden,
        }

        if verbosity == Verbosity.FULL:
            result["natural_key"] = entry.natural_key
            result["config"] = {
                "base_url": entry.connection_config.base_url,
                "has_api_key": bool(entry.connection_config.api_key),
            }
            result["created_at"] = entry.created_at.isoformat() if entry.created_at else None

        return result

    @staticmethod
    def catalog(listing: CatalogListing, verbosity: Verbosity = Verbosity.STANDARD) -> dict[str, Any]:
        """Format a catalog listing as ``data`` (chat) and ``embedding`` groups."""
        return {
            "data": [ResponseBuilder.model_entry(e, verbosity) for e in listing.chat],
            "embedding": [ResponseBuilder.model_entry(e, verbosity) for e in listing.embedding],
        }

    @staticmethod
    def remote_models(models: list[RemoteModel]) -> dict[str, Any]:
        """Format discovered models."""
        return {"data": [{"id": m.id, "object": m.label} for m in models]}
