"""Pydantic models for catalog entries and remote provider results."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from provider_registry.errors import InvalidArgumentError


class ModelKind(str, Enum):
    """What a catalog entry is used for."""

    CHAT = "chat"
    EMBEDDING = "embedding"


class ApiType(str, Enum):
    """Backend family declared by the caller when registering or discovering."""

    OPENAI = "openai"
    OLLAMA = "ollama"
    REPLICATE = "replicate"
    TRANSFORMER = "transformer"

    @classmethod
    def parse(cls, value: "str | ApiType") -> "ApiType":
        """Parse an API type, rejecting anything outside the known set."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise InvalidArgumentError(f"Unsupported api_type: {value!r}") from e


class ProviderKind(str, Enum):
    """Provider recorded on a catalog entry.

    Built-in rows may carry other provider strings (e.g. ``openai``,
    ``Local``); those are kept verbatim on ``ModelEntry.provider_kind``.
    """

    LOCAL = "local"
    OLLAMA = "ollama"
    REPLICATE = "replicate"
    TRANSFORMER = "transformer"
    OTHER = "other"


def remove_trailing_slash(url: str) -> str:
    """Strip trailing slashes so paths can be appended with a single '/'."""
    return url.rstrip("/")


class ConnectionConfig(BaseModel):
    """Where and how to reach a provider.

    The API key is opaque: it is stored and forwarded, never inspected.
    """

    base_url: str | None = Field(None, description="Provider base URL")
    api_key: str | None = Field(None, description="Provider credential", repr=False)

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return remove_trailing_slash(v.strip())

    def to_storage(self) -> dict[str, Any]:
        """Serialize to the opaque map kept by the store."""
        return {"baseURL": self.base_url, "apiKey": self.api_key}

    @classmethod
    def from_storage(cls, data: dict[str, Any] | None) -> "ConnectionConfig":
        """Rebuild from the opaque map kept by the store."""
        data = data or {}
        return cls(
            base_url=data.get("baseURL", data.get("base_url")),
            api_key=data.get("apiKey", data.get("api_key")),
        )


class ModelEntry(BaseModel):
    """A model in the catalog.

    ``natural_key`` is the trimmed provider-side name used for uniqueness
    checks; ``model_id`` is the namespaced identifier derived from it.
    """

    model_config = ConfigDict(protected_namespaces=())

    id: str | None = Field(None, description="Store-assigned identifier")
    model_id: str = Field(..., description="Namespaced provider-side model name")
    natural_key: str = Field(..., description="Provider-side model name before namespacing")
    display_name: str | None = Field(None, description="Human-readable name")
    model_kind: ModelKind = Field(ModelKind.CHAT, description="chat or embedding")
    provider_kind: str = Field(..., description="Provider recorded for this entry")
    is_local: bool = Field(True, description="User-registered (deletable) entry")
    stream_capable: bool = Field(False, description="Provider supports streaming")
    connection_config: ConnectionConfig = Field(default_factory=ConnectionConfig)
    hidden: bool = Field(False, description="Excluded from default listings")
    deleted: bool = Field(False, description="Soft-deleted")
    created_at: datetime | None = Field(None, description="Creation timestamp")

    @property
    def is_active(self) -> bool:
        """Not soft-deleted."""
        return not self.deleted

    @property
    def is_visible(self) -> bool:
        """Active and not hidden."""
        return not self.deleted and not self.hidden


class RemoteModel(BaseModel):
    """A model reported by a provider's listing endpoint."""

    id: str = Field(..., description="Provider-side model name")
    label: str = Field(..., description="Display label")


class RemoteModelInfo(BaseModel):
    """A single model confirmed to exist by a provider."""

    canonical_name: str = Field(..., description="Name reported by the provider")


class Caller(BaseModel):
    """The authenticated principal invoking a registry operation."""

    user_id: str | None = Field(None, description="Caller identifier")
    is_admin: bool = Field(False, description="Caller is a registry administrator")


class CatalogListing(BaseModel):
    """Catalog entries grouped by model kind."""

    chat: list[ModelEntry] = Field(default_factory=list)
    embedding: list[ModelEntry] = Field(default_factory=list)


class RegistrationResult(BaseModel):
    """Acknowledgment returned by registration operations."""

    message: str = Field("success")
    entry: ModelEntry
