"""Registry service: registration, discovery, visibility and deletion.

The service assumes the caller has already been authenticated; it only
checks the ``is_admin`` flag on the ``Caller`` it is handed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from provider_registry.adapters import ProviderAdapter, build_adapters
from provider_registry.catalog import build_listing_filter, partition_entries
from provider_registry.errors import (
    AlreadyExistsError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
)
from provider_registry.models import (
    ApiType,
    Caller,
    CatalogListing,
    ConnectionConfig,
    ModelEntry,
    ModelKind,
    ProviderKind,
    RegistrationResult,
    RemoteModel,
)
from provider_registry.naming import IdentifierGenerator

if TYPE_CHECKING:
    from provider_registry.config import RegistryConfig
    from provider_registry.store import CatalogStore

logger = logging.getLogger(__name__)

OLLAMA_UNREACHABLE_MESSAGE = (
    "Unable to fetch models from Ollama. Make sure Ollama is running and the url is correct"
)
OPENAI_UNREACHABLE_MESSAGE = (
    "Unable to fetch models. Make sure the url is correct and if the model is "
    "protected by api key, make sure the api key is correct"
)

_CHAT_PROVIDERS: dict[ApiType, ProviderKind] = {
    ApiType.OPENAI: ProviderKind.LOCAL,
    ApiType.OLLAMA: ProviderKind.OLLAMA,
    ApiType.REPLICATE: ProviderKind.REPLICATE,
}

_EMBEDDING_PROVIDERS: dict[ApiType, ProviderKind] = {
    ApiType.OPENAI: ProviderKind.LOCAL,
    ApiType.OLLAMA: ProviderKind.OLLAMA,
    ApiType.TRANSFORMER: ProviderKind.TRANSFORMER,
}

_DISCOVERY_MESSAGES: dict[ApiType, str] = {
    ApiType.OPENAI: OPENAI_UNREACHABLE_MESSAGE,
    ApiType.OLLAMA: OLLAMA_UNREACHABLE_MESSAGE,
}


def _require_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise ForbiddenError("Forbidden")


class ModelRegistryService:
    """Maintains the model catalog on top of a store and provider adapters.

    Usage:
        service = ModelRegistryService(config, InMemoryCatalogStore())
        listing = await service.list_catalog(caller)
    """

    def __init__(
        self,
        config: RegistryConfig,
        store: CatalogStore,
        adapters: dict[ApiType, ProviderAdapter] | None = None,
        id_generator: IdentifierGenerator | None = None,
    ) -> None:
        """Initialize service.

        Args:
            config: Registry configuration.
            store: Catalog persistence.
            adapters: Adapter per API type (defaults to build_adapters(config)).
            id_generator: Identifier generator (defaults to a new one).
        """
        self._config = config
        self._store = store
        self._adapters = adapters if adapters is not None else build_adapters(config)
        self._ids = id_generator or IdentifierGenerator()

    @property
    def store(self) -> CatalogStore:
        """Get the catalog store."""
        return self._store

    async def close(self) -> None:
        """Close adapter HTTP clients."""
        for adapter in self._adapters.values():
            await adapter.close()

    def _adapter_for(self, api_type: ApiType) -> ProviderAdapter:
        adapter = self._adapters.get(api_type)
        if adapter is None:
            raise InvalidArgumentError(f"No adapter available for api_type {api_type.value!r}")
        return adapter

    async def list_catalog(
        self,
        caller: Caller,
        hide_defaults: bool | None = None,
        include_hidden: bool = False,
    ) -> CatalogListing:
        """List non-deleted catalog entries grouped by kind.

        Args:
            caller: Requesting principal; must be an administrator.
            hide_defaults: Restrict to self-hosted providers. None uses the
                configured default.
            include_hidden: Keep entries an administrator has hidden.

        Returns:
            Chat and embedding entries.

        Raises:
            ForbiddenError: If the caller is not an administrator.
        """
        _require_admin(caller)
        if hide_defaults is None:
            hide_defaults = self._config.hide_default_models

        listing_filter = build_listing_filter(hide_defaults, include_hidden)
        entries = await self._store.list_filtered(
            provider_kinds=listing_filter.provider_kinds,
            exclude_deleted=listing_filter.exclude_deleted,
        )
        return partition_entries(e for e in entries if listing_filter.matches(e))

    async def discover_remote(
        self,
        caller: Caller,
        api_type: str | ApiType,
        connection: ConnectionConfig,
    ) -> list[RemoteModel]:
        """List the models offered by an OpenAI-compatible or Ollama endpoint.

        An unreachable endpoint and one that lists nothing are both reported
        as ``NotFoundError``.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            InvalidArgumentError: If the API type cannot list models.
            NotFoundError: If no models could be fetched.
        """
        _require_admin(caller)
        kind = ApiType.parse(api_type)
        message = _DISCOVERY_MESSAGES.get(kind)
        if message is None:
            raise InvalidArgumentError(f"Model discovery is not supported for {kind.value!r}")

        try:
            models = await self._adapter_for(kind).discover(connection)
        except UnavailableError as e:
            raise NotFoundError(message) from e

        if not models:
            raise NotFoundError(message)
        return models

    async def register_chat_model(
        self,
        caller: Caller,
        api_type: str | ApiType,
        model_name: str,
        display_name: str | None = None,
        credential: str | None = None,
        connection: ConnectionConfig | None = None,
        stream_capable: bool = False,
    ) -> RegistrationResult:
        """Register a chat model.

        Replicate models are validated remotely first and take their display
        name from Replicate. OpenAI-compatible and Ollama models are
        expected to have been picked from discover_remote already.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            InvalidArgumentError: If the API type has no chat backend.
            AlreadyExistsError: If an active entry has the same name.
            NotFoundError, UnauthorizedError, RemoteForbiddenError,
            UnavailableError: Propagated from Replicate validation.
        """
        _require_admin(caller)
        kind = ApiType.parse(api_type)
        provider = _CHAT_PROVIDERS.get(kind)
        if provider is None:
            raise InvalidArgumentError(f"Chat models are not supported for {kind.value!r}")
        natural_key = self._natural_key(model_name)

        if kind == ApiType.REPLICATE:
            info = await self._adapter_for(kind).validate(natural_key, credential)
            display_name = info.canonical_name
            stored_connection = ConnectionConfig(
                base_url=self._config.replicate_api_url,
                api_key=credential,
            )
        else:
            connection = connection or ConnectionConfig()
            stored_connection = ConnectionConfig(base_url=connection.base_url, api_key=credential)

        entry = await self._create_entry(
            natural_key=natural_key,
            kind=ModelKind.CHAT,
            provider=provider,
            display_name=display_name,
            connection=stored_connection,
            stream_capable=stream_capable,
        )
        return RegistrationResult(entry=entry)

    async def register_embedding_model(
        self,
        caller: Caller,
        api_type: str | ApiType,
        model_name: str,
        display_name: str | None = None,
        credential: str | None = None,
        connection: ConnectionConfig | None = None,
    ) -> RegistrationResult:
        """Register an embedding model.

        Uniqueness is checked among embedding entries only, so a model
        already registered for chat can also be registered for embeddings.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            InvalidArgumentError: If the API type has no embedding backend.
            AlreadyExistsError: If an active embedding entry has the same name.
        """
        _require_admin(caller)
        kind = ApiType.parse(api_type)
        provider = _EMBEDDING_PROVIDERS.get(kind)
        if provider is None:
            raise InvalidArgumentError(f"Embedding models are not supported for {kind.value!r}")

        connection = connection or ConnectionConfig()
        entry = await self._create_entry(
            natural_key=self._natural_key(model_name),
            kind=ModelKind.EMBEDDING,
            provider=provider,
            display_name=display_name,
            connection=ConnectionConfig(base_url=connection.base_url, api_key=credential),
            stream_capable=False,
        )
        return RegistrationResult(entry=entry)

    async def toggle_visibility(self, caller: Caller, entry_id: str) -> ModelEntry:
        """Flip the hidden flag of a non-deleted entry.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            NotFoundError: If no non-deleted entry has that id.
        """
        _require_admin(caller)
        entry = await self._get_active(entry_id)
        updated = await self._store.update_hidden(entry_id, not entry.hidden)
        logger.info(f"Model {updated.model_id} is now {'hidden' if updated.hidden else 'visible'}")
        return updated

    async def delete_model(self, caller: Caller, entry_id: str) -> None:
        """Permanently remove a user-registered entry.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            NotFoundError: If no non-deleted entry has that id.
            InvalidArgumentError: If the entry is built-in.
        """
        _require_admin(caller)
        entry = await self._get_active(entry_id)
        if not entry.is_local:
            raise InvalidArgumentError("Only local model can be deleted")
        await self._store.hard_delete(entry_id)
        logger.info(f"Deleted model {entry.model_id}")

    @staticmethod
    def _natural_key(model_name: str) -> str:
        natural_key = (model_name or "").strip()
        if not natural_key:
            raise InvalidArgumentError("model_name must not be empty")
        return natural_key

    async def _get_active(self, entry_id: str) -> ModelEntry:
        entry = await self._store.find_by_id(entry_id)
        if entry is None or entry.deleted:
            raise NotFoundError("Model not found")
        return entry

    async def _create_entry(
        self,
        natural_key: str,
        kind: ModelKind,
        provider: ProviderKind,
        display_name: str | None,
        connection: ConnectionConfig,
        stream_capable: bool,
    ) -> ModelEntry:
        """Check uniqueness, namespace the id and persist the entry."""
        if await self._store.find_by_natural_key_and_kind(natural_key, kind, visible_only=True):
            raise AlreadyExistsError("Model already exist")

        entry = await self._store.create(
            ModelEntry(
                model_id=self._ids.namespace(natural_key, kind),
                natural_key=natural_key,
                display_name=display_name or natural_key,
                model_kind=kind,
                provider_kind=provider.value,
                is_local=True,
                stream_capable=stream_capable,
                connection_config=connection,
            )
        )
        logger.info(f"Registered {kind.value} model {entry.model_id} ({provider.value})")
        return entry
