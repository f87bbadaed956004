"""MCP tools for catalog administration."""

import logging
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from provider_registry.errors import RegistryError
from provider_registry.models import ApiType, Caller, ConnectionConfig
from provider_registry.utils.response import ResponseBuilder, Verbosity

if TYPE_CHECKING:
    from provider_registry.server import RegistryServer

logger = logging.getLogger(__name__)


def register_tools(mcp: FastMCP, server: "RegistryServer") -> None:
    """Register catalog tools with the MCP server."""

    def _caller() -> Caller:
        return Caller(user_id="mcp", is_admin=server.config.admin_access)

    @mcp.tool()
    async def list_models(
        hide_defaults: bool | None = None,
        include_hidden: bool = False,
        verbosity: str = "standard",
    ) -> dict[str, Any]:
        """List catalog models grouped into chat (``data``) and ``embedding``.

        Args:
            hide_defaults: Only list self-hosted providers (local, ollama,
                transformer). Defaults to the server setting.
            include_hidden: Also list models an administrator has hidden.
            verbosity: Response detail level - "minimal", "standard", or "full".

        Returns:
            Chat and embedding models.
        """
        try:
            listing = await server.service.list_catalog(
                _caller(),
                hide_defaults=hide_defaults,
                include_hidden=include_hidden,
            )
        except RegistryError as e:
            return e.to_dict()
        return ResponseBuilder.catalog(listing, Verbosity.from_str(verbosity))

    @mcp.tool()
    async def discover_models(
        api_type: str,
        url: str | None = None,
        api_key: str | None = None,
        ollama_url: str | None = None,
    ) -> dict[str, Any]:
        """Fetch the models offered by an OpenAI-compatible or Ollama endpoint.

        Use this before registering an "openai" or "ollama" chat model to
        pick a valid model id.

        Args:
            api_type: "openai" or "ollama".
            url: Base URL of the endpoint (e.g. http://localhost:1234/v1).
            api_key: Bearer token for protected OpenAI-compatible endpoints.
            ollama_url: Ollama base URL; used instead of url when given.

        Returns:
            Discovered models.
        """
        try:
            kind = ApiType.parse(api_type)
            base_url = ollama_url if ollama_url and kind == ApiType.OLLAMA else url
            models = await server.service.discover_remote(
                _caller(),
                kind,
                ConnectionConfig(base_url=base_url, api_key=api_key),
            )
        except RegistryError as e:
            return e.to_dict()
        return ResponseBuilder.remote_models(models)

    @mcp.tool()
    async def register_chat_model(
        api_type: str,
        model_id: str,
        name: str | None = None,
        url: str | None = None,
        api_key: str | None = None,
        stream_available: bool = False,
    ) -> dict[str, Any]:
        """Add a chat model to the catalog.

        Replicate models ("owner/model" or "owner/model:version") are checked
        against Replicate with the given api_key and named after Replicate's
        canonical name.

        Args:
            api_type: "openai", "ollama", or "replicate".
            model_id: Provider-side model name.
            name: Display name (ignored for Replicate).
            url: Provider base URL (not used for Replicate).
            api_key: Provider credential.
            stream_available: Whether the provider streams responses.

        Returns:
            Success message and the stored model.
        """
        allowed, reason = server.config.is_operation_allowed("create")
        if not allowed:
            return {"error": f"Operation not allowed: {reason}"}

        try:
            result = await server.service.register_chat_model(
                _caller(),
                api_type,
                model_id,
                display_name=name,
                credential=api_key,
                connection=ConnectionConfig(base_url=url),
                stream_capable=stream_available,
            )
        except RegistryError as e:
            return e.to_dict()
        return {
            "message": result.message,
            "model": ResponseBuilder.model_entry(result.entry),
        }

    @mcp.tool()
    async def register_embedding_model(
        api_type: str,
        model_id: str,
        model_name: str | None = None,
        url: str | None = None,
        api_key: str | None = None,
    ) -> dict[str, Any]:
        """Add an embedding model to the catalog.

        Args:
            api_type: "openai", "ollama", or "transformer".
            model_id: Provider-side model name.
            model_name: Display name.
            url: Provider base URL (optional for transformer).
            api_key: Provider credential.

        Returns:
            Success message and the stored model.
        """
        allowed, reason = server.config.is_operation_allowed("create")
        if not allowed:
            return {"error": f"Operation not allowed: {reason}"}

        try:
            result = await server.service.register_embedding_model(
                _caller(),
                api_type,
                model_id,
                display_name=model_name,
                credential=api_key,
                connection=ConnectionConfig(base_url=url),
            )
        except RegistryError as e:
            return e.to_dict()
        return {
            "message": result.message,
            "model": ResponseBuilder.model_entry(result.entry),
        }

    @mcp.tool()
    async def toggle_model_visibility(entry_id: str) -> dict[str, Any]:
        """Hide a visible model or show a hidden one.

        Args:
            entry_id: Catalog id of the model.

        Returns:
            Success message and the new visibility.
        """
        allowed, reason = server.config.is_operation_allowed("update")
        if not allowed:
            return {"error": f"Operation not allowed: {reason}"}

        try:
            entry = await server.service.toggle_visibility(_caller(), entry_id)
        except RegistryError as e:
            return e.to_dict()
        return {"message": "success", "id": entry.id, "hidden": entry.hidden}

    @mcp.tool()
    async def delete_model(entry_id: str) -> dict[str, Any]:
        """Permanently delete a user-registered model.

        Built-in models cannot be deleted; hide them instead.

        Args:
            entry_id: Catalog id of the model.

        Returns:
            Success message.
        """
        allowed, reason = server.config.is_operation_allowed("delete")
        if not allowed:
            return {"error": f"Operation not allowed: {reason}"}

        try:
            await server.service.delete_model(_caller(), entry_id)
        except RegistryError as e:
            return e.to_dict()
        return {"message": "success"}

    logger.info("Registered catalog tools")
