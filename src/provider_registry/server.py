"""FastMCP server definition for the provider registry."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from provider_registry.config import RegistryConfig, get_config
from provider_registry.service import ModelRegistryService
from provider_registry.store import CatalogStore, InMemoryCatalogStore

logger = logging.getLogger(__name__)


def create_store(config: RegistryConfig) -> CatalogStore:
    """Create the catalog store selected by configuration."""
    if config.database_url:
        from provider_registry.sql_store import SQLCatalogStore

        return SQLCatalogStore(config.database_url)
    logger.warning("No database URL configured, catalog is kept in memory only")
    return InMemoryCatalogStore()


class RegistryServer:
    """Provider registry MCP server."""

    def __init__(self, config: RegistryConfig | None = None) -> None:
        self._config = config or get_config()
        self._service: ModelRegistryService | None = None
        self._mcp: FastMCP | None = None

    @property
    def config(self) -> RegistryConfig:
        """Get server configuration."""
        return self._config

    @property
    def service(self) -> ModelRegistryService:
        """Get the registry service.

        Raises:
            RuntimeError: If server is not running.
        """
        if self._service is None:
            raise RuntimeError("Server not running. Registry service not available.")
        return self._service

    @property
    def mcp(self) -> FastMCP:
        """Get the MCP server instance.

        Raises:
            RuntimeError: If server is not initialized.
        """
        if self._mcp is None:
            raise RuntimeError("Server not initialized.")
        return self._mcp

    def _create_lifespan(self) -> Callable[[Any], AbstractAsyncContextManager[None]]:
        """Create the lifespan context manager for the MCP server."""
        server_self = self

        @asynccontextmanager
        async def lifespan(_app: Any) -> AsyncIterator[None]:
            """Open the catalog store on startup, release it on shutdown."""
            logger.info("Starting provider registry server...")
            store = create_store(server_self._config)
            server_self._service = ModelRegistryService(server_self._config, store)
            try:
                logger.info("Provider registry server started")
                yield
            finally:
                logger.info("Shutting down provider registry server...")
                await server_self._service.close()
                await store.close()
                server_self._service = None
                logger.info("Provider registry server shut down")

        return lifespan

    def create_mcp(self) -> FastMCP:
        """Create and configure the FastMCP server."""
        from provider_registry.tools import register_tools

        mcp = FastMCP(
            name="provider-registry",
            instructions="MCP server for administering a catalog of chat and embedding "
            "models served by OpenAI-compatible endpoints, Ollama, and Replicate.",
            lifespan=self._create_lifespan(),
            host=self._config.host,
            port=self._config.port,
        )
        self._mcp = mcp
        register_tools(mcp, self)
        return mcp


# Global server instance
_server: RegistryServer | None = None


def get_server() -> RegistryServer:
    """Get the global server instance."""
    global _server
    if _server is None:
        _server = RegistryServer()
    return _server


def create_server(config: RegistryConfig | None = None) -> FastMCP:
    """Create and return the MCP server instance.

    This is the main entry point for creating the server.
    """
    global _server
    _server = RegistryServer(config)
    return _server.create_mcp()
