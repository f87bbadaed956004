"""Tests for server wiring."""

from unittest.mock import MagicMock, patch

import pytest

from provider_registry.config import RegistryConfig
from provider_registry.server import RegistryServer, create_store
from provider_registry.sql_store import SQLCatalogStore
from provider_registry.store import InMemoryCatalogStore


class TestCreateStore:
    """Test create_store."""

    def test_in_memory_without_database_url(self, config: RegistryConfig) -> None:
        assert isinstance(create_store(config), InMemoryCatalogStore)

    @pytest.mark.asyncio
    async def test_sql_store_with_database_url(self) -> None:
        store = create_store(RegistryConfig(_env_file=None, database_url="sqlite://"))
        try:
            assert isinstance(store, SQLCatalogStore)
        finally:
            await store.close()


class TestRegistryServer:
    """Test RegistryServer."""

    def test_service_unavailable_before_start(self, config: RegistryConfig) -> None:
        server = RegistryServer(config)

        with pytest.raises(RuntimeError, match="Server not running"):
            _ = server.service

    def test_create_mcp_registers_tools(self, config: RegistryConfig) -> None:
        server = RegistryServer(config)

        with patch("provider_registry.tools.register_tools") as mock_register:
            mcp = server.create_mcp()

        assert server.mcp is mcp
        mock_register.assert_called_once_with(mcp, server)

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_closes_service(self, config: RegistryConfig) -> None:
        server = RegistryServer(config)
        lifespan = server._create_lifespan()

        async with lifespan(MagicMock()):
            assert await server.service.store.list_filtered() == []

        with pytest.raises(RuntimeError):
            _ = server.service
