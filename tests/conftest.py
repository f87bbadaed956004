"""Shared fixtures for provider registry tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from provider_registry.config import RegistryConfig
from provider_registry.models import Caller, ConnectionConfig, ModelEntry, ModelKind
from provider_registry.store import InMemoryCatalogStore


@pytest.fixture
def config() -> RegistryConfig:
    """Create a config that ignores the environment's .env file."""
    return RegistryConfig(
        _env_file=None,
        adapter_timeout=5,
        client_referer="https://registry.example.com/",
        client_title="Registry Tests",
        replicate_api_url="https://api.replicate.com/v1/models/",
    )


@pytest.fixture
def admin() -> Caller:
    """An administrator."""
    return Caller(user_id="admin", is_admin=True)


@pytest.fixture
def member() -> Caller:
    """A regular, non-admin user."""
    return Caller(user_id="member", is_admin=False)


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """An empty in-memory catalog."""
    return InMemoryCatalogStore()


@pytest.fixture
def builtin_entry() -> ModelEntry:
    """A seeded, non-local catalog entry."""
    return ModelEntry(
        id="builtin-gpt",
        model_id="gpt-4o-mini",
        natural_key="gpt-4o-mini",
        display_name="GPT-4o mini",
        model_kind=ModelKind.CHAT,
        provider_kind="openai",
        is_local=False,
        stream_capable=True,
    )


@pytest.fixture
def make_entry() -> Callable[..., ModelEntry]:
    """Factory for user-registered entries."""

    def _make_entry(
        natural_key: str = "llama3",
        kind: ModelKind = ModelKind.CHAT,
        provider_kind: str = "ollama",
        **overrides: Any,
    ) -> ModelEntry:
        values: dict[str, Any] = {
            "model_id": f"{natural_key}_dialoqbase_1700000000000",
            "natural_key": natural_key,
            "display_name": natural_key,
            "model_kind": kind,
            "provider_kind": provider_kind,
            "connection_config": ConnectionConfig(
                base_url="http://localhost:11434", api_key=None
            ),
        }
        values.update(overrides)
        return ModelEntry(**values)

    return _make_entry


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """Build an httpx transport that answers with a handler and records requests."""

    def _create_transport(
        handler: Callable[[httpx.Request], httpx.Response],
        seen: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def _record(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            return handler(request)

        return httpx.MockTransport(_record)

    return _create_transport
