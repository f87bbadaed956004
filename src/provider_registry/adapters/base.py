"""Shared HTTP plumbing for provider adapters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from provider_registry.errors import InvalidArgumentError, UnavailableError
from provider_registry.models import ConnectionConfig, RemoteModel, RemoteModelInfo

if TYPE_CHECKING:
    from provider_registry.config import RegistryConfig

logger = logging.getLogger(__name__)


class ProviderAdapter:
    """Base class for remote provider adapters.

    Adapters translate one backend's discovery or validation protocol into
    ``RemoteModel``/``RemoteModelInfo`` results and ``RegistryError``
    failures. They keep no per-request state, so a single instance can serve
    concurrent requests; every call is bounded by ``adapter_timeout``.

    Usage:
        async with OllamaAdapter(config) as adapter:
            models = await adapter.discover(connection)
    """

    display_name = "provider"

    def __init__(
        self,
        config: RegistryConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            config: Registry configuration with adapter settings.
            transport: Optional httpx transport, used to stub the network.
        """
        self._config = config
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._config.adapter_timeout,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def discover(self, connection: ConnectionConfig) -> list[RemoteModel]:
        """List the models available at a provider endpoint.

        Raises:
            InvalidArgumentError: If this provider cannot list models.
        """
        raise InvalidArgumentError(f"{self.display_name} does not support model discovery")

    async def validate(self, model_name: str, credential: str | None) -> RemoteModelInfo:
        """Confirm that a single named model exists.

        Raises:
            InvalidArgumentError: If this provider cannot validate models.
        """
        raise InvalidArgumentError(f"{self.display_name} does not support model validation")

    async def _get_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        """GET a URL and decode its JSON body.

        Every failure becomes ``UnavailableError``: these backends do not
        report errors consistently enough to tell them apart.
        """
        client = await self._get_client()
        try:
            response = await client.get(url, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.ConnectError as e:
            logger.warning(f"Failed to connect to {self.display_name} at {url}: {e}")
            raise UnavailableError(f"Failed to connect to {self.display_name} at {url}") from e
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout connecting to {self.display_name} at {url}: {e}")
            raise UnavailableError(f"Timeout connecting to {self.display_name} at {url}") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.display_name} at {url} returned {e.response.status_code}")
            raise UnavailableError(
                f"{self.display_name} at {url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Request to {self.display_name} at {url} failed: {e}")
            raise UnavailableError(f"Request to {self.display_name} at {url} failed") from e
        except ValueError as e:
            raise UnavailableError(f"{self.display_name} at {url} returned invalid JSON") from e

    @staticmethod
    def _require_base_url(connection: ConnectionConfig) -> str:
        if not connection.base_url:
            raise InvalidArgumentError("A base URL is required")
        return connection.base_url

    async def __aenter__(self) -> ProviderAdapter:
        """Async context manager entry."""
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
