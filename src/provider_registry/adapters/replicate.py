"""Adapter for the Replicate hosted-model API."""

from __future__ import annotations

import logging

import httpx

from provider_registry.adapters.base import ProviderAdapter
from provider_registry.errors import (
    InvalidArgumentError,
    NotFoundError,
    RemoteForbiddenError,
    UnauthorizedError,
    UnavailableError,
)
from provider_registry.models import RemoteModelInfo

logger = logging.getLogger(__name__)


def parse_model_reference(model_name: str) -> tuple[str, str, str | None]:
    """Split a Replicate model reference into owner, model and version.

    Accepts ``owner/model`` and ``owner/model:version``.

    Raises:
        InvalidArgumentError: If the reference has no owner part, or the
            version is empty or itself contains ``:``.
    """
    name = model_name.strip()
    owner, sep, rest = name.partition("/")
    if not sep or not owner or not rest:
        raise InvalidArgumentError(f"Invalid Replicate model reference: {model_name!r}")
    model, _, version = rest.partition(":")
    if ":" in name and (not version or ":" in version):
        raise InvalidArgumentError(f"Invalid Replicate model version in: {model_name!r}")
    return owner, model, version or None


class ReplicateAdapter(ProviderAdapter):
    """Validates single models against Replicate.

    Unlike the listing backends, Replicate answers with meaningful status
    codes, so 401, 403 and 404 are reported as distinct errors.
    """

    display_name = "Replicate"

    def model_url(self, model_name: str) -> str:
        """Build the Replicate URL for a model or model version."""
        base_url = self._config.replicate_api_url
        name = model_name.strip()
        if len(name.split(":")) <= 1:
            return f"{base_url}{name}"
        owner, model, version = parse_model_reference(name)
        return f"{base_url}{owner}/{model}/versions/{version}"

    async def validate(self, model_name: str, credential: str | None) -> RemoteModelInfo:
        """Check that a model (or model version) exists on Replicate.

        Args:
            model_name: ``owner/model`` or ``owner/model:version``.
            credential: Replicate API token.

        Returns:
            The canonical model name reported by Replicate.

        Raises:
            NotFoundError: Replicate answered 404.
            UnauthorizedError: Replicate answered 401.
            RemoteForbiddenError: Replicate answered 403.
            UnavailableError: Any other failure.
        """
        url = self.model_url(model_name)
        headers = {"Authorization": f"Token {credential}"} if credential else {}
        client = await self._get_client()

        try:
            response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout connecting to Replicate at {url}: {e}")
            raise UnavailableError("Internal Server Error") from e
        except httpx.HTTPError as e:
            logger.warning(f"Request to Replicate at {url} failed: {e}")
            raise UnavailableError("Internal Server Error") from e

        if response.status_code == 404:
            raise NotFoundError("Model not found")
        if response.status_code == 401:
            raise UnauthorizedError("Unauthorized")
        if response.status_code == 403:
            raise RemoteForbiddenError("Forbidden")
        if not response.is_success:
            logger.warning(f"Replicate returned {response.status_code} for {url}")
            raise UnavailableError("Internal Server Error")

        try:
            data = response.json()
        except ValueError as e:
            raise UnavailableError("Internal Server Error") from e

        name = data.get("name") if isinstance(data, dict) else None
        return RemoteModelInfo(canonical_name=str(name) if name else model_name.strip())
