"""Provider adapters, one per backend family.

Exports:
    - ProviderAdapter: Shared discover/validate interface
    - OpenAICompatibleAdapter: ``GET {base_url}/models``
    - OllamaAdapter: ``GET {base_url}/api/tags``
    - ReplicateAdapter: single-model validation
    - build_adapters: Adapter instance per API type
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from provider_registry.adapters.base import ProviderAdapter
from provider_registry.adapters.ollama import OllamaAdapter
from provider_registry.adapters.openai_compat import OpenAICompatibleAdapter
from provider_registry.adapters.replicate import ReplicateAdapter, parse_model_reference
from provider_registry.models import ApiType

if TYPE_CHECKING:
    from provider_registry.config import RegistryConfig


def build_adapters(
    config: RegistryConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[ApiType, ProviderAdapter]:
    """Create one adapter per API type that talks to a remote backend.

    ``ApiType.TRANSFORMER`` models run in-process and have no adapter.
    """
    return {
        ApiType.OPENAI: OpenAICompatibleAdapter(config, transport),
        ApiType.OLLAMA: OllamaAdapter(config, transport),
        ApiType.REPLICATE: ReplicateAdapter(config, transport),
    }


__all__ = [
    "ProviderAdapter",
    "OpenAICompatibleAdapter",
    "OllamaAdapter",
    "ReplicateAdapter",
    "build_adapters",
    "parse_model_reference",
]
