"""Namespaced identifiers for catalog entries.

An identifier is the trimmed provider-side name, prefixed for embedding
models, followed by a separator and a millisecond token. Tokens are strictly
increasing within the process, so two registrations landing in the same
millisecond still get distinct identifiers.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from provider_registry.models import ModelKind

EMBEDDING_PREFIX = "dialoqbase_eb_"
SEPARATOR = "_dialoqbase_"


class IdentifierGenerator:
    """Generates namespaced model identifiers."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        """Initialize generator.

        Args:
            clock: Returns wall-clock seconds; defaults to time.time.
        """
        self._clock = clock or time.time
        self._lock = threading.Lock()
        self._last_token = 0

    def next_token(self) -> int:
        """Return a millisecond timestamp greater than any previously issued."""
        now_ms = int(self._clock() * 1000)
        with self._lock:
            token = max(now_ms, self._last_token + 1)
            self._last_token = token
        return token

    def namespace(self, raw_name: str, kind: ModelKind) -> str:
        """Build the identifier for a provider-side model name."""
        name = raw_name.strip()
        if kind == ModelKind.EMBEDDING:
            name = f"{EMBEDDING_PREFIX}{name}"
        return f"{name}{SEPARATOR}{self.next_token()}"


_default_generator = IdentifierGenerator()


def namespace_model_id(raw_name: str, kind: ModelKind = ModelKind.CHAT) -> str:
    """Namespace a model name using the process-wide generator."""
    return _default_generator.namespace(raw_name, kind)
