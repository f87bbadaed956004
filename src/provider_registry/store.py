"""Catalog store contract and in-memory implementation.

Every operation is atomic for a single row. Stores enforce uniqueness of
``(natural_key, model_kind)`` among entries that are neither hidden nor
deleted; the service's own existence check only produces a friendlier
error earlier.

Operations are coroutines so database-backed stores do their I/O without
holding up the event loop. The in-memory store never awaits while holding
its lock.
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone

from provider_registry.errors import AlreadyExistsError, NotFoundError
from provider_registry.models import ModelEntry, ModelKind


class CatalogStore(ABC):
    """Persistence contract required by the registry service."""

    @abstractmethod
    async def create(self, entry: ModelEntry) -> ModelEntry:
        """Insert an entry and return it with its store-assigned id.

        Raises:
            AlreadyExistsError: If an active visible entry shares the
                entry's natural key and kind.
        """

    @abstractmethod
    async def find_by_natural_key_and_kind(
        self,
        natural_key: str,
        kind: ModelKind,
        visible_only: bool = True,
    ) -> ModelEntry | None:
        """Find a non-deleted entry by natural key and kind.

        Args:
            natural_key: Provider-side model name before namespacing.
            kind: Model kind to search within.
            visible_only: Also require the entry to be not hidden.
        """

    @abstractmethod
    async def find_by_id(self, entry_id: str) -> ModelEntry | None:
        """Find an entry by id, including soft-deleted ones."""

    @abstractmethod
    async def update_hidden(self, entry_id: str, hidden: bool) -> ModelEntry:
        """Set the hidden flag and return the updated entry.

        Raises:
            NotFoundError: If no entry has that id.
            AlreadyExistsError: If un-hiding would duplicate an active entry.
        """

    @abstractmethod
    async def hard_delete(self, entry_id: str) -> None:
        """Physically remove an entry.

        Raises:
            NotFoundError: If no entry has that id.
        """

    @abstractmethod
    async def list_filtered(
        self,
        provider_kinds: Iterable[str] | None = None,
        exclude_deleted: bool = True,
    ) -> list[ModelEntry]:
        """List entries in insertion order.

        Args:
            provider_kinds: Only include these providers (None for all).
            exclude_deleted: Drop soft-deleted entries.
        """

    async def close(self) -> None:
        """Release any resources held by the store."""


class InMemoryCatalogStore(CatalogStore):
    """Dict-backed store guarded by a lock."""

    def __init__(self, entries: Iterable[ModelEntry] | None = None) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, ModelEntry] = {}
        for entry in entries or ():
            self._insert(entry)

    def _conflicts(self, candidate: ModelEntry, ignore_id: str | None = None) -> bool:
        if not candidate.is_visible:
            return False
        return any(
            existing.id != ignore_id
            and existing.is_visible
            and existing.natural_key == candidate.natural_key
            and existing.model_kind == candidate.model_kind
            for existing in self._entries.values()
        )

    def _insert(self, entry: ModelEntry) -> ModelEntry:
        stored = entry.model_copy(deep=True)
        stored.id = stored.id or uuid.uuid4().hex
        stored.created_at = stored.created_at or datetime.now(timezone.utc)
        with self._lock:
            if stored.id in self._entries:
                raise AlreadyExistsError(f"Entry id already in use: {stored.id}")
            if self._conflicts(stored):
                raise AlreadyExistsError("Model already exist")
            self._entries[stored.id] = stored
        return stored.model_copy(deep=True)

    async def create(self, entry: ModelEntry) -> ModelEntry:
        return self._insert(entry)

    async def find_by_natural_key_and_kind(
        self,
        natural_key: str,
        kind: ModelKind,
        visible_only: bool = True,
    ) -> ModelEntry | None:
        with self._lock:
            for entry in self._entries.values():
                if entry.deleted or (visible_only and entry.hidden):
                    continue
                if entry.natural_key == natural_key and entry.model_kind == kind:
                    return entry.model_copy(deep=True)
        return None

    async def find_by_id(self, entry_id: str) -> ModelEntry | None:
        with self._lock:
            entry = self._entries.get(entry_id)
            return entry.model_copy(deep=True) if entry else None

    async def update_hidden(self, entry_id: str, hidden: bool) -> ModelEntry:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                raise NotFoundError("Model not found")
            updated = entry.model_copy(update={"hidden": hidden}, deep=True)
            if self._conflicts(updated, ignore_id=entry_id):
                raise AlreadyExistsError("Model already exist")
            self._entries[entry_id] = updated
            return updated.model_copy(deep=True)

    async def hard_delete(self, entry_id: str) -> None:
        with self._lock:
            if self._entries.pop(entry_id, None) is None:
                raise NotFoundError("Model not found")

    async def list_filtered(
        self,
        provider_kinds: Iterable[str] | None = None,
        exclude_deleted: bool = True,
    ) -> list[ModelEntry]:
        allowed = set(provider_kinds) if provider_kinds is not None else None
        with self._lock:
            return [
                entry.model_copy(deep=True)
                for entry in self._entries.values()
                if not (exclude_deleted and entry.deleted)
                and (allowed is None or entry.provider_kind in allowed)
            ]
