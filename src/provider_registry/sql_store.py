"""SQLAlchemy-backed catalog store.

Runs on SQLAlchemy's asyncio extension (``aiosqlite`` for SQLite,
``asyncpg`` for PostgreSQL). The partial unique index on
``(natural_key, model_kind)`` for rows that are neither hidden nor deleted
is what keeps concurrent registrations of the same model from both
succeeding.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, select, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from provider_registry.errors import AlreadyExistsError, NotFoundError, UnavailableError
from provider_registry.models import ConnectionConfig, ModelEntry, ModelKind
from provider_registry.store import CatalogStore

logger = logging.getLogger(__name__)

# Async drivers used when a URL names only the database backend
_ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "postgresql": "postgresql+asyncpg",
}


class Base(DeclarativeBase):
    pass


class CatalogModelRow(Base):
    __tablename__ = "catalog_models"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    model_id: Mapped[str] = mapped_column(String, index=True)
    natural_key: Mapped[str] = mapped_column(String, index=True)
    display_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    model_kind: Mapped[str] = mapped_column(String(32), default=ModelKind.CHAT.value)
    provider_kind: Mapped[str] = mapped_column(String(64), index=True)
    is_local: Mapped[bool] = mapped_column(Boolean, default=True)
    stream_capable: Mapped[bool] = mapped_column(Boolean, default=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index(
            "uq_catalog_models_active_key",
            "natural_key",
            "model_kind",
            unique=True,
            sqlite_where=text("hidden = 0 AND deleted = 0"),
            postgresql_where=text("hidden = false AND deleted = false"),
        ),
    )


def to_async_url(database_url: str) -> URL:
    """Switch a plain ``sqlite://`` or ``postgresql://`` URL to its async driver."""
    url = make_url(database_url)
    driver = _ASYNC_DRIVERS.get(url.drivername)
    return url.set(drivername=driver) if driver else url


def _to_entry(row: CatalogModelRow) -> ModelEntry:
    created_at = row.created_at
    # SQLite drops the timezone on the way back out
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return ModelEntry(
        id=row.id,
        model_id=row.model_id,
        natural_key=row.natural_key,
        display_name=row.display_name,
        model_kind=ModelKind(row.model_kind),
        provider_kind=row.provider_kind,
        is_local=row.is_local,
        stream_capable=row.stream_capable,
        connection_config=ConnectionConfig.from_storage(row.config),
        hidden=row.hidden,
        deleted=row.deleted,
        created_at=created_at,
    )


class SQLCatalogStore(CatalogStore):
    """Catalog store on any SQLAlchemy-supported database with an async driver."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize store. The table is created on first use.

        Args:
            database_url: SQLAlchemy URL, e.g. ``sqlite+aiosqlite:///catalog.db``.
                Plain ``sqlite://`` and ``postgresql://`` URLs get the
                matching async driver.
            echo: Log emitted SQL.
        """
        url = to_async_url(database_url)
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            # One shared connection, or each session would see its own empty database
            engine_kwargs["poolclass"] = StaticPool

        self._engine = create_async_engine(url, **engine_kwargs)
        self._session_maker = async_sessionmaker(self._engine, expire_on_commit=False)
        self._schema_lock = asyncio.Lock()
        self._schema_ready = False
        logger.debug(f"Catalog store configured for {url.render_as_string()}")

    async def _ensure_schema(self) -> None:
        async with self._schema_lock:
            if self._schema_ready:
                return
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._schema_ready = True

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Session scope that commits on success and translates store failures."""
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                try:
                    yield session
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        except IntegrityError as e:
            raise AlreadyExistsError("Model already exist") from e
        except SQLAlchemyError as e:
            logger.error(f"Catalog store failure: {e}")
            raise UnavailableError("Catalog store is unavailable") from e

    async def create(self, entry: ModelEntry) -> ModelEntry:
        row = CatalogModelRow(
            id=entry.id or uuid.uuid4().hex,
            model_id=entry.model_id,
            natural_key=entry.natural_key,
            display_name=entry.display_name,
            model_kind=entry.model_kind.value,
            provider_kind=entry.provider_kind,
            is_local=entry.is_local,
            stream_capable=entry.stream_capable,
            config=entry.connection_config.to_storage(),
            hidden=entry.hidden,
            deleted=entry.deleted,
            created_at=entry.created_at or datetime.now(timezone.utc),
        )
        async with self._session() as session:
            session.add(row)
            await session.flush()
            return _to_entry(row)

    async def find_by_natural_key_and_kind(
        self,
        natural_key: str,
        kind: ModelKind,
        visible_only: bool = True,
    ) -> ModelEntry | None:
        stmt = select(CatalogModelRow).where(
            CatalogModelRow.natural_key == natural_key,
            CatalogModelRow.model_kind == kind.value,
            CatalogModelRow.deleted.is_(False),
        )
        if visible_only:
            stmt = stmt.where(CatalogModelRow.hidden.is_(False))
        async with self._session() as session:
            result = await session.scalars(stmt.order_by(CatalogModelRow.created_at).limit(1))
            row = result.first()
            return _to_entry(row) if row else None

    async def find_by_id(self, entry_id: str) -> ModelEntry | None:
        async with self._session() as session:
            row = await session.get(CatalogModelRow, entry_id)
            return _to_entry(row) if row else None

    async def update_hidden(self, entry_id: str, hidden: bool) -> ModelEntry:
        async with self._session() as session:
            row = await session.get(CatalogModelRow, entry_id)
            if row is None:
                raise NotFoundError("Model not found")
            row.hidden = hidden
            await session.flush()
            return _to_entry(row)

    async def hard_delete(self, entry_id: str) -> None:
        async with self._session() as session:
            row = await session.get(CatalogModelRow, entry_id)
            if row is None:
                raise NotFoundError("Model not found")
            await session.delete(row)

    async def list_filtered(
        self,
        provider_kinds: Iterable[str] | None = None,
        exclude_deleted: bool = True,
    ) -> list[ModelEntry]:
        stmt = select(CatalogModelRow)
        if provider_kinds is not None:
            stmt = stmt.where(CatalogModelRow.provider_kind.in_(list(provider_kinds)))
        if exclude_deleted:
            stmt = stmt.where(CatalogModelRow.deleted.is_(False))
        stmt = stmt.order_by(CatalogModelRow.created_at, CatalogModelRow.id)
        async with self._session() as session:
            result = await session.scalars(stmt)
            return [_to_entry(row) for row in result]

    async def close(self) -> None:
        await self._engine.dispose()
