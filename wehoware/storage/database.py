"""Async database engine, session factory and tenant-scoped sessions."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from functools import lru_cache
from typing import Any

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from wehoware.config.settings import get_settings

# Tenant the current request acts as; read by RLS-aware sessions
_effective_client_id: ContextVar[str | None] = ContextVar("effective_client_id", default=None)

_SET_TENANT = text("SELECT set_config('app.client_id', :client_id, true)")


@lru_cache
def get_engine() -> AsyncEngine:
    """Return a cached async database engine (singleton per process)."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def set_effective_tenant(client_id: str | None) -> None:
    """Record the tenant for the rest of this request (None clears it)."""
    _effective_client_id.set(client_id)
    if client_id is None:
        structlog.contextvars.unbind_contextvars("client_id")
    else:
        structlog.contextvars.bind_contextvars(client_id=client_id)


def get_effective_tenant() -> str | None:
    return _effective_client_id.get()


def scope_to_tenant(session: AsyncSession, client_id: str) -> None:
    """Issue ``app.client_id`` at the start of every transaction on ``session``.

    The setting is transaction-local, so a commit drops it; the listener puts it
    back before the next statement (including a post-commit refresh).
    """

    @event.listens_for(session.sync_session, "after_begin")
    def _apply_tenant(_session: Any, _transaction: Any, connection: Any) -> None:
        connection.execute(_SET_TENANT, {"client_id": client_id})


@asynccontextmanager
async def tenant_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a session that carries the effective tenant to PostgreSQL.

    On PostgreSQL the tenant is exposed to row-level security policies as the
    transaction-local setting ``app.client_id``. Other dialects get a plain
    session; callers still filter every query by ``client_id`` explicitly.
    """
    async with AsyncSession(engine) as session:
        client_id = get_effective_tenant()
        if client_id and engine.dialect.name == "postgresql":
            scope_to_tenant(session, client_id)
        yield session


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables (for dev/testing only; use migrations in production)."""
    import wehoware.models.database  # noqa: F401  registers tables on the metadata

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
