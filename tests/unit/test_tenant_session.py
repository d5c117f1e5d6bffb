"""Unit tests for the transaction-local tenant setting on database sessions."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from wehoware.storage.database import scope_to_tenant, set_effective_tenant, tenant_session


@pytest.fixture()
async def recording_engine() -> AsyncIterator[tuple[AsyncEngine, list[tuple[str, str]]]]:
    """SQLite engine with a ``set_config`` function that records each call."""
    calls: list[tuple[str, str]] = []
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    def set_config(name: str, value: str, is_local: int) -> str:
        calls.append((name, value))
        return value

    @event.listens_for(engine.sync_engine, "connect")
    def _register(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.create_function("set_config", 3, set_config)

    yield engine, calls
    await engine.dispose()


@pytest.mark.unit
class TestScopeToTenant:
    async def test_setting_issued_for_every_transaction(self, recording_engine) -> None:
        engine, calls = recording_engine
        async with AsyncSession(engine) as session:
            scope_to_tenant(session, "C2")
            await session.execute(text("SELECT 1"))
            await session.commit()
            # a refresh after commit runs in a new transaction
            await session.execute(text("SELECT 1"))
            await session.commit()
        assert calls == [("app.client_id", "C2"), ("app.client_id", "C2")]

    async def test_unscoped_session_issues_nothing(self, recording_engine) -> None:
        engine, calls = recording_engine
        async with AsyncSession(engine) as session:
            await session.execute(text("SELECT 1"))
        assert calls == []

    async def test_tenant_session_skips_non_postgres(self, recording_engine) -> None:
        engine, calls = recording_engine
        set_effective_tenant("C2")
        try:
            async with tenant_session(engine) as session:
                await session.execute(text("SELECT 1"))
        finally:
            set_effective_tenant(None)
        assert calls == []
