"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tests.support import ADMIN_ID, CLIENT_USER_ID, EMPLOYEE_ID
from wehoware.models.database import Client, Profile, UserClient
from wehoware.web.app import create_app


@pytest.fixture()
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def seeded_engine(async_engine: AsyncEngine) -> AsyncEngine:
    """Three clients, one user per role; staff hold grants for C2 only."""
    async with AsyncSession(async_engine) as session:
        session.add_all(
            [
                Client(id="C1", company_name="Acme Dental"),
                Client(id="C2", company_name="Brightside Realty"),
                Client(id="C9", company_name="Cobalt Fitness"),
            ]
        )
        await session.commit()
        session.add_all(
            [
                Profile(id=ADMIN_ID, email="admin@example.com", role="admin"),
                Profile(id=EMPLOYEE_ID, email="staff@example.com", role="employee"),
                Profile(
                    id=CLIENT_USER_ID, email="owner@acme.test", role="client", client_id="C1"
                ),
            ]
        )
        await session.commit()
        session.add_all(
            [
                UserClient(user_id=ADMIN_ID, client_id="C2"),
                UserClient(user_id=EMPLOYEE_ID, client_id="C2"),
            ]
        )
        await session.commit()
    return async_engine


@pytest.fixture()
def app(seeded_engine: AsyncEngine):
    """Create a fresh app bound to the seeded database."""
    return create_app(engine=seeded_engine)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
