"""Identity store: profiles, client grants, switch history, effective tenant."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from wehoware.audit.switch_ledger import SwitchLedger
from wehoware.models.database import Client, Profile, UserClient
from wehoware.storage.database import set_effective_tenant

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


class IdentityStore(Protocol):
    """Collaborators the auth gate reads from (and appends to)."""

    async def get_profile(self, user_id: str) -> Profile | None: ...

    async def get_grant(self, user_id: str, client_id: str) -> UserClient | None: ...

    async def append_switch_event(
        self, user_id: str, client_id: str, ip_address: str, user_agent: str
    ) -> None: ...

    async def set_effective_tenant(self, client_id: str) -> None: ...


class DatabaseIdentityStore:
    """SQLModel-backed identity store.

    Profiles and grants are read-only from the request path; the only write
    is the switch-history append.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._ledger = SwitchLedger(engine)

    async def get_profile(self, user_id: str) -> Profile | None:
        async with AsyncSession(self._engine) as session:
            return await session.get(Profile, user_id)

    async def get_grant(self, user_id: str, client_id: str) -> UserClient | None:
        async with AsyncSession(self._engine) as session:
            stmt = select(UserClient).where(
                col(UserClient.user_id) == user_id,
                col(UserClient.client_id) == client_id,
            )
            result = await session.execute(stmt)
            return result.scalars().first()

    async def append_switch_event(
        self, user_id: str, client_id: str, ip_address: str, user_agent: str
    ) -> None:
        await self._ledger.append(
            user_id=user_id,
            client_id=client_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def set_effective_tenant(self, client_id: str) -> None:
        set_effective_tenant(client_id)

    async def get_client(self, client_id: str) -> Client | None:
        async with AsyncSession(self._engine) as session:
            return await session.get(Client, client_id)

    async def list_granted_clients(self, user_id: str) -> list[Client]:
        """Clients a staff user may switch into, by company name."""
        async with AsyncSession(self._engine) as session:
            stmt = (
                select(Client)
                .join(UserClient, col(UserClient.client_id) == col(Client.id))
                .where(col(UserClient.user_id) == user_id)
                .order_by(col(Client.company_name))
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def grant(self, user_id: str, client_id: str) -> UserClient:
        """Allow ``user_id`` to act as ``client_id`` (idempotent)."""
        existing = await self.get_grant(user_id, client_id)
        if existing:
            return existing
        async with AsyncSession(self._engine) as session:
            grant = UserClient(user_id=user_id, client_id=client_id)
            session.add(grant)
            await session.commit()
            await session.refresh(grant)
        logger.info("client_grant_created", user_id=user_id, client_id=client_id)
        return grant
