"""Tenant-switch ledger: insert-only history of client context switches.

Uses its own DB session so a row survives whatever the request does next.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlmodel.ext.asyncio.session import AsyncSession

from wehoware.models.database import ClientSwitchEvent

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)

_MAX_USER_AGENT_CHARS = 512


def _clean(value: str | None) -> str:
    value = (value or "").strip()
    return value[:_MAX_USER_AGENT_CHARS] if value else "unknown"


class SwitchLedger:
    """Append-only writer for ``wehoware_client_switch_history``.

    Rows are never updated or read back by the request path, so concurrent
    writers need no coordination.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def append(
        self,
        *,
        user_id: str,
        client_id: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Insert one switch event. Errors propagate; the caller decides."""
        event = ClientSwitchEvent(
            user_id=user_id,
            client_id=client_id,
            ip_address=_clean(ip_address),
            user_agent=_clean(user_agent),
        )
        async with AsyncSession(self._engine) as session:
            session.add(event)
            await session.commit()
        logger.info("tenant_switch_recorded", user_id=user_id, client_id=client_id)
