"""Database-backed contact inquiry repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from wehoware.models.database import Client, Inquiry
from wehoware.storage.database import tenant_session
from wehoware.types import InquiryStatus

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


class InquiryRepository:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    def _to_dict(self, inquiry: Inquiry) -> dict[str, Any]:
        return {
            "id": inquiry.id,
            "client_id": inquiry.client_id,
            "name": inquiry.name,
            "email": inquiry.email,
            "phone": inquiry.phone,
            "subject": inquiry.subject,
            "message": inquiry.message,
            "status": inquiry.status,
            "created_at": inquiry.created_at.isoformat(),
        }

    async def create_public(
        self,
        *,
        client_id: str,
        name: str,
        email: str,
        subject: str,
        message: str,
        phone: str | None = None,
        ip_address: str = "unknown",
        user_agent: str = "unknown",
    ) -> dict[str, Any] | None:
        """Store a contact-form submission; None when the client does not exist.

        Runs without a tenant context since the submitter is anonymous.
        """
        async with AsyncSession(self._engine) as session:
            if await session.get(Client, client_id) is None:
                return None
            inquiry = Inquiry(
                client_id=client_id,
                name=name,
                email=email,
                phone=phone,
                subject=subject,
                message=message,
                status=InquiryStatus.NEW.value,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            session.add(inquiry)
            await session.commit()
            await session.refresh(inquiry)
            result = self._to_dict(inquiry)
        logger.info("inquiry_created", id=result["id"], client_id=client_id)
        return result

    async def list_page(
        self,
        client_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        filters = [col(Inquiry.client_id) == client_id]
        if status:
            filters.append(col(Inquiry.status) == status)

        async with tenant_session(self._engine) as session:
            total = (
                await session.execute(select(func.count()).select_from(Inquiry).where(*filters))
            ).scalar_one()
            stmt = (
                select(Inquiry)
                .where(*filters)
                .order_by(col(Inquiry.created_at).desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [self._to_dict(i) for i in rows], total
