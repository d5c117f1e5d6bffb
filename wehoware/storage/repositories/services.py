"""Database-backed service catalogue repository."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func
from sqlmodel import col, select

from wehoware.models.database import Service, _utc_now
from wehoware.storage.database import tenant_session
from wehoware.utils.sanitize import slugify

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)

_UPDATABLE = {
    "title",
    "description",
    "category_id",
    "price",
    "currency",
    "duration",
    "active",
    "featured",
    "image_url",
}


class ServiceRepository:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    def _to_dict(self, service: Service) -> dict[str, Any]:
        return {
            "id": service.id,
            "client_id": service.client_id,
            "title": service.title,
            "slug": service.slug,
            "description": service.description,
            "category_id": service.category_id,
            "price": str(service.price),
            "currency": service.currency,
            "duration": service.duration,
            "active": service.active,
            "featured": service.featured,
            "image_url": service.image_url,
            "created_at": service.created_at.isoformat(),
        }

    async def list_page(
        self,
        client_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        featured: bool = False,
        active: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        filters = [col(Service.client_id) == client_id]
        if featured:
            filters.append(col(Service.featured).is_(True))
        if active:
            filters.append(col(Service.active).is_(True))

        async with tenant_session(self._engine) as session:
            total = (
                await session.execute(select(func.count()).select_from(Service).where(*filters))
            ).scalar_one()
            stmt = (
                select(Service)
                .where(*filters)
                .order_by(col(Service.created_at).desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [self._to_dict(s) for s in rows], total

    async def create(
        self,
        client_id: str,
        *,
        title: str,
        price: Decimal,
        description: str = "",
        category_id: int | None = None,
        currency: str = "USD",
        duration: str | None = None,
        active: bool = True,
        featured: bool = False,
        image_url: str | None = None,
    ) -> dict[str, Any]:
        async with tenant_session(self._engine) as session:
            service = Service(
                client_id=client_id,
                title=title,
                slug=slugify(title, fallback="service"),
                description=description,
                category_id=category_id,
                price=price,
                currency=currency,
                duration=duration,
                active=active,
                featured=featured,
                image_url=image_url,
            )
            session.add(service)
            await session.commit()
            await session.refresh(service)
            result = self._to_dict(service)
        logger.info("service_created", id=result["id"], client_id=client_id)
        return result

    async def _get_row(self, session: Any, service_id: int, client_id: str) -> Service | None:
        stmt = select(Service).where(
            col(Service.id) == service_id, col(Service.client_id) == client_id
        )
        return (await session.execute(stmt)).scalars().first()

    async def get(self, service_id: int, client_id: str) -> dict[str, Any] | None:
        async with tenant_session(self._engine) as session:
            service = await self._get_row(session, service_id, client_id)
            return self._to_dict(service) if service else None

    async def update(
        self, service_id: int, client_id: str, **updates: Any
    ) -> dict[str, Any] | None:
        """Apply the non-null ``updates``; None when the row is not in this tenant."""
        async with tenant_session(self._engine) as session:
            service = await self._get_row(session, service_id, client_id)
            if not service:
                return None
            for key, value in updates.items():
                if key in _UPDATABLE and value is not None:
                    setattr(service, key, value)
            if updates.get("title"):
                service.slug = slugify(updates["title"], fallback="service")
            service.updated_at = _utc_now()
            session.add(service)
            await session.commit()
            await session.refresh(service)
            return self._to_dict(service)

    async def delete(self, service_id: int, client_id: str) -> bool:
        async with tenant_session(self._engine) as session:
            service = await self._get_row(session, service_id, client_id)
            if not service:
                return False
            await session.delete(service)
            await session.commit()
        logger.info("service_deleted", id=service_id, client_id=client_id)
        return True
