"""Database-backed blog repository. Every query is filtered by ``client_id``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, or_
from sqlmodel import col, select

from wehoware.models.database import Blog, _utc_now
from wehoware.storage.database import tenant_session
from wehoware.types import BlogStatus
from wehoware.utils.sanitize import like_pattern, slugify

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)

_SORTABLE = {"created_at", "updated_at", "title", "status"}
_UPDATABLE = {"title", "content", "category_id", "status", "featured_image"}


class BlogRepository:
    """Tenant-scoped blog store returning plain dicts for JSON responses."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    def _to_dict(self, blog: Blog) -> dict[str, Any]:
        return {
            "id": blog.id,
            "client_id": blog.client_id,
            "title": blog.title,
            "slug": blog.slug,
            "content": blog.content,
            "category_id": blog.category_id,
            "status": blog.status,
            "featured_image": blog.featured_image,
            "author_id": blog.author_id,
            "created_at": blog.created_at.isoformat(),
            "updated_at": blog.updated_at.isoformat(),
        }

    async def list_page(
        self,
        client_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        ascending: bool = False,
    ) -> tuple[list[dict[str, Any]], int]:
        """Return one page of a tenant's blogs and the total matching count."""
        filters = [col(Blog.client_id) == client_id]
        if status:
            filters.append(col(Blog.status) == status)
        if search:
            pattern = like_pattern(search)
            filters.append(
                or_(
                    col(Blog.title).ilike(pattern, escape="\\"),
                    col(Blog.content).ilike(pattern, escape="\\"),
                )
            )

        order_col = getattr(Blog, sort_by if sort_by in _SORTABLE else "created_at")
        order = col(order_col).asc() if ascending else col(order_col).desc()

        async with tenant_session(self._engine) as session:
            total = (
                await session.execute(select(func.count()).select_from(Blog).where(*filters))
            ).scalar_one()
            stmt = (
                select(Blog).where(*filters).order_by(order).offset((page - 1) * limit).limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [self._to_dict(b) for b in rows], total

    async def create(
        self,
        client_id: str,
        *,
        title: str,
        content: str,
        author_id: str | None = None,
        category_id: int | None = None,
        status: str | None = None,
        featured_image: str | None = None,
    ) -> dict[str, Any]:
        async with tenant_session(self._engine) as session:
            blog = Blog(
                client_id=client_id,
                title=title,
                slug=slugify(title, fallback="post"),
                content=content,
                author_id=author_id,
                category_id=category_id,
                status=status or BlogStatus.DRAFT.value,
                featured_image=featured_image,
            )
            session.add(blog)
            await session.commit()
            await session.refresh(blog)
            result = self._to_dict(blog)
        logger.info("blog_created", id=result["id"], client_id=client_id)
        return result

    async def _get_row(self, session: Any, blog_id: int, client_id: str) -> Blog | None:
        stmt = select(Blog).where(col(Blog.id) == blog_id, col(Blog.client_id) == client_id)
        return (await session.execute(stmt)).scalars().first()

    async def get(self, blog_id: int, client_id: str) -> dict[str, Any] | None:
        async with tenant_session(self._engine) as session:
            blog = await self._get_row(session, blog_id, client_id)
            return self._to_dict(blog) if blog else None

    async def update(self, blog_id: int, client_id: str, **updates: Any) -> dict[str, Any] | None:
        async with tenant_session(self._engine) as session:
            blog = await self._get_row(session, blog_id, client_id)
            if not blog:
                return None
            for key, value in updates.items():
                if key in _UPDATABLE and value is not None:
                    setattr(blog, key, value)
            if updates.get("title"):
                blog.slug = slugify(updates["title"], fallback="post")
            blog.updated_at = _utc_now()
            session.add(blog)
            await session.commit()
            await session.refresh(blog)
            return self._to_dict(blog)

    async def delete(self, blog_id: int, client_id: str) -> bool:
        async with tenant_session(self._engine) as session:
            blog = await self._get_row(session, blog_id, client_id)
            if not blog:
                return False
            await session.delete(blog)
            await session.commit()
        logger.info("blog_deleted", id=blog_id, client_id=client_id)
        return True
