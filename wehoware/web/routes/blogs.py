"""Blog CRUD API routes, scoped to the caller's resolved client."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from wehoware.exceptions import NotFoundError, ValidationFailed
from wehoware.storage.repositories.blogs import BlogRepository
from wehoware.types import BlogStatus
from wehoware.web.auth.gate import with_auth
from wehoware.web.dependencies import get_blog_repo, pagination
from wehoware.web.tenant_context import AuthContext

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/blogs", tags=["blogs"])

_NOT_FOUND = "Blog not found or unauthorized"


class BlogRequest(BaseModel):
    title: str = ""
    content: str = ""
    category_id: int | None = None
    status: BlogStatus | None = None
    featured_image: str | None = None

    def require_fields(self) -> None:
        if not self.title.strip() or not self.content.strip():
            raise ValidationFailed("Title and content are required")


async def _list_for_client(
    repo: BlogRepository,
    client_id: str,
    page: int,
    limit: int,
    status: BlogStatus | None,
    search: str | None,
    sort_by: str,
    sort_order: str,
) -> dict[str, Any]:
    blogs, total = await repo.list_page(
        client_id,
        page=page,
        limit=limit,
        status=status.value if status else None,
        search=search,
        sort_by=sort_by,
        ascending=sort_order == "asc",
    )
    return {"blogs": blogs, "pagination": pagination(page, limit, total)}


@router.get("")
async def list_blogs(
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: BlogStatus | None = None,
    search: str | None = None,
    sort_by: str = Query(default="created_at", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
) -> dict[str, Any]:
    client_id = auth.require_client_id()
    return await _list_for_client(
        repo, client_id, page, limit, status, search, sort_by, sort_order
    )


@router.get("/client/{client_id}")
async def list_client_blogs(
    client_id: str,
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: BlogStatus | None = None,
    search: str | None = None,
    sort_by: str = Query(default="created_at", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
) -> dict[str, Any]:
    auth.ensure_client_access(client_id)
    result = await _list_for_client(
        repo, client_id, page, limit, status, search, sort_by, sort_order
    )
    result["client_id"] = client_id
    return result


@router.post("", status_code=201)
async def create_blog(
    body: BlogRequest,
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
) -> dict[str, Any]:
    body.require_fields()
    client_id = auth.require_client_id()
    blog = await repo.create(
        client_id,
        title=body.title.strip(),
        content=body.content,
        author_id=auth.user_id,
        category_id=body.category_id,
        status=body.status.value if body.status else None,
        featured_image=body.featured_image,
    )
    return {"blog": blog}


@router.get("/{blog_id}")
async def get_blog(
    blog_id: int,
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
) -> dict[str, Any]:
    blog = await repo.get(blog_id, auth.require_client_id())
    if not blog:
        raise NotFoundError(_NOT_FOUND)
    return {"blog": blog}


@router.put("/{blog_id}")
async def update_blog(
    blog_id: int,
    body: BlogRequest,
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
) -> dict[str, Any]:
    body.require_fields()
    blog = await repo.update(
        blog_id,
        auth.require_client_id(),
        title=body.title.strip(),
        content=body.content,
        category_id=body.category_id,
        status=(body.status or BlogStatus.DRAFT).value,
        featured_image=body.featured_image,
    )
    if not blog:
        raise NotFoundError(_NOT_FOUND)
    return {"blog": blog}


@router.delete("/{blog_id}")
async def delete_blog(
    blog_id: int,
    auth: AuthContext = Depends(with_auth()),
    repo: BlogRepository = Depends(get_blog_repo),
) -> Response:
    deleted = await repo.delete(blog_id, auth.require_client_id())
    if not deleted:
        raise NotFoundError(_NOT_FOUND)
    return Response(status_code=204)
