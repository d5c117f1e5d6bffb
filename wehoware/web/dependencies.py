"""FastAPI dependency injection and shared request helpers."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from wehoware.storage.repositories.blogs import BlogRepository
from wehoware.storage.repositories.identity import DatabaseIdentityStore
from wehoware.storage.repositories.inquiries import InquiryRepository
from wehoware.storage.repositories.services import ServiceRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from starlette.datastructures import State


def init_state(state: State, engine: AsyncEngine) -> None:
    """Attach the repositories for one app instance."""
    state.engine = engine
    state.identity_store = DatabaseIdentityStore(engine)
    state.blog_repo = BlogRepository(engine)
    state.service_repo = ServiceRepository(engine)
    state.inquiry_repo = InquiryRepository(engine)


def get_identity_store(request: Request) -> DatabaseIdentityStore:
    store: DatabaseIdentityStore = request.app.state.identity_store
    return store


def get_blog_repo(request: Request) -> BlogRepository:
    repo: BlogRepository = request.app.state.blog_repo
    return repo


def get_service_repo(request: Request) -> ServiceRepository:
    repo: ServiceRepository = request.app.state.service_repo
    return repo


def get_inquiry_repo(request: Request) -> InquiryRepository:
    repo: InquiryRepository = request.app.state.inquiry_repo
    return repo


def client_ip(request: Request) -> str:
    return request.headers.get("x-forwarded-for") or "unknown"


def pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    return {
        "page": page,
        "limit": limit,
        "totalItems": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }
