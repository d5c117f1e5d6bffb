"""Service catalogue API routes."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from wehoware.exceptions import NotFoundError, ValidationFailed
from wehoware.storage.repositories.services import ServiceRepository
from wehoware.types import Role
from wehoware.web.auth.gate import with_auth
from wehoware.web.dependencies import get_service_repo, pagination
from wehoware.web.tenant_context import AuthContext

router = APIRouter(prefix="/api/v1/services", tags=["services"])

_NOT_FOUND = "Service not found"
_NOT_FOUND_OR_FORBIDDEN = "Service not found or unauthorized"


class CreateServiceRequest(BaseModel):
    title: str = ""
    price: Decimal | None = Field(default=None, ge=0)
    description: str = ""
    category_id: int | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    duration: str | None = None
    active: bool = True
    featured: bool = False
    image_url: str | None = None


class UpdateServiceRequest(BaseModel):
    title: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    description: str | None = None
    category_id: int | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    duration: str | None = None
    active: bool | None = None
    featured: bool | None = None
    image_url: str | None = None


async def _list_for_client(
    repo: ServiceRepository,
    client_id: str,
    page: int,
    limit: int,
    featured: bool,
    active: bool,
) -> dict[str, Any]:
    services, total = await repo.list_page(
        client_id, page=page, limit=limit, featured=featured, active=active
    )
    return {"data": services, "pagination": pagination(page, limit, total)}


@router.get("")
async def list_services(
    auth: AuthContext = Depends(with_auth()),
    repo: ServiceRepository = Depends(get_service_repo),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    featured: bool = False,
    active: bool = False,
) -> dict[str, Any]:
    return await _list_for_client(
        repo, auth.require_client_id(), page, limit, featured, active
    )


@router.get("/client/{client_id}")
async def list_client_services(
    client_id: str,
    auth: AuthContext = Depends(with_auth()),
    repo: ServiceRepository = Depends(get_service_repo),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    featured: bool = False,
    active: bool = False,
) -> dict[str, Any]:
    auth.ensure_client_access(client_id)
    result = await _list_for_client(repo, client_id, page, limit, featured, active)
    result["client_id"] = client_id
    return result


@router.post("", status_code=201)
async def create_service(
    body: CreateServiceRequest,
    auth: AuthContext = Depends(with_auth(Role.EMPLOYEE, Role.ADMIN)),
    repo: ServiceRepository = Depends(get_service_repo),
) -> dict[str, Any]:
    client_id = auth.require_client_id()
    if not body.title.strip() or body.price is None:
        raise ValidationFailed("Missing required fields: title, price")

    service = await repo.create(
        client_id,
        title=body.title.strip(),
        price=body.price,
        description=body.description,
        category_id=body.category_id,
        currency=body.currency.upper(),
        duration=body.duration,
        active=body.active,
        featured=body.featured,
        image_url=body.image_url,
    )
    return {"service": service}


@router.get("/{service_id}")
async def get_service(
    service_id: int,
    auth: AuthContext = Depends(with_auth()),
    repo: ServiceRepository = Depends(get_service_repo),
) -> dict[str, Any]:
    service = await repo.get(service_id, auth.require_client_id())
    if not service:
        raise NotFoundError(_NOT_FOUND)
    return {"service": service}


@router.put("/{service_id}")
async def update_service(
    service_id: int,
    body: UpdateServiceRequest,
    auth: AuthContext = Depends(with_auth()),
    repo: ServiceRepository = Depends(get_service_repo),
) -> dict[str, Any]:
    if body.title is not None and not body.title.strip():
        raise ValidationFailed("Title cannot be empty")

    service = await repo.update(
        service_id,
        auth.require_client_id(),
        title=body.title.strip() if body.title else None,
        price=body.price,
        description=body.description,
        category_id=body.category_id,
        currency=body.currency.upper() if body.currency else None,
        duration=body.duration,
        active=body.active,
        featured=body.featured,
        image_url=body.image_url,
    )
    if not service:
        raise NotFoundError(_NOT_FOUND_OR_FORBIDDEN)
    return {"service": service}


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    auth: AuthContext = Depends(with_auth()),
    repo: ServiceRepository = Depends(get_service_repo),
) -> dict[str, Any]:
    if not await repo.delete(service_id, auth.require_client_id()):
        raise NotFoundError(_NOT_FOUND_OR_FORBIDDEN)
    return {"success": True}
