"""Contact inquiry routes: public submission, tenant-scoped listing."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, EmailStr

from wehoware.exceptions import Forbidden, ValidationFailed
from wehoware.storage.repositories.inquiries import InquiryRepository
from wehoware.web.auth.gate import with_auth
from wehoware.web.dependencies import client_ip, get_inquiry_repo, pagination
from wehoware.web.tenant_context import AuthContext

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/inquiries", tags=["inquiries"])


class CreateInquiryRequest(BaseModel):
    name: str
    email: EmailStr
    subject: str
    message: str
    client_id: str
    phone: str | None = None


@router.post("", status_code=201)
async def create_inquiry(
    body: CreateInquiryRequest,
    request: Request,
    repo: InquiryRepository = Depends(get_inquiry_repo),
) -> dict[str, Any]:
    """Public contact-form endpoint; no session required."""
    if not all(v.strip() for v in (body.name, body.subject, body.message, body.client_id)):
        raise ValidationFailed(
            "Missing required fields: name, email, subject, message, or client_id"
        )

    inquiry = await repo.create_public(
        client_id=body.client_id,
        name=body.name.strip(),
        email=str(body.email),
        subject=body.subject.strip(),
        message=body.message,
        phone=body.phone,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") or "unknown",
    )
    if inquiry is None:
        raise ValidationFailed("Invalid client_id provided.")
    return inquiry


@router.get("")
async def list_inquiries(
    auth: AuthContext = Depends(with_auth()),
    repo: InquiryRepository = Depends(get_inquiry_repo),
    filter_client_id: str | None = Query(default=None, alias="client_id"),
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> dict[str, Any]:
    client_id = auth.require_client_id()
    if filter_client_id and str(filter_client_id) != str(client_id):
        raise Forbidden("Inquiries can only be filtered by the resolved client")

    inquiries, total = await repo.list_page(client_id, page=page, limit=limit, status=status)
    return {"inquiries": inquiries, "pagination": pagination(page, limit, total)}
