"""Client (tenant) listing routes and the current-user endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Depends
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from wehoware.models.database import Client
from wehoware.storage.repositories.identity import DatabaseIdentityStore
from wehoware.types import Role
from wehoware.web.auth.gate import with_auth
from wehoware.web.dependencies import get_identity_store
from wehoware.web.tenant_context import AuthContext

router = APIRouter(prefix="/api/v1/clients", tags=["clients"])


def _client_dict(client: Client) -> dict[str, Any]:
    return {
        "id": client.id,
        "company_name": client.company_name,
        "website_url": client.website_url,
        "active": client.active,
    }


@router.get("")
async def list_clients(
    auth: AuthContext = Depends(with_auth()),
    store: DatabaseIdentityStore = Depends(get_identity_store),
) -> dict[str, Any]:
    """Clients the caller may act as: its own for clients, granted ones for staff."""
    if auth.role is Role.CLIENT:
        own = await store.get_client(auth.home_client_id) if auth.home_client_id else None
        return {"clients": [_client_dict(own)] if own else []}

    clients = await store.list_granted_clients(auth.user_id)
    return {"clients": [_client_dict(c) for c in clients]}


async def current_user(
    request: Request, auth: AuthContext, path_params: Mapping[str, Any]
) -> Response:
    """Return the authorized caller; needs no tenant."""
    return JSONResponse({"user": auth.to_user_dict()})
