"""Request authorization gate: session, profile, role and tenant resolution.

Every protected route runs through :class:`AuthGate` before its handler. The
gate either produces an :class:`AuthContext` or fails with one of the
``AuthError`` subclasses; it never lets a handler see a partially authorized
request.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Collection, Mapping
from typing import TYPE_CHECKING, Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse

from wehoware.exceptions import AuthError, Forbidden, GateInternalError, Unauthenticated
from wehoware.storage.database import set_effective_tenant
from wehoware.types import Role
from wehoware.web.auth.session import SessionIdentity, get_session
from wehoware.web.dependencies import client_ip
from wehoware.web.tenant_context import AuthContext

if TYPE_CHECKING:
    from starlette.responses import Response

    from wehoware.storage.repositories.identity import IdentityStore

logger = structlog.get_logger(__name__)

SessionResolver = Callable[[Request], Awaitable[SessionIdentity | None]]
WrappedHandler = Callable[[Request, AuthContext, Mapping[str, Any]], Awaitable["Response"]]


def error_response(exc: AuthError) -> JSONResponse:
    """Render an AuthError as the public ``{"error": ...}`` body."""
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def try_notify(event: str, action: Awaitable[Any], **fields: Any) -> bool:
    """Await a best-effort side effect; log and swallow any failure."""
    try:
        await action
    except Exception as exc:
        logger.warning(event, error=str(exc), **fields)
        return False
    return True


class AuthGate:
    """Authenticates the caller and resolves the tenant it acts as."""

    def __init__(
        self,
        store: IdentityStore,
        *,
        tenant_param: str = "clientId",
        session_resolver: SessionResolver = get_session,
    ) -> None:
        self._store = store
        self._tenant_param = tenant_param
        self._resolve_session = session_resolver

    async def authorize(
        self, request: Request, allowed_roles: Collection[Role] = ()
    ) -> AuthContext:
        """Run the gate for one request.

        Raises Unauthenticated (401), Forbidden (403) or GateInternalError (500).
        """
        try:
            return await self._authorize(request, allowed_roles)
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("auth_gate_error", path=request.url.path)
            raise GateInternalError() from exc

    async def _authorize(self, request: Request, allowed_roles: Collection[Role]) -> AuthContext:
        set_effective_tenant(None)

        session = await self._resolve_session(request)
        if session is None:
            logger.info("auth_session_missing", path=request.url.path)
            raise Unauthenticated()

        profile = await self._store.get_profile(session.user_id)
        if profile is None:
            logger.warning("auth_profile_missing", user_id=session.user_id)
            raise Unauthenticated("Unauthorized - User profile not found")

        role = Role(profile.role)
        if allowed_roles and role not in allowed_roles:
            logger.warning("auth_role_forbidden", user_id=session.user_id, role=role.value)
            required = ", ".join(Role(r).value for r in allowed_roles)
            raise Forbidden(f"Unauthorized - Requires one of these roles: {required}")

        auth = AuthContext(
            user_id=session.user_id,
            email=session.email,
            role=role,
            home_client_id=profile.client_id,
        )
        structlog.contextvars.bind_contextvars(user_id=auth.user_id, role=role.value)

        if role.can_switch_tenant:
            requested = request.query_params.get(self._tenant_param)
            if requested:
                auth = await self._switch_tenant(request, auth, requested)

        effective = auth.effective_client_id
        if effective:
            await try_notify(
                "effective_tenant_failed",
                self._store.set_effective_tenant(effective),
                client_id=effective,
            )
        return auth

    async def _switch_tenant(
        self, request: Request, auth: AuthContext, client_id: str
    ) -> AuthContext:
        """Activate ``client_id`` if the caller holds a grant for it."""
        try:
            grant = await self._store.get_grant(auth.user_id, client_id)
        except Exception as exc:
            logger.warning(
                "client_grant_lookup_failed",
                user_id=auth.user_id,
                client_id=client_id,
                error=str(exc),
            )
            grant = None

        if grant is None:
            logger.info("tenant_switch_ignored", user_id=auth.user_id, client_id=client_id)
            return auth

        await try_notify(
            "tenant_switch_audit_failed",
            self._store.append_switch_event(
                auth.user_id,
                client_id,
                client_ip(request),
                request.headers.get("user-agent") or "unknown",
            ),
            user_id=auth.user_id,
            client_id=client_id,
        )
        return auth.with_active_client(client_id)

    def wrap(
        self, handler: WrappedHandler, *, allowed_roles: Collection[Role] = ()
    ) -> Callable[[Request], Awaitable[Response]]:
        """Return a Starlette endpoint that authorizes before calling ``handler``.

        The handler receives ``(request, auth, path_params)`` and its response is
        returned unchanged. Any exception becomes a JSON error response.
        """

        @functools.wraps(handler)
        async def endpoint(request: Request) -> Response:
            try:
                auth = await self.authorize(request, allowed_roles)
                return await handler(request, auth, dict(request.path_params))
            except AuthError as exc:
                return error_response(exc)
            except Exception:
                logger.exception("auth_wrapped_handler_error", path=request.url.path)
                return error_response(GateInternalError())

        return endpoint


def get_gate(request: Request) -> AuthGate:
    gate: AuthGate = request.app.state.auth_gate
    return gate


def with_auth(*allowed_roles: Role) -> Callable[[Request], Awaitable[AuthContext]]:
    """FastAPI dependency that gates a route on the given roles (any role if none).

    Usage::

        @router.get("/blogs")
        async def list_blogs(auth: AuthContext = Depends(with_auth())): ...
    """

    async def _dependency(request: Request) -> AuthContext:
        return await get_gate(request).authorize(request, allowed_roles)

    return _dependency
