"""Session resolution for access tokens issued by the hosted auth provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import jwt
import structlog

from wehoware.config.settings import get_settings

if TYPE_CHECKING:
    from starlette.requests import Request

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SessionIdentity:
    """The authenticated user behind a session token."""

    user_id: str
    email: str


def read_credential(request: Request) -> str | None:
    """Return the raw token from the Authorization header or the session cookie."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
        return token or None
    return request.cookies.get(get_settings().session_cookie_name) or None


def verify_session_token(token: str) -> SessionIdentity:
    """Verify an HS256 access token and return its identity.

    Raises jwt.PyJWTError on invalid/expired tokens.
    """
    settings = get_settings()
    decode_options: dict[str, Any] = {
        "algorithms": ["HS256"],
        "audience": settings.jwt_audience,
        "options": {"require": ["sub", "exp"]},
    }
    if settings.jwt_issuer:
        decode_options["issuer"] = settings.jwt_issuer

    payload: dict[str, Any] = jwt.decode(token, settings.jwt_secret, **decode_options)
    return SessionIdentity(user_id=str(payload["sub"]), email=payload.get("email", ""))


async def get_session(request: Request) -> SessionIdentity | None:
    """Resolve the request's session, or None when absent or invalid."""
    token = read_credential(request)
    if not token:
        return None
    try:
        return verify_session_token(token)
    except jwt.PyJWTError as exc:
        logger.warning("session_token_invalid", error=str(exc))
        return None
