"""Identities and token helpers shared by the test suite."""

from __future__ import annotations

import time

import jwt

from wehoware.config.settings import get_settings

ADMIN_ID = "00000000-0000-0000-0000-0000000000a1"
EMPLOYEE_ID = "00000000-0000-0000-0000-0000000000e1"
CLIENT_USER_ID = "00000000-0000-0000-0000-0000000000c1"
ORPHAN_ID = "00000000-0000-0000-0000-0000000000f0"  # valid session, no profile


def make_token(user_id: str, email: str = "", *, expires_in: int = 3600, **claims: object) -> str:
    """Sign an access token the way the hosted auth provider does."""
    payload: dict[str, object] = {
        "sub": user_id,
        "email": email or f"user-{user_id[-2:]}@example.com",
        "aud": get_settings().jwt_audience,
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, get_settings().jwt_secret, algorithm="HS256")


def bearer(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
