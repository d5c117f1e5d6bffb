"""Authorization context for tenant-scoped request handling."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from wehoware.exceptions import Forbidden, MissingContext
from wehoware.types import Role


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Immutable identity and tenant context carried through each request.

    ``home_client_id`` comes from the caller's profile. ``active_client_id`` is
    only ever set by the auth gate after validating a grant, so a client-role
    caller never has one.
    """

    user_id: str
    email: str
    role: Role
    home_client_id: str | None = None
    active_client_id: str | None = None

    def with_active_client(self, client_id: str) -> AuthContext:
        return replace(self, active_client_id=client_id)

    @property
    def effective_client_id(self) -> str | None:
        """The tenant queries must be filtered by, if one can be resolved."""
        if self.active_client_id:
            return self.active_client_id
        if self.role is Role.CLIENT:
            return self.home_client_id
        return None

    def require_client_id(self) -> str:
        """Return the resolved tenant or reject the request with 400."""
        client_id = self.effective_client_id
        if not client_id:
            raise MissingContext()
        return client_id

    def ensure_client_access(self, client_id: str) -> str:
        """Check an explicitly requested tenant against the caller's context."""
        if self.role is Role.CLIENT:
            if str(self.home_client_id) != str(client_id):
                raise Forbidden("Unauthorized: Clients can only access their own data")
            return client_id

        if not self.active_client_id:
            raise MissingContext()
        if str(self.active_client_id) != str(client_id):
            raise Forbidden("Unauthorized: Only the active client context may be accessed")
        return client_id

    def to_user_dict(self) -> dict[str, Any]:
        user: dict[str, Any] = {
            "id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "clientId": self.home_client_id,
        }
        if self.active_client_id:
            user["activeClientId"] = self.active_client_id
        return user
