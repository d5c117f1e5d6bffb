"""Exception hierarchy for the Wehoware API.

``AuthError`` subclasses carry the HTTP status and the public message that is
rendered as ``{"error": message}``. Anything else that escapes a handler is an
internal error and its detail never reaches the caller.
"""

from __future__ import annotations


class WehowareError(Exception):
    """Base exception for all Wehoware errors."""


class AuthError(WehowareError):
    """A request failure with a status code and a caller-safe message."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AuthError):
    """No session, an invalid session, or a session without a profile."""

    status_code = 401
    default_message = "Unauthorized - Not authenticated"


class Forbidden(AuthError):
    """Authenticated, but the role or tenant is not permitted."""

    status_code = 403
    default_message = "Forbidden"


class MissingContext(AuthError):
    """The handler needs a tenant and none could be resolved."""

    status_code = 400
    default_message = "Active client context required"


class GateInternalError(AuthError):
    """Unexpected failure while authorizing a request."""

    status_code = 500
    default_message = "Internal server error in auth middleware"


class NotFoundError(AuthError):
    status_code = 404
    default_message = "Not found"


class ValidationFailed(AuthError):
    status_code = 400
    default_message = "Invalid request"
