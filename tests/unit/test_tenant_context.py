import pytest

from wehoware.exceptions import Forbidden, MissingContext
from wehoware.types import Role
from wehoware.web.tenant_context import AuthContext


def _client(home: str | None = "C1") -> AuthContext:
    return AuthContext(
        user_id="u-client", email="c@example.com", role=Role.CLIENT, home_client_id=home
    )


def _staff(role: Role = Role.EMPLOYEE, active: str | None = None) -> AuthContext:
    return AuthContext(
        user_id="u-staff", email="s@example.com", role=role, active_client_id=active
    )


@pytest.mark.unit
class TestResolveClient:
    def test_client_resolves_home_tenant(self) -> None:
        assert _client().require_client_id() == "C1"

    def test_client_without_home_tenant_needs_context(self) -> None:
        with pytest.raises(MissingContext) as exc_info:
            _client(home=None).require_client_id()
        assert exc_info.value.status_code == 400
        assert "context required" in exc_info.value.message

    def test_staff_with_active_tenant(self) -> None:
        assert _staff(Role.ADMIN, active="C2").require_client_id() == "C2"

    def test_staff_without_active_tenant_needs_context(self) -> None:
        with pytest.raises(MissingContext):
            _staff(Role.ADMIN).require_client_id()

    def test_staff_home_tenant_is_not_used(self) -> None:
        auth = AuthContext(
            user_id="u-staff", email="s@example.com", role=Role.EMPLOYEE, home_client_id="C1"
        )
        assert auth.effective_client_id is None

    def test_with_active_client_returns_new_context(self) -> None:
        base = _staff()
        switched = base.with_active_client("C2")
        assert base.active_client_id is None
        assert switched.active_client_id == "C2"


@pytest.mark.unit
class TestEnsureClientAccess:
    def test_client_own_tenant(self) -> None:
        assert _client().ensure_client_access("C1") == "C1"

    def test_client_foreign_tenant_forbidden(self) -> None:
        with pytest.raises(Forbidden) as exc_info:
            _client().ensure_client_access("C2")
        assert exc_info.value.status_code == 403

    def test_staff_active_tenant(self) -> None:
        assert _staff(active="C2").ensure_client_access("C2") == "C2"

    def test_staff_other_tenant_forbidden(self) -> None:
        with pytest.raises(Forbidden):
            _staff(active="C2").ensure_client_access("C9")

    def test_staff_without_active_tenant(self) -> None:
        with pytest.raises(MissingContext):
            _staff().ensure_client_access("C2")


@pytest.mark.unit
class TestUserDict:
    def test_client_shape(self) -> None:
        assert _client().to_user_dict() == {
            "id": "u-client",
            "email": "c@example.com",
            "role": "client",
            "clientId": "C1",
        }

    def test_active_client_included_when_set(self) -> None:
        user = _staff(Role.ADMIN, active="C2").to_user_dict()
        assert user["activeClientId"] == "C2"
        assert user["role"] == "admin"

    def test_context_is_immutable(self) -> None:
        auth = _client()
        with pytest.raises(AttributeError):
            auth.active_client_id = "C2"  # type: ignore[misc]
