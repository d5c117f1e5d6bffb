import pytest

from wehoware.exceptions import (
    AuthError,
    Forbidden,
    GateInternalError,
    MissingContext,
    NotFoundError,
    Unauthenticated,
    ValidationFailed,
    WehowareError,
)
from wehoware.types import BlogStatus, InquiryStatus, Role


@pytest.mark.unit
class TestEnums:
    def test_role_values(self) -> None:
        assert Role("admin") is Role.ADMIN
        assert Role("employee") is Role.EMPLOYEE
        assert Role("client") is Role.CLIENT

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValueError):
            Role("superuser")

    def test_only_staff_switch_tenant(self) -> None:
        assert Role.ADMIN.can_switch_tenant
        assert Role.EMPLOYEE.can_switch_tenant
        assert not Role.CLIENT.can_switch_tenant

    def test_content_statuses(self) -> None:
        assert BlogStatus.DRAFT == "draft"
        assert InquiryStatus.NEW == "New"


@pytest.mark.unit
class TestExceptions:
    @pytest.mark.parametrize(
        ("exc_type", "status"),
        [
            (Unauthenticated, 401),
            (Forbidden, 403),
            (MissingContext, 400),
            (GateInternalError, 500),
            (NotFoundError, 404),
            (ValidationFailed, 400),
        ],
    )
    def test_status_codes(self, exc_type: type[AuthError], status: int) -> None:
        assert exc_type().status_code == status
        assert issubclass(exc_type, WehowareError)

    def test_custom_message(self) -> None:
        exc = Forbidden("Unauthorized - Requires one of these roles: admin")
        assert exc.message == str(exc) == "Unauthorized - Requires one of these roles: admin"
