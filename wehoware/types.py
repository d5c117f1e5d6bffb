"""Enums and type aliases for Wehoware."""

from enum import StrEnum


class Role(StrEnum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    CLIENT = "client"

    @property
    def can_switch_tenant(self) -> bool:
        """Staff roles act on behalf of granted clients; clients never switch."""
        return self in (Role.ADMIN, Role.EMPLOYEE)


class BlogStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class InquiryStatus(StrEnum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"
