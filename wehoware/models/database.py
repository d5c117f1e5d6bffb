"""SQLModel database table models.

Table names mirror the hosted schema (``wehoware_*``) so the same rows are
visible to row-level security policies keyed on ``client_id``.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from wehoware.types import BlogStatus, InquiryStatus


def _utc_now() -> datetime:
    """Return current UTC time as naive datetime for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _new_uuid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Identity and tenancy
# ---------------------------------------------------------------------------


class Client(SQLModel, table=True):
    __tablename__ = "wehoware_clients"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    company_name: str
    website_url: str | None = None
    active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=_utc_now)


class Profile(SQLModel, table=True):
    __tablename__ = "wehoware_profiles"

    id: str = Field(primary_key=True)  # same id as the auth provider user
    email: str = Field(default="", index=True)
    first_name: str = ""
    last_name: str = ""
    role: str = Field(default="client")  # admin | employee | client
    client_id: str | None = Field(default=None, foreign_key="wehoware_clients.id")
    created_at: datetime = Field(default_factory=_utc_now)


class UserClient(SQLModel, table=True):
    """Grant allowing a staff user to act as a client."""

    __tablename__ = "wehoware_user_clients"
    __table_args__ = (UniqueConstraint("user_id", "client_id"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="wehoware_profiles.id", index=True)
    client_id: str = Field(foreign_key="wehoware_clients.id", index=True)
    created_at: datetime = Field(default_factory=_utc_now)


class ClientSwitchEvent(SQLModel, table=True):
    __tablename__ = "wehoware_client_switch_history"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    user_id: str = Field(index=True)
    client_id: str = Field(index=True)
    ip_address: str = "unknown"
    user_agent: str = "unknown"
    created_at: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Tenant-owned content
# ---------------------------------------------------------------------------


class Blog(SQLModel, table=True):
    __tablename__ = "wehoware_blogs"

    id: int | None = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="wehoware_clients.id", index=True)
    title: str
    slug: str = Field(index=True)
    content: str
    category_id: int | None = None
    status: str = Field(default=BlogStatus.DRAFT.value)
    featured_image: str | None = None
    author_id: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Service(SQLModel, table=True):
    __tablename__ = "wehoware_services"

    id: int | None = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="wehoware_clients.id", index=True)
    title: str
    slug: str = Field(index=True)
    description: str = ""
    category_id: int | None = None
    price: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    currency: str = "USD"
    duration: str | None = None
    active: bool = Field(default=True)
    featured: bool = Field(default=False)
    image_url: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Inquiry(SQLModel, table=True):
    __tablename__ = "wehoware_inquiries"

    id: int | None = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="wehoware_clients.id", index=True)
    name: str
    email: str
    phone: str | None = None
    subject: str
    message: str
    status: str = Field(default=InquiryStatus.NEW.value)
    ip_address: str = "unknown"
    user_agent: str = "unknown"
    created_at: datetime = Field(default_factory=_utc_now)
