"""SQLModel database table models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC time as naive datetime for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def naive_utc(value: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _new_uuid() -> str:
    return str(uuid.uuid4())


class Organization(SQLModel, table=True):
    __tablename__ = "organization"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    name: str
    site_name: str = Field(unique=True, index=True)
    custom_domain: str | None = Field(default=None, unique=True)
    is_custom_domain_verified: bool = Field(default=False)
    theme: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)


class Profile(SQLModel, table=True):
    __tablename__ = "profile"

    # Same id as the auth identity; the primary key is the race guard for provisioning
    id: str = Field(primary_key=True)
    username: str = Field(unique=True, index=True)
    fullname: str = ""
    email: str = Field(index=True)
    is_email_verified: bool = Field(default=False)
    verified_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utc_now)


class OrganizationMember(SQLModel, table=True):
    __tablename__ = "organizationmember"
    __table_args__ = (UniqueConstraint("organization_id", "profile_id"),)

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    organization_id: str = Field(foreign_key="organization.id", index=True)
    profile_id: str = Field(foreign_key="profile.id", index=True)
    role_id: int = Field(default=3)
    is_current: bool = Field(default=False)
    created_at: datetime = Field(default_factory=_utc_now)
