"""Value objects passed between the bootstrap stages (not persisted directly)."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from campusgate.types import RedirectKind


class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    pathname: str = "/"
    query_params: tuple[tuple[str, str], ...] = ()  # ordered multimap
    is_dev: bool = False
    scheme: str = "https"

    def get_param(self, name: str) -> str | None:
        """Return the first value for ``name``, or None."""
        for key, value in self.query_params:
            if key == name:
                return value
        return None

    @property
    def query_string(self) -> str:
        return urlencode(self.query_params)

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.host}"


class Tenant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    site_name: str
    name: str = ""
    theme: str | None = None
    is_custom_domain: bool = False
    custom_domain: str | None = None


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity_id: str
    email: str
    auth_providers: frozenset[str] = frozenset()


class Profile(BaseModel):
    id: str
    username: str
    fullname: str = ""
    email: str
    is_email_verified: bool = False
    verified_at: datetime | None = None


class ProfileDraft(BaseModel):
    """Fields for a profile that has not been inserted yet."""

    id: str
    username: str
    fullname: str
    email: str
    is_email_verified: bool = False
    verified_at: datetime | None = None


class Membership(BaseModel):
    id: str | None = None
    organization_id: str
    profile_id: str
    role_id: int


class OrganizationSummary(BaseModel):
    """One organization a profile belongs to, with the profile's role in it."""

    id: str
    name: str = ""
    site_name: str
    role_id: int
    member_id: str | None = None
    is_current: bool = False
    theme: str | None = None
    domain: str | None = None  # custom domain, or None for the platform subdomain


class RedirectDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RedirectKind = RedirectKind.NONE
    target: str | None = None

    @classmethod
    def none(cls) -> RedirectDecision:
        return cls()

    @classmethod
    def goto(cls, path: str) -> RedirectDecision:
        return cls(kind=RedirectKind.GOTO, target=path)

    @classmethod
    def replace_external(cls, url: str) -> RedirectDecision:
        return cls(kind=RedirectKind.REPLACE_EXTERNAL, target=url)

    @property
    def is_redirect(self) -> bool:
        return self.kind is not RedirectKind.NONE


class SideEffects(BaseModel):
    theme: str | None = None
    locale: str | None = None
