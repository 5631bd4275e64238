"""Collaborator contracts the bootstrap engine depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from campusgate.models.domain import (
        Membership,
        OrganizationSummary,
        Profile,
        ProfileDraft,
        Session,
        Tenant,
    )


class AuthSession(Protocol):
    async def get_current_session(self) -> Session | None:
        """Return the caller's session, or None for an anonymous visitor."""
        ...


class ProfileRepository(Protocol):
    async def find_by_id(self, profile_id: str) -> Profile | None:
        """Return the profile, None when absent. Raises StorageError on query failure."""
        ...

    async def insert(self, draft: ProfileDraft) -> Profile:
        """Insert a profile. Raises ConflictError on a duplicate id or username."""
        ...


class MembershipRepository(Protocol):
    async def insert(self, organization_id: str, profile_id: str, role_id: int) -> Membership:
        """Insert a membership. Raises ConflictError if the pair already exists."""
        ...


class OrganizationRepository(Protocol):
    async def find_by_slug_or_host(
        self, key: str, *, must_be_custom_domain: bool = False
    ) -> Tenant | None: ...

    async def list_for_profile(self, profile_id: str) -> list[OrganizationSummary]:
        """Return the profile's organizations in membership order."""
        ...
