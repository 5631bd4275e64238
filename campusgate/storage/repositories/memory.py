"""In-memory repositories (PostgreSQL-backed versions in production)."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

import structlog

from campusgate.exceptions import ConflictError
from campusgate.models.domain import (
    Membership,
    OrganizationSummary,
    Profile,
    ProfileDraft,
    Tenant,
)

logger = structlog.get_logger(__name__)


@dataclass
class InMemoryStore:
    """Shared tables behind the in-memory repositories."""

    organizations: dict[str, Tenant] = field(default_factory=dict)
    profiles: dict[str, Profile] = field(default_factory=dict)
    memberships: list[Membership] = field(default_factory=list)
    current_memberships: set[tuple[str, str]] = field(default_factory=set)

    def add_organization(self, tenant: Tenant) -> Tenant:
        self.organizations[tenant.id] = tenant
        return tenant

    def add_membership(
        self, organization_id: str, profile_id: str, role_id: int, is_current: bool = False
    ) -> Membership:
        membership = Membership(
            id=str(uuid.uuid4()),
            organization_id=organization_id,
            profile_id=profile_id,
            role_id=role_id,
        )
        self.memberships.append(membership)
        if is_current:
            self.current_memberships.add((organization_id, profile_id))
        return membership


class InMemoryProfileRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def find_by_id(self, profile_id: str) -> Profile | None:
        # Yield to the loop like a real round-trip so concurrent callers interleave
        await asyncio.sleep(0)
        return self._store.profiles.get(profile_id)

    async def insert(self, draft: ProfileDraft) -> Profile:
        await asyncio.sleep(0)
        if draft.id in self._store.profiles:
            raise ConflictError(f"profile {draft.id} already exists")
        if any(p.username == draft.username for p in self._store.profiles.values()):
            raise ConflictError(f"username {draft.username} is taken")
        profile = Profile(**draft.model_dump())
        self._store.profiles[profile.id] = profile
        logger.info("profile_inserted", profile_id=profile.id, username=profile.username)
        return profile


class InMemoryMembershipRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def insert(self, organization_id: str, profile_id: str, role_id: int) -> Membership:
        await asyncio.sleep(0)
        for m in self._store.memberships:
            if m.organization_id == organization_id and m.profile_id == profile_id:
                raise ConflictError(f"profile {profile_id} is already in {organization_id}")
        membership = self._store.add_membership(organization_id, profile_id, role_id)
        logger.info(
            "membership_inserted",
            organization_id=organization_id,
            profile_id=profile_id,
            role_id=role_id,
        )
        return membership


class InMemoryOrganizationRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def find_by_slug_or_host(
        self, key: str, *, must_be_custom_domain: bool = False
    ) -> Tenant | None:
        for org in self._store.organizations.values():
            if must_be_custom_domain:
                if org.is_custom_domain and org.custom_domain == key:
                    return org
            elif org.site_name == key:
                return org
        return None

    async def list_for_profile(self, profile_id: str) -> list[OrganizationSummary]:
        summaries: list[OrganizationSummary] = []
        for m in self._store.memberships:
            if m.profile_id != profile_id:
                continue
            org = self._store.organizations.get(m.organization_id)
            if org is None:
                continue
            summaries.append(
                OrganizationSummary(
                    id=org.id,
                    name=org.name,
                    site_name=org.site_name,
                    role_id=m.role_id,
                    member_id=m.id,
                    is_current=(org.id, profile_id) in self._store.current_memberships,
                    theme=org.theme,
                    domain=org.custom_domain if org.is_custom_domain else None,
                )
            )
        return summaries
