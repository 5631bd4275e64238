"""Lazy, idempotent profile creation for authenticated identities."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from campusgate.exceptions import ConflictError, StorageError
from campusgate.models.domain import ProfileDraft
from campusgate.types import Role

if TYPE_CHECKING:
    from campusgate.models.domain import Membership, Profile, Session
    from campusgate.storage.repositories.protocols import MembershipRepository, ProfileRepository
    from campusgate.tenancy.resolver import TenantContext

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class ProvisionResult:
    """Outcome of :meth:`ProfileProvisioner.ensure_profile`."""

    profile: Profile | None
    created: bool = False
    membership: Membership | None = None


def email_local_part(email: str) -> str:
    local, sep, _ = email.rpartition("@")
    return local if sep and local else "user"


def build_profile_draft(
    session: Session,
    now: datetime,
    verified_providers: Iterable[str],
    uniqueness_token: str | None = None,
) -> ProfileDraft:
    """Build the profile for a first visit.

    The username is the email's local part plus a uniqueness token (the
    millisecond timestamp by default). Email counts as verified only when the
    identity came through a provider that verifies addresses itself.
    """
    local = email_local_part(session.email)
    token = uniqueness_token or str(int(now.timestamp() * 1000))
    verified = bool(session.auth_providers & set(verified_providers))
    return ProfileDraft(
        id=session.identity_id,
        username=f"{local}{token}",
        fullname=local,
        email=session.email,
        is_email_verified=verified,
        verified_at=now if verified else None,
    )


class ProfileProvisioner:
    def __init__(
        self,
        profiles: ProfileRepository,
        memberships: MembershipRepository,
        *,
        verified_providers: Iterable[str] = ("google",),
        default_role_id: int = Role.STUDENT,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._profiles = profiles
        self._memberships = memberships
        self._verified_providers = tuple(verified_providers)
        self._default_role_id = default_role_id
        self._clock = clock

    async def ensure_profile(
        self,
        session: Session,
        tenant_context: TenantContext,
        role_id: int | None = None,
    ) -> ProvisionResult:
        """Return the session's profile, creating it (and an org membership) on first visit.

        A failed lookup yields ``ProvisionResult(profile=None)``; nothing is
        written because a missing row cannot be told apart from an outage.
        """
        try:
            existing = await self._profiles.find_by_id(session.identity_id)
        except StorageError as exc:
            logger.warning(
                "profile_lookup_failed", identity_id=session.identity_id, error=str(exc)
            )
            return ProvisionResult(profile=None)

        if existing is not None:
            return ProvisionResult(profile=existing)

        profile, created = await self._create(session)
        if not created or profile is None:
            return ProvisionResult(profile=profile)

        membership = None
        if tenant_context.is_org_site and tenant_context.tenant is not None:
            membership = await self._join(
                tenant_context.tenant.id, profile.id, role_id or self._default_role_id
            )
        return ProvisionResult(profile=profile, created=True, membership=membership)

    async def _create(self, session: Session) -> tuple[Profile | None, bool]:
        """Insert-then-reconcile: a conflicting insert means another request won."""
        draft = build_profile_draft(session, self._clock(), self._verified_providers)
        for attempt in (1, 2):
            try:
                # Issued writes finish even if the request is cancelled
                profile = await asyncio.shield(self._profiles.insert(draft))
            except ConflictError:
                try:
                    winner = await self._profiles.find_by_id(session.identity_id)
                except StorageError as exc:
                    logger.warning(
                        "profile_refetch_failed", identity_id=session.identity_id, error=str(exc)
                    )
                    return None, False
                if winner is not None:
                    logger.info("profile_created_concurrently", profile_id=winner.id)
                    return winner, False
                # Username collided with another identity; retry with a random token
                logger.info("profile_username_taken", username=draft.username, attempt=attempt)
                draft = build_profile_draft(
                    session,
                    self._clock(),
                    self._verified_providers,
                    uniqueness_token=uuid.uuid4().hex[:8],
                )
            except StorageError as exc:
                logger.warning(
                    "profile_insert_failed", identity_id=session.identity_id, error=str(exc)
                )
                return None, False
            else:
                logger.info(
                    "profile_created",
                    profile_id=profile.id,
                    username=profile.username,
                    is_email_verified=profile.is_email_verified,
                )
                return profile, True
        return None, False

    async def _join(self, organization_id: str, profile_id: str, role_id: int) -> Membership | None:
        try:
            membership = await asyncio.shield(
                self._memberships.insert(organization_id, profile_id, role_id)
            )
        except StorageError as exc:
            # Navigation proceeds without a confirmed membership; onboarding can retry
            logger.error(
                "membership_create_failed",
                organization_id=organization_id,
                profile_id=profile_id,
                error=str(exc),
            )
            return None
        logger.info(
            "membership_created",
            organization_id=organization_id,
            profile_id=profile_id,
            member_id=membership.id,
        )
        return membership
