"""Organization repository, backed by PostgreSQL."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campusgate.exceptions import StorageError
from campusgate.models.database import Organization, OrganizationMember
from campusgate.models.domain import OrganizationSummary, Tenant

logger = structlog.get_logger(__name__)


def _to_tenant(org: Organization) -> Tenant:
    return Tenant(
        id=org.id,
        site_name=org.site_name,
        name=org.name,
        theme=org.theme,
        is_custom_domain=bool(org.custom_domain and org.is_custom_domain_verified),
        custom_domain=org.custom_domain,
    )


class DatabaseOrganizationRepository:
    """PostgreSQL-backed organization directory."""

    def __init__(self, engine: Any) -> None:
        self._engine = engine

    async def find_by_slug_or_host(
        self, key: str, *, must_be_custom_domain: bool = False
    ) -> Tenant | None:
        if must_be_custom_domain:
            stmt = select(Organization).where(
                col(Organization.custom_domain) == key,
                col(Organization.is_custom_domain_verified).is_(True),
            )
        else:
            stmt = select(Organization).where(col(Organization.site_name) == key)

        try:
            async with AsyncSession(self._engine) as session:
                result = await session.execute(stmt)
                org = result.scalars().first()
        except SQLAlchemyError as exc:
            logger.warning("organization_lookup_failed", key=key, error=str(exc))
            raise StorageError(f"organization lookup failed for {key}") from exc
        return _to_tenant(org) if org else None

    async def list_for_profile(self, profile_id: str) -> list[OrganizationSummary]:
        stmt = (
            select(Organization, OrganizationMember)
            .join(OrganizationMember, col(OrganizationMember.organization_id) == Organization.id)
            .where(col(OrganizationMember.profile_id) == profile_id)
            .order_by(col(OrganizationMember.created_at))
        )
        try:
            async with AsyncSession(self._engine) as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            logger.warning("organization_list_failed", profile_id=profile_id, error=str(exc))
            raise StorageError(f"organization list failed for {profile_id}") from exc

        return [
            OrganizationSummary(
                id=org.id,
                name=org.name,
                site_name=org.site_name,
                role_id=member.role_id,
                member_id=member.id,
                is_current=member.is_current,
                theme=org.theme,
                domain=org.custom_domain if org.is_custom_domain_verified else None,
            )
            for org, member in rows
        ]
