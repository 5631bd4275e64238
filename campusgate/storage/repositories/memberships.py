"""Organization membership repository, backed by PostgreSQL."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from campusgate.exceptions import ConflictError, MembershipWriteError
from campusgate.models.database import OrganizationMember
from campusgate.models.domain import Membership

logger = structlog.get_logger(__name__)


class DatabaseMembershipRepository:
    """PostgreSQL-backed membership store."""

    def __init__(self, engine: Any) -> None:
        self._engine = engine

    async def insert(self, organization_id: str, profile_id: str, role_id: int) -> Membership:
        row = OrganizationMember(
            organization_id=organization_id,
            profile_id=profile_id,
            role_id=role_id,
        )
        try:
            async with AsyncSession(self._engine) as session:
                session.add(row)
                await session.commit()
                await session.refresh(row)
        except IntegrityError as exc:
            raise ConflictError(
                f"profile {profile_id} is already in organization {organization_id}"
            ) from exc
        except SQLAlchemyError as exc:
            raise MembershipWriteError(
                f"membership insert failed for {profile_id} in {organization_id}"
            ) from exc

        logger.info(
            "membership_inserted",
            organization_id=organization_id,
            profile_id=profile_id,
            role_id=role_id,
        )
        return Membership(
            id=row.id,
            organization_id=row.organization_id,
            profile_id=row.profile_id,
            role_id=row.role_id,
        )
