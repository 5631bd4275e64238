"""Profile repository, backed by PostgreSQL."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campusgate.exceptions import ConflictError, StorageError
from campusgate.models.database import Profile as ProfileRow
from campusgate.models.database import naive_utc
from campusgate.models.domain import Profile, ProfileDraft

logger = structlog.get_logger(__name__)


def profile_row_from_draft(draft: ProfileDraft) -> ProfileRow:
    row = ProfileRow(**draft.model_dump())
    row.verified_at = naive_utc(draft.verified_at)
    return row


def _to_domain(row: ProfileRow) -> Profile:
    return Profile(
        id=row.id,
        username=row.username,
        fullname=row.fullname,
        email=row.email,
        is_email_verified=row.is_email_verified,
        verified_at=row.verified_at,
    )


class DatabaseProfileRepository:
    """PostgreSQL-backed profile store."""

    def __init__(self, engine: Any) -> None:
        self._engine = engine

    async def find_by_id(self, profile_id: str) -> Profile | None:
        try:
            async with AsyncSession(self._engine) as session:
                stmt = select(ProfileRow).where(col(ProfileRow.id) == profile_id)
                result = await session.execute(stmt)
                row = result.scalars().first()
        except SQLAlchemyError as exc:
            logger.warning("profile_lookup_failed", profile_id=profile_id, error=str(exc))
            raise StorageError(f"profile lookup failed for {profile_id}") from exc
        return _to_domain(row) if row else None

    async def insert(self, draft: ProfileDraft) -> Profile:
        row = profile_row_from_draft(draft)
        try:
            async with AsyncSession(self._engine) as session:
                session.add(row)
                await session.commit()
                await session.refresh(row)
        except IntegrityError as exc:
            logger.info("profile_insert_conflict", profile_id=draft.id)
            raise ConflictError(f"profile {draft.id} already exists") from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"profile insert failed for {draft.id}") from exc

        logger.info("profile_inserted", profile_id=row.id, username=row.username)
        return _to_domain(row)
