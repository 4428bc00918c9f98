"""Async repository for IntakeProfile rows.

All methods accept an ``AsyncSession`` so the caller controls transaction
boundaries; writes ``flush()`` but never ``commit()``.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from intake_db.models.enums import ProfileStatus
from intake_db.models.profile import IntakeProfile


class ProfileRepository:
    """Async read/write operations on the ``intake_profiles`` table."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_user_and_flow(
        self, db: AsyncSession, user_id: str | None, flow_id: str
    ) -> IntakeProfile | None:
        """Fetch the row for the unique (user_id, flow_id) pair."""
        stmt = select(IntakeProfile).where(
            IntakeProfile.user_id.is_(None) if user_id is None
            else IntakeProfile.user_id == user_id,
            IntakeProfile.flow_id == flow_id,
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_completed(
        self, db: AsyncSession, user_id: str
    ) -> IntakeProfile | None:
        """Most recently completed profile for ``user_id``, if any."""
        stmt = (
            select(IntakeProfile)
            .where(
                IntakeProfile.user_id == user_id,
                IntakeProfile.status == ProfileStatus.COMPLETED,
            )
            .order_by(IntakeProfile.completed_at.desc())
            .limit(1)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def save_profile(
        self,
        db: AsyncSession,
        *,
        user_id: str | None,
        flow_id: str,
        answers: dict[str, Any],
        compiled_at: datetime,
    ) -> IntakeProfile:
        """Insert the profile row, or overwrite the answers of a pending one.

        A retried completion for the same flow lands on the existing row
        instead of violating the unique constraint.
        """
        row = await self.get_by_user_and_flow(db, user_id, flow_id)
        if row is None:
            row = IntakeProfile(user_id=user_id, flow_id=flow_id)
            db.add(row)
        elif row.status == ProfileStatus.COMPLETED:
            raise ValueError(
                f"Profile already completed: user_id={user_id} flow_id={flow_id}"
            )
        row.answers = answers
        row.compiled_at = compiled_at
        row.status = ProfileStatus.PENDING
        await db.flush()
        return row

    async def mark_completed(
        self, db: AsyncSession, profile: IntakeProfile
    ) -> IntakeProfile:
        """Set the completion marker on a saved profile row."""
        profile.status = ProfileStatus.COMPLETED
        profile.completed_at = datetime.now(timezone.utc)
        await db.flush()
        return profile
