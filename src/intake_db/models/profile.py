"""IntakeProfile ORM model: one row per completed (or completing) flow.

The compiled answers live in a single JSONB column: the profile is written
once at the end of onboarding and read back whole, so there is nothing to
gain from normalising individual answers into their own tables.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Index,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from intake_db.models.base import Base
from intake_db.models.enums import ProfileStatus


class IntakeProfile(Base):
    """Stored onboarding profile, unique per (user_id, flow_id)."""

    __tablename__ = "intake_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # --- Identity ---
    # Null when the flow ran without an authenticated user
    user_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    flow_id: Mapped[str] = mapped_column(Text, nullable=False)

    # --- Lifecycle ---
    status: Mapped[ProfileStatus] = mapped_column(
        # Stored as the lowercase value, not the Python name
        String(20),
        nullable=False,
        default=ProfileStatus.PENDING,
    )

    # --- Payload ---
    # ProfileRecord.model_dump(mode="json")["answers"]; sets arrive as lists
    answers: Mapped[dict] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'{}'::jsonb"),
    )
    compiled_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False
    )

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("now()"),
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "flow_id", name="uq_intake_user_flow"),
        CheckConstraint(
            "status <> 'completed' OR completed_at IS NOT NULL",
            name="ck_completed_has_timestamp",
        ),
        Index("ix_intake_profiles_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<IntakeProfile user_id={self.user_id!r} flow_id={self.flow_id!r} "
            f"status={self.status!r}>"
        )
