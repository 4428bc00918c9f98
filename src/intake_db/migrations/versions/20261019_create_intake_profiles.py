"""Create intake_profiles table.

Revision ID: 20261019_profiles
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_profiles"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "intake_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        # Identity
        sa.Column("user_id", sa.Text, nullable=True),
        sa.Column("flow_id", sa.Text, nullable=False),
        # Lifecycle
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        # Payload
        sa.Column(
            "answers",
            JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("compiled_at", TIMESTAMP(timezone=True), nullable=False),
        # Timestamps
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("completed_at", TIMESTAMP(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "flow_id", name="uq_intake_user_flow"),
        sa.CheckConstraint(
            "status <> 'completed' OR completed_at IS NOT NULL",
            name="ck_completed_has_timestamp",
        ),
    )
    op.create_index("ix_intake_profiles_user_id", "intake_profiles", ["user_id"])
    op.create_index(
        "ix_intake_profiles_user_created",
        "intake_profiles",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_intake_profiles_user_created", table_name="intake_profiles")
    op.drop_index("ix_intake_profiles_user_id", table_name="intake_profiles")
    op.drop_table("intake_profiles")
