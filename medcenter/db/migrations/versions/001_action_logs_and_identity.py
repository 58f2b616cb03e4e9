"""Create action log and identity claim tables.

Revision ID: 001
Revises:
Create Date: 2025-12-19

Tables: action_logs, identity_users, identity_user_claims
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create action log and identity tables."""
    # Append-only; rows are never updated by the application
    op.create_table(
        "action_logs",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("action_name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("actor_id", UUID),
        sa.Column("payload", sa.Text),
        sa.Column("occurred_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("length(payload) <= 10000", name="chk_action_logs_payload_size"),
    )
    op.create_index("idx_action_logs_occurred_at", "action_logs", [sa.text("occurred_at DESC")])
    op.create_index(
        "idx_action_logs_actor",
        "action_logs",
        ["actor_id", "occurred_at"],
        postgresql_where=sa.text("actor_id IS NOT NULL"),
    )
    op.create_index("idx_action_logs_action_name", "action_logs", ["action_name", "occurred_at"])

    op.create_table(
        "identity_users",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
    )

    op.create_table(
        "identity_user_claims",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            UUID,
            sa.ForeignKey("identity_users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("claim_type", sa.String(100), nullable=False),
        sa.Column("claim_value", sa.String(200), nullable=False),
        sa.UniqueConstraint(
            "user_id", "claim_type", "claim_value", name="uq_identity_user_claims"
        ),
    )
    op.create_index("idx_identity_user_claims_user", "identity_user_claims", ["user_id"])


def downgrade() -> None:
    """Drop action log and identity tables."""
    op.drop_table("identity_user_claims")
    op.drop_table("identity_users")
    op.drop_table("action_logs")
