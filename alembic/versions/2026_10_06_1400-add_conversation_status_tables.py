"""add conversation_status and distinct_roles_services_actions tables

Revision ID: add_conversation_status
Revises: seed_event_types
Create Date: 2026-10-06 14:00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "add_conversation_status"
down_revision: Union[str, None] = "seed_event_types"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: conversation tracker and cached distinct facets."""
    op.create_table(
        "conversation_status",
        sa.Column("conversation_id", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("latest_status", sa.String(length=32), nullable=False),
        sa.Column("status_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("conversation_id"),
    )
    op.create_index(
        "ix_conversation_status_created_at",
        "conversation_status",
        ["created_at"],
        unique=False,
    )

    op.create_table(
        "distinct_roles_services_actions",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("roles", sa.Text(), nullable=True),
        sa.Column("services", sa.Text(), nullable=True),
        sa.Column("actions", sa.Text(), nullable=True),
        sa.Column("refreshed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("distinct_roles_services_actions")
    op.drop_index("ix_conversation_status_created_at", table_name="conversation_status")
    op.drop_table("conversation_status")
