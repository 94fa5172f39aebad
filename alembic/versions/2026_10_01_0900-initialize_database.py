"""initialize database: message details, events, event types

Revision ID: initialize_database
Revises:
Create Date: 2026-10-01 09:00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "initialize_database"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: ebms_message_details, event_types and events tables."""
    op.create_table(
        "ebms_message_details",
        sa.Column("request_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("readable_id", sa.String(length=255), nullable=True),
        sa.Column("cpa_id", sa.String(length=255), nullable=False),
        sa.Column("conversation_id", sa.String(length=255), nullable=False),
        sa.Column("message_id", sa.String(length=255), nullable=False),
        sa.Column("ref_to_message_id", sa.String(length=255), nullable=True),
        sa.Column("from_party_id", sa.String(length=255), nullable=False),
        sa.Column("from_role", sa.String(length=255), nullable=True),
        sa.Column("to_party_id", sa.String(length=255), nullable=False),
        sa.Column("to_role", sa.String(length=255), nullable=True),
        sa.Column("service", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("ref_param", sa.String(length=255), nullable=True),
        sa.Column("sender_name", sa.String(length=255), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("saved_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("request_id"),
        sa.UniqueConstraint("seq"),
    )
    op.create_index(
        "ix_ebms_message_details_saved_at_seq",
        "ebms_message_details",
        ["saved_at", "seq"],
        unique=False,
    )
    op.create_index(
        "ix_ebms_message_details_conversation_id",
        "ebms_message_details",
        ["conversation_id"],
        unique=False,
    )
    op.create_index(
        "ix_ebms_message_details_duplicate_key",
        "ebms_message_details",
        ["message_id", "conversation_id", "cpa_id"],
        unique=False,
    )
    op.create_index(
        "ix_ebms_message_details_readable_id",
        "ebms_message_details",
        ["readable_id"],
        unique=False,
    )

    op.create_table(
        "event_types",
        sa.Column("event_type_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint("event_type_id"),
    )

    op.create_table(
        "events",
        sa.Column("event_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("event_type_id", sa.Integer(), nullable=False),
        sa.Column("request_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content_id", sa.String(length=255), nullable=True),
        sa.Column("message_id", sa.String(length=255), nullable=False),
        sa.Column("event_data", postgresql.JSONB(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["event_type_id"], ["event_types.event_type_id"]),
        sa.PrimaryKeyConstraint("event_id"),
        sa.UniqueConstraint("seq"),
    )
    op.create_index(
        "ix_events_request_id_created_at",
        "events",
        ["request_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_events_created_at_seq", "events", ["created_at", "seq"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_events_created_at_seq", table_name="events")
    op.drop_index("ix_events_request_id_created_at", table_name="events")
    op.drop_table("events")
    op.drop_table("event_types")
    op.drop_index("ix_ebms_message_details_readable_id", table_name="ebms_message_details")
    op.drop_index("ix_ebms_message_details_duplicate_key", table_name="ebms_message_details")
    op.drop_index("ix_ebms_message_details_conversation_id", table_name="ebms_message_details")
    op.drop_index("ix_ebms_message_details_saved_at_seq", table_name="ebms_message_details")
    op.drop_table("ebms_message_details")
