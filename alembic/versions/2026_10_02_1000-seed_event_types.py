"""seed event_types reference data

Revision ID: seed_event_types
Revises: initialize_database
Create Date: 2026-10-02 10:00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.constants.event_types import EVENT_TYPE_SEED

# revision identifiers, used by Alembic.
revision: str = "seed_event_types"
down_revision: Union[str, None] = "initialize_database"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_types = sa.table(
    "event_types",
    sa.column("event_type_id", sa.Integer),
    sa.column("description", sa.String),
    sa.column("status", sa.String),
)


def upgrade() -> None:
    op.bulk_insert(
        event_types,
        [
            {
                "event_type_id": int(event_type),
                "description": description,
                "status": status.value,
            }
            for event_type, (description, status) in EVENT_TYPE_SEED.items()
        ],
    )


def downgrade() -> None:
    op.execute(
        event_types.delete().where(
            event_types.c.event_type_id.in_([int(t) for t in EVENT_TYPE_SEED])
        )
    )
