"""store distinct facets as text arrays

Revision ID: distinct_facets_as_arrays
Revises: add_conversation_status
Create Date: 2026-10-20 09:00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "distinct_facets_as_arrays"
down_revision: Union[str, None] = "add_conversation_status"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FACET_COLUMNS = ("roles", "services", "actions")


def upgrade() -> None:
    """Upgrade schema: comma-joined facet columns become text[]."""
    for column in FACET_COLUMNS:
        op.alter_column(
            "distinct_roles_services_actions",
            column,
            type_=postgresql.ARRAY(sa.Text()),
            existing_nullable=True,
            postgresql_using=f"string_to_array({column}, ',')",
        )


def downgrade() -> None:
    for column in FACET_COLUMNS:
        op.alter_column(
            "distinct_roles_services_actions",
            column,
            type_=sa.Text(),
            existing_nullable=True,
            postgresql_using=f"array_to_string({column}, ',')",
        )
