"""metadata_records

Revision ID: 4c1e2a7b9d10
Revises:
Create Date: 2026-10-17 09:12:44.201377

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1e2a7b9d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "metadata_records",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("network", sa.String(8), nullable=False),
        sa.Column("station", sa.String(8), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("filepath", sa.String(), nullable=False),
        sa.Column("sha256", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_metadata_records_key_created",
        "metadata_records",
        ["network", "station", "created_at"],
    )
    op.create_index("idx_metadata_records_status", "metadata_records", ["status"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_metadata_records_status", table_name="metadata_records")
    op.drop_index("idx_metadata_records_key_created", table_name="metadata_records")
    op.drop_table("metadata_records")
