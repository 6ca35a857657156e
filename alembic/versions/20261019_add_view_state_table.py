# File: /alembic/versions/20261019_add_view_state_table.py | Version: 1.0 | Title: Add view_state table
"""add view_state table"""

from alembic import op
import sqlalchemy as sa

revision = "add_view_state_20261019"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "view_state",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("store_key", sa.String(length=100), nullable=False),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("owner_id", "store_key", name="uq_view_state_owner_key"),
    )
    op.create_index("ix_view_state_owner_id", "view_state", ["owner_id"])
    op.create_index("ix_view_state_store_key", "view_state", ["store_key"])


def downgrade():
    op.drop_index("ix_view_state_store_key", table_name="view_state")
    op.drop_index("ix_view_state_owner_id", table_name="view_state")
    op.drop_table("view_state")
