"""documents_table

Create the document store schema for the engagement service:
- Documents (every collection in one table, keyed by collection and id)

Users, handle reservations, feed items, daily topics, likes and poll
votes are all rows of this table.

Revision ID: 3c1d7e52a9f0
Revises:
Create Date: 2026-10-19 09:12:44.512301

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1d7e52a9f0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "documents",
        sa.Column("collection", sa.String(128), nullable=False),
        sa.Column("doc_id", sa.String(255), nullable=False),
        sa.Column("data", postgresql.JSONB(), nullable=False),
        sa.Column("revision", sa.String(32), nullable=False),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("collection", "doc_id"),
    )

    # Reconciliation looks up every relation record owned by a user
    op.create_index(
        "idx_documents_user_id",
        "documents",
        ["collection", sa.text("(data->>'user_id')")],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_documents_user_id", table_name="documents")
    op.drop_table("documents")
