"""SQLAlchemy table definitions.

Every collection shares one table keyed by (collection, doc_id). They
match the schema defined in Alembic migrations.
"""

from sqlalchemy import JSON, Column, MetaData, String, Table
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# DOCUMENTS TABLE
# ============================================================================
documents_table = Table(
    "documents",
    metadata,
    Column("collection", String(128), primary_key=True),
    Column("doc_id", String(255), primary_key=True),
    Column("data", JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
    # Opaque token replaced on every write, checked by optimistic commits
    Column("revision", String(32), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
)
