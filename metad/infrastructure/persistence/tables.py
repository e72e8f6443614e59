"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import Column, DateTime, Index, MetaData, String, Table

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# METADATA RECORDS TABLE
# ============================================================================
metadata_records_table = Table(
    "metadata_records",
    metadata,
    Column("id", String, primary_key=True),
    Column("network", String(8), nullable=False),
    Column("station", String(8), nullable=False),
    Column("status", String(16), nullable=False),  # MetadataStatus as string
    Column("filepath", String, nullable=False),
    Column("sha256", String(64), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

# Snapshot query partitions by key and orders by recency
Index(
    "idx_metadata_records_key_created",
    metadata_records_table.c.network,
    metadata_records_table.c.station,
    metadata_records_table.c.created_at,
)
Index("idx_metadata_records_status", metadata_records_table.c.status)
