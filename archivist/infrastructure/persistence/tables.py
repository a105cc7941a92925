"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.types import JSON

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# REPOSITORIES TABLE
# ============================================================================
repositories_table = Table(
    "repositories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("repo_code", String(64), nullable=False),
    Column("name", String, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("repo_code", name="uq_repositories_repo_code"),
)


# ============================================================================
# RECORDS TABLE
# ============================================================================
records_table = Table(
    "records",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "repository_id",
        Integer,
        ForeignKey("repositories.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("record_type", String(32), nullable=False),  # RecordType as string
    Column("version", Integer, nullable=False),  # lock_version; bumped by every write
    Column("suppressed", Boolean, nullable=False, default=False),
    Column("attributes", JSON, nullable=False),
    Column("linked_records", JSON, nullable=False),  # [{ref, role}, ...]
    Column("linked_agents", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_records_repository_type", records_table.c.repository_id, records_table.c.record_type)
Index("idx_records_suppressed", records_table.c.suppressed)


# ============================================================================
# SUBRECORDS TABLE (owned by a parent record, replaced on every parent write)
# ============================================================================
subrecords_table = Table(
    "subrecords",
    metadata,
    Column("key", String(32), primary_key=True),  # Stable opaque key, uuid4 hex
    Column(
        "record_id",
        Integer,
        ForeignKey("records.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("collection", String(64), nullable=False),
    Column("position", Integer, nullable=False),
    Column("data", JSON, nullable=False),
    Column("version", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_subrecords_record_collection", subrecords_table.c.record_id, subrecords_table.c.collection)
