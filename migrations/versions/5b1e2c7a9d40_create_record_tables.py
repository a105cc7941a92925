"""create_record_tables

Revision ID: 5b1e2c7a9d40
Revises:
Create Date: 2026-10-19 09:12:44.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5b1e2c7a9d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # REPOSITORIES
    op.create_table(
        "repositories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("repo_code", sa.String(64), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("repo_code", name="uq_repositories_repo_code"),
    )

    # RECORDS
    op.create_table(
        "records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("repository_id", sa.Integer(), nullable=False),
        sa.Column("record_type", sa.String(32), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("suppressed", sa.Boolean(), nullable=False),
        sa.Column("attributes", sa.JSON(), nullable=False),
        sa.Column("linked_records", sa.JSON(), nullable=False),
        sa.Column("linked_agents", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["repository_id"], ["repositories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_records_repository_type", "records", ["repository_id", "record_type"])
    op.create_index("idx_records_suppressed", "records", ["suppressed"])

    # SUBRECORDS
    op.create_table(
        "subrecords",
        sa.Column("key", sa.String(32), nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=False),
        sa.Column("collection", sa.String(64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["record_id"], ["records.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("key"),
    )
    op.create_index(
        "idx_subrecords_record_collection", "subrecords", ["record_id", "collection"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    # SUBRECORDS
    op.drop_index("idx_subrecords_record_collection", table_name="subrecords")
    op.drop_table("subrecords")

    # RECORDS
    op.drop_index("idx_records_suppressed", table_name="records")
    op.drop_index("idx_records_repository_type", table_name="records")
    op.drop_table("records")

    # REPOSITORIES
    op.drop_table("repositories")
