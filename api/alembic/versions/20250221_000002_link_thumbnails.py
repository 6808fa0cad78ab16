"""link thumbnail attachments

Revision ID: 20250221_000002
Revises: 20250221_000001
Create Date: 2025-02-21 13:52:46.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20250221_000002"
down_revision = "20250221_000001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "link_thumbnails",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "link_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("links.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=255), nullable=True),
        sa.Column("byte_size", sa.Integer(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("source_url", sa.Text(), nullable=True),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("link_id", name="uq_link_thumbnails_link_id"),
    )


def downgrade() -> None:
    op.drop_table("link_thumbnails")
