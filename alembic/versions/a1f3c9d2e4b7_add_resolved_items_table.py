"""add resolved_items table for the resolution cache

Revision ID: a1f3c9d2e4b7
Revises:
Create Date: 2026-10-19 10:00:00.000000

Hey future me - RESOLUTION CACHE TABLE!

One row per Reddit post id, written the first time the post is resolved (or given up on)
and never updated afterwards. Rows with resolved = FALSE are the "we looked, nothing there"
markers that stop us searching Spotify for the same post on every page load.

KEY DESIGN DECISIONS:
1. Post id is the primary key - concurrent writers rely on ON CONFLICT (id) DO NOTHING
2. reddit_info/catalog_info/direct_ref are JSON, never queried inside, only by id
3. No updated_at - the cache is write-once
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1f3c9d2e4b7"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create resolved_items table (idempotent - skips if exists)."""
    conn = op.get_bind()
    inspector = sa.inspect(conn)

    # SQLite dev setups may already have it from Database.create_tables()
    if "resolved_items" in inspector.get_table_names():
        return

    op.create_table(
        "resolved_items",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("request_kind", sa.String(10), nullable=False),
        # "spotify" (direct link) or "text" (free-text search)
        sa.Column("classification", sa.String(10), nullable=False),
        sa.Column("direct_ref", sa.JSON(), nullable=True),
        sa.Column("reddit_info", sa.JSON(), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False),
        sa.Column("catalog_info", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_index("ix_resolved_items_resolved", "resolved_items", ["resolved"])


def downgrade() -> None:
    """Drop resolved_items table."""
    op.drop_index("ix_resolved_items_resolved", table_name="resolved_items")
    op.drop_table("resolved_items")
