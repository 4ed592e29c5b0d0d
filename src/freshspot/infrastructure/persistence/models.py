"""SQLAlchemy ORM models for FreshSpot."""

from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me, this table is a WRITE-ONCE log, not a key-value store! One row per Reddit post id,
# inserted the first time we resolve (or give up on) the post and never updated afterwards. That's
# why there is no updated_at column. resolved=False rows are the "we looked, nothing there" markers
# that keep us from searching Spotify for the same junk post on every page load.
# reddit_info/catalog_info/direct_ref are JSON blobs - we never query inside them, only by id.
class ResolvedItemModel(Base):
    """SQLAlchemy model for a cached resolution outcome."""

    __tablename__ = "resolved_items"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    request_kind: Mapped[str] = mapped_column(String(10), nullable=False)
    classification: Mapped[str] = mapped_column(String(10), nullable=False)
    direct_ref: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    reddit_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, index=True)
    catalog_info: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )
