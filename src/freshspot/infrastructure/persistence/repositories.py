"""Repository implementations for domain entities."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from freshspot.domain.entities import (
    CatalogInfo,
    Classification,
    DirectRef,
    FeedItem,
    RedditInfo,
    RequestKind,
    Resolved,
    ResolvedItem,
    Unresolved,
)
from freshspot.domain.ports import IResolvedItemRepository

from .models import ResolvedItemModel, utc_now

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class ResolvedItemRepository(IResolvedItemRepository):
    """SQLAlchemy implementation of the resolution cache."""

    # Hey future me, same deal as every repo here: the session is injected and NOT committed by us.
    # session_scope() (or the FastAPI dependency) commits when the request finishes.
    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def lookup_many(self, ids: Iterable[str]) -> dict[str, ResolvedItem]:
        """Return cached records for the ids that exist, keyed by id."""
        id_list = list(dict.fromkeys(ids))
        if not id_list:
            return {}

        stmt = select(ResolvedItemModel).where(ResolvedItemModel.id.in_(id_list))
        result = await self.session.execute(stmt)
        found = {model.id: self._to_entity(model) for model in result.scalars().all()}
        logger.debug("Cache lookup: %d requested, %d found", len(id_list), len(found))
        return found

    # Listen up, future me - this is the duplicate-key policy: IDEMPOTENT INSERT. Two requests racing
    # on the same uncached post both resolve it and both try to write it. First writer wins, the
    # second write is a silent no-op (ON CONFLICT DO NOTHING). We NEVER update an existing row -
    # the cache is write-once, stale entries stay stale.
    async def persist_many(self, items: Sequence[ResolvedItem]) -> None:
        """Insert new records; ids that already exist are left untouched."""
        rows = list({item.id: self._to_row(item) for item in items}.values())
        if not rows:
            return

        bind = self.session.get_bind()
        dialect_insert = _DIALECT_INSERTS.get(bind.dialect.name)

        if dialect_insert is not None:
            stmt = dialect_insert(ResolvedItemModel).on_conflict_do_nothing(
                index_elements=[ResolvedItemModel.id]
            )
            await self.session.execute(stmt, rows)
        else:
            # No native upsert syntax: skip the ids we can already see.
            existing = await self.session.execute(
                select(ResolvedItemModel.id).where(
                    ResolvedItemModel.id.in_([row["id"] for row in rows])
                )
            )
            known = set(existing.scalars().all())
            self.session.add_all(
                ResolvedItemModel(**row) for row in rows if row["id"] not in known
            )
            await self.session.flush()

        logger.debug("Persisted %d resolution records", len(rows))

    @staticmethod
    def _to_row(item: ResolvedItem) -> dict[str, Any]:
        feed_item = item.item
        reddit_info = feed_item.reddit_info
        direct_ref = feed_item.direct_ref
        catalog_info = item.catalog_info
        return {
            "id": feed_item.id,
            "request_kind": feed_item.request_kind.value,
            "classification": feed_item.classification.value,
            "direct_ref": (
                {
                    "catalog_id": direct_ref.catalog_id,
                    "catalog_type": direct_ref.catalog_type,
                }
                if direct_ref
                else None
            ),
            "reddit_info": {
                "artist": reddit_info.artist,
                "album": reddit_info.album,
                "score": reddit_info.score,
                "permalink_url": reddit_info.permalink_url,
            },
            "resolved": item.resolved,
            "catalog_info": catalog_info.to_dict() if catalog_info else None,
            "created_at": utc_now(),
        }

    @staticmethod
    def _to_entity(model: ResolvedItemModel) -> ResolvedItem:
        feed_item = FeedItem(
            id=model.id,
            request_kind=RequestKind(model.request_kind),
            reddit_info=RedditInfo(**model.reddit_info),
            classification=Classification(model.classification),
            direct_ref=DirectRef(**model.direct_ref) if model.direct_ref else None,
        )
        if model.resolved and model.catalog_info:
            return ResolvedItem(
                item=feed_item,
                resolution=Resolved(CatalogInfo.from_dict(model.catalog_info)),
            )
        return ResolvedItem(item=feed_item, resolution=Unresolved())
