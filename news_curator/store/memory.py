"""In-process article store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Any

from ..core.types import PersistableArticle, StoredArticle
from .base import ArticleStore

logger = logging.getLogger(__name__)


class InMemoryArticleStore(ArticleStore):
    """Keeps records in a list; used by tests and dry runs."""

    def __init__(self, records: list[dict[str, Any]] | None = None):
        self.records: list[dict[str, Any]] = list(records or [])

    async def find_recent(self, region: str, window_days: int) -> list[StoredArticle]:
        cutoff = datetime.now(timezone.utc) - timedelta(days=window_days)
        return [
            StoredArticle(
                title=record.get("title", ""),
                url=record.get("url", ""),
                fingerprint=record.get("content_hash", ""),
            )
            for record in self.records
            if record.get("state") == region and _created_at(record) >= cutoff
        ]

    async def insert_many(self, articles: list[PersistableArticle]) -> int:
        known = {record.get("content_hash") for record in self.records}
        inserted = 0
        now = datetime.now(timezone.utc).isoformat()
        for article in articles:
            if article.fingerprint in known:
                continue
            record = article.to_record()
            record["created_at"] = now
            self.records.append(record)
            known.add(article.fingerprint)
            inserted += 1
        return inserted


def _created_at(record: dict[str, Any]) -> datetime:
    """Insert time of ``record``; missing or unreadable values count as now."""
    raw = record.get("created_at")
    if not raw:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(raw))
    except ValueError:
        logger.warning(f"Unreadable created_at {raw!r} for {record.get('url', '')}; keeping it in the window")
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
