"""Abstract interface for the persisted article store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.types import PersistableArticle, StoredArticle


class ArticleStore(ABC):
    """Store the pipeline reads recent articles from and bulk-inserts into.

    ``insert_many`` must be idempotent on fingerprint: inserting an article
    whose fingerprint already exists is skipped, not an error.
    """

    @abstractmethod
    async def find_recent(self, region: str, window_days: int) -> list[StoredArticle]:
        """Return title, url and fingerprint of articles stored for ``region``
        within the last ``window_days`` days."""
        raise NotImplementedError

    @abstractmethod
    async def insert_many(self, articles: list[PersistableArticle]) -> int:
        """Insert articles and return how many were actually written."""
        raise NotImplementedError
