"""JSONL file-backed article store for local runs."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Any

from ..core.types import PersistableArticle, StoredArticle
from ..errors import StoreError
from .base import ArticleStore
from .memory import InMemoryArticleStore

logger = logging.getLogger(__name__)


class JsonlArticleStore(ArticleStore):
    """One JSON document per line; appends on insert.

    File I/O runs in a worker thread. Concurrent region runs in the same
    process are serialized by an ``asyncio.Lock``.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def find_recent(self, region: str, window_days: int) -> list[StoredArticle]:
        records = await asyncio.to_thread(self._read_records)
        return await InMemoryArticleStore(records).find_recent(region, window_days)

    async def insert_many(self, articles: list[PersistableArticle]) -> int:
        async with self._lock:
            return await asyncio.to_thread(self._append, articles)

    def _read_records(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        records: list[dict[str, Any]] = []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        records.append(json.loads(line))
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed store line {lineno} in {self.path}")
        except OSError as exc:
            raise StoreError(f"Cannot read store {self.path}: {exc}") from exc
        return records

    def _append(self, articles: list[PersistableArticle]) -> int:
        known = {record.get("content_hash") for record in self._read_records()}
        now = datetime.now(timezone.utc).isoformat()
        lines = []
        for article in articles:
            if article.fingerprint in known:
                continue
            record = article.to_record()
            record["created_at"] = now
            lines.append(json.dumps(record, ensure_ascii=False))
            known.add(article.fingerprint)
        if not lines:
            return 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as exc:
            raise StoreError(f"Cannot write store {self.path}: {exc}") from exc
        return len(lines)
