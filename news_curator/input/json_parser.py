"""JSON parser for scraper candidate exports.

Accepts either a bare list of candidates or an object with an
``articles`` array. Each candidate uses the scraper's field names:
title, url, state (or proposedState), source, summary, content/body,
image, scrapedAt.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from ..core.types import ArticleCandidate

logger = logging.getLogger(__name__)


def load_candidates(path: Path | str, default_state: str | None = None) -> list[ArticleCandidate]:
    """Read and parse a candidate export file."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return parse_candidates(data, default_state=default_state)


def parse_candidates(data: Any, default_state: str | None = None) -> list[ArticleCandidate]:
    """Parse scraper output into ArticleCandidate objects.

    The export structure:
        {
            "articles": [
                {
                    "title": "Assam floods displace thousands",
                    "url": "https://example.com/assam-floods",
                    "state": "Assam",
                    "source": "Example Times",
                    "summary": "Short teaser",
                    "content": "Body text",
                    "image": "https://example.com/img.jpg",
                    "scrapedAt": "2026-02-03T11:44:10.702Z"
                }
            ]
        }

    Args:
        data: Parsed JSON content, a list or a dict with ``articles``
        default_state: Region used when an item carries no state

    Returns:
        Candidates in input order. Items missing title, url or a state are
        skipped with a warning.

    Raises:
        ValueError: If the payload is neither a list nor has an ``articles`` list
    """
    if isinstance(data, dict):
        if "articles" not in data:
            raise ValueError("Invalid JSON format: missing 'articles' key")
        items = data["articles"]
    else:
        items = data
    if not isinstance(items, list):
        raise ValueError("Invalid JSON format: 'articles' must be a list")

    candidates: list[ArticleCandidate] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping item {idx}: not an object")
            continue

        title = _text(item.get("title"))
        url = _text(item.get("url"))
        if not title or not url:
            logger.warning(f"Skipping item {idx}: missing required fields (title or url)")
            continue

        state = _text(item.get("state") or item.get("proposedState") or item.get("proposed_state")) or default_state
        if not state:
            logger.warning(f"Skipping item {idx}: no state and no default region")
            continue

        candidates.append(
            ArticleCandidate(
                title=title,
                url=url,
                proposed_state=state,
                source=_text(item.get("source")) or urlparse(url).netloc,
                summary=_text(item.get("summary")),
                body=_text(item.get("content") or item.get("body")),
                image=_text(item.get("image")) or None,
                scraped_at=_parse_timestamp(item.get("scrapedAt") or item.get("scraped_at")),
            )
        )

    return candidates


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.debug(f"Ignoring unparseable timestamp {value!r}")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
