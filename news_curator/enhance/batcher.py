"""
AI headline/summary enhancement in rate-limited concurrent groups.

Candidates are processed in fixed-size groups; members of a group run
concurrently and groups are separated by a fixed delay. Enhancement is a
quality layer: any failure for a candidate yields fallback content built
from the original data, and the batch always completes.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging

from ..config import EnhanceConfig
from ..core.types import ArticleCandidate, EnhancedContent
from ..llm.providers.base import AIAdapter
from ..utils.logging import log_event

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class ContentEnhancer:
    """Generates EnhancedContent for candidates resolved to a region."""

    def __init__(
        self,
        adapter: AIAdapter | None = None,
        cfg: EnhanceConfig | None = None,
        event_logger: logging.Logger | None = None,
    ):
        self.adapter = adapter
        self.cfg = cfg or EnhanceConfig()
        self.event_logger = event_logger

    async def enhance(
        self,
        candidates: list[ArticleCandidate],
        region: str,
        concurrency: int | None = None,
    ) -> list[EnhancedContent]:
        """Enhance every candidate; results are in input order.

        Args:
            candidates: Candidates already resolved to ``region``
            region: Resolved region; prompts and fallbacks use it, never
                the scraper-proposed one
            concurrency: Group size, defaults to ``cfg.concurrency``

        Returns:
            One EnhancedContent per candidate
        """
        size = max(1, concurrency or self.cfg.concurrency)
        results: list[EnhancedContent] = []

        for start in range(0, len(candidates), size):
            group = candidates[start : start + size]
            group_results = await asyncio.gather(
                *(self.enhance_one(candidate, region) for candidate in group)
            )
            results.extend(group_results)

            if start + size < len(candidates) and self.cfg.batch_delay_seconds > 0:
                await asyncio.sleep(self.cfg.batch_delay_seconds)

        return results

    async def enhance_one(self, candidate: ArticleCandidate, region: str) -> EnhancedContent:
        if not self.cfg.enabled or self.adapter is None or not self.adapter.available:
            return self.fallback(candidate, region, error="enhancement unavailable")

        try:
            generated = await self.adapter.generate_content(candidate, region)
        except Exception as exc:  # noqa: BLE001
            return self.fallback(candidate, region, error=f"{type(exc).__name__}: {exc}")

        if not generated.ok:
            return self.fallback(candidate, region, error=f"{generated.status}: {generated.error or ''}".strip())

        headline = generated.headline.strip()
        summary = generated.summary.strip()
        if not headline or not summary:
            return self.fallback(candidate, region, error="empty headline or summary")

        return EnhancedContent(
            headline=truncate_headline(headline, self.cfg.max_headline_chars),
            summary=summary,
            generated=True,
            generated_at=datetime.now(timezone.utc),
        )

    def fallback(self, candidate: ArticleCandidate, region: str, error: str | None = None) -> EnhancedContent:
        """Content built from the original candidate without AI."""
        if error:
            log_event(
                self.event_logger,
                "Enhancement fallback",
                level=logging.WARNING,
                event="enhancement_fallback",
                region=region,
                title=candidate.title,
                url=candidate.url,
                error=error,
            )

        headline = truncate_headline(
            candidate.title.strip() or f"Breaking News from {region}",
            self.cfg.max_headline_chars,
        )
        body = (candidate.body or candidate.summary).strip()
        limit = self.cfg.fallback_summary_chars
        if body:
            summary = body if len(body) <= limit else body[:limit].rstrip() + ELLIPSIS
        else:
            summary = f"Latest news update from {region}. Read more for details."

        return EnhancedContent(
            headline=headline,
            summary=summary,
            generated=False,
            generated_at=datetime.now(timezone.utc),
            error=error,
        )


def truncate_headline(headline: str, max_chars: int = 60) -> str:
    """Cut ``headline`` to ``max_chars`` characters, ending with "..." when cut."""
    if len(headline) <= max_chars:
        return headline
    return headline[: max_chars - len(ELLIPSIS)] + ELLIPSIS
