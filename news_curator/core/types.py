"""
Core data types for the curation pipeline.

This module defines the data structures passed between stages:
- ArticleCandidate: Raw scraped article, immutable input
- RelevanceVerdict: Resolved geographic decision for a candidate
- DuplicateVerdict: Why a candidate was dropped as a duplicate
- EnhancedContent: Generated (or fallback) headline and summary
- PersistableArticle: The only object handed to the store
- StoredArticle: The slice of a persisted article used for cross-run dedup
- RunStatistics / RegionRunResult: Per region-cycle reporting
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


REGIONAL = "Regional"
UNCLEAR = "Unclear"


@dataclass(frozen=True)
class ArticleCandidate:
    """A scraped news item prior to classification, dedup and enhancement.

    Attributes:
        title: The article headline as scraped
        url: Link to the original article
        proposed_state: Region the scraper assigned the article to
        source: Name of the news source
        summary: Optional teaser/summary snippet from the listing page
        body: Optional body text
        image: Optional image URL
        scraped_at: When the scraper produced this candidate
    """

    title: str
    url: str
    proposed_state: str
    source: str = ""
    summary: str = ""
    body: str = ""
    image: str | None = None
    scraped_at: datetime | None = None

    @property
    def full_text(self) -> str:
        return f"{self.title} {self.summary} {self.body}"


@dataclass
class RelevanceVerdict:
    """Resolved decision on whether/where a candidate geographically belongs.

    Attributes:
        is_relevant: Whether the candidate belongs to its proposed region
        confidence: Confidence in the decision, within [0, 1]
        recommended_state: A region name, "Regional" or "Unclear"
        reason: Human readable explanation
        signal: Which evidence decided: "ai", "keyword", "default" or "error"
        keyword_scores: Per-region keyword scores, for reporting
    """

    is_relevant: bool
    confidence: float
    recommended_state: str
    reason: str
    signal: str = "keyword"
    keyword_scores: dict[str, float] = field(default_factory=dict)

    @property
    def should_include(self) -> bool:
        return self.is_relevant and self.recommended_state != REGIONAL


class DuplicateReason(str, Enum):
    EXACT_URL = "exact_url"
    EXACT_CONTENT = "exact_content"
    SIMILAR_TITLE = "similar_title"


@dataclass
class DuplicateVerdict:
    """Outcome of comparing a candidate against one already-accepted article.

    ``reason`` is None when the candidate is not a duplicate; ``confidence``
    then holds the measured title similarity.
    """

    is_duplicate: bool
    reason: DuplicateReason | None = None
    confidence: float = 0.0
    matched_against: str | None = None


@dataclass
class EnhancedContent:
    """Headline and summary layered onto an article.

    ``generated`` is False when the non-AI fallback was used.
    """

    headline: str
    summary: str
    generated: bool
    generated_at: datetime
    error: str | None = None


@dataclass
class PersistableArticle:
    """A candidate that passed every stage, ready for the store."""

    candidate: ArticleCandidate
    state: str
    content: EnhancedContent
    fingerprint: str
    verdict: RelevanceVerdict | None = None

    def to_record(self) -> dict[str, Any]:
        """Flatten into the document shape written by the stores."""
        return {
            "title": self.candidate.title,
            "url": self.candidate.url,
            "summary": self.candidate.summary,
            "image": self.candidate.image,
            "source": self.candidate.source,
            "state": self.state,
            "ai_headline": self.content.headline,
            "ai_summary": self.content.summary,
            "ai_generated": self.content.generated,
            "processed_at": self.content.generated_at.isoformat(),
            "scraped_at": self.candidate.scraped_at.isoformat() if self.candidate.scraped_at else None,
            "content_hash": self.fingerprint,
        }


@dataclass(frozen=True)
class StoredArticle:
    """Fields loaded from the store for cross-run duplicate checks."""

    title: str
    url: str
    fingerprint: str


@dataclass
class RunStatistics:
    """Per-stage counters for one region cycle.

    Attributes:
        scraped: Candidates received from the scraper
        geo_filtered: Candidates removed by the geographic filter
        relevant: Candidates that passed the geographic filter
        unique: Candidates left after intra-batch dedup
        batch_duplicates: Candidates dropped by intra-batch dedup
        db_duplicates: Candidates dropped because the store already had them
        enhanced: Articles whose content was AI generated
        enhancement_fallbacks: Articles that received fallback content
        persisted: Articles inserted into the store
    """

    scraped: int = 0
    geo_filtered: int = 0
    relevant: int = 0
    unique: int = 0
    batch_duplicates: int = 0
    db_duplicates: int = 0
    enhanced: int = 0
    enhancement_fallbacks: int = 0
    persisted: int = 0

    @property
    def duplicates_removed(self) -> int:
        return self.batch_duplicates + self.db_duplicates

    def as_dict(self) -> dict[str, int]:
        return {
            "scraped": self.scraped,
            "geo_filtered": self.geo_filtered,
            "relevant": self.relevant,
            "unique": self.unique,
            "batch_duplicates": self.batch_duplicates,
            "db_duplicates": self.db_duplicates,
            "duplicates_removed": self.duplicates_removed,
            "enhanced": self.enhanced,
            "enhancement_fallbacks": self.enhancement_fallbacks,
            "persisted": self.persisted,
        }


@dataclass
class GeoRejection:
    """A candidate removed by the geographic filter, kept for reporting."""

    candidate: ArticleCandidate
    verdict: RelevanceVerdict

    @property
    def is_regional(self) -> bool:
        return self.verdict.recommended_state == REGIONAL


@dataclass
class RegionRunResult:
    """Structured outcome of one (region, cycle) pipeline run.

    When ``success`` is False nothing was persisted and ``error`` explains
    which stage failed; the cycle can be retried wholesale.
    """

    region: str
    success: bool
    stats: RunStatistics = field(default_factory=RunStatistics)
    articles: list[PersistableArticle] = field(default_factory=list)
    rejected: list[GeoRejection] = field(default_factory=list)
    error: str | None = None
    stage: str | None = None
    elapsed_seconds: float = 0.0
