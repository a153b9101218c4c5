"""
Article deduplication using fingerprints, URL matching and fuzzy titles.

Two phases share the same similarity threshold:
1. Intra-batch: candidates of one region cycle are compared in scrape order
   against the candidates already accepted in that batch.
2. Cross-run: survivors are compared against articles persisted for the
   same region within a trailing window.

First-seen wins in both phases; duplicates are dropped, never merged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging

from ..config import DedupConfig
from ..errors import RunAbort
from ..store.base import ArticleStore
from ..utils.logging import log_event
from .text import fingerprint, similarity
from .types import ArticleCandidate, DuplicateReason, DuplicateVerdict, StoredArticle


@dataclass
class DuplicateRecord:
    """A dropped candidate and the verdict that dropped it."""

    candidate: ArticleCandidate
    verdict: DuplicateVerdict


@dataclass
class DedupResult:
    """Outcome of a dedup phase.

    Attributes:
        unique: Accepted candidates, in input order
        duplicates: Dropped candidates with their verdicts
        fingerprints: Fingerprint of every accepted candidate, keyed by URL
    """

    unique: list[ArticleCandidate] = field(default_factory=list)
    duplicates: list[DuplicateRecord] = field(default_factory=list)
    fingerprints: dict[str, str] = field(default_factory=dict)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)


def compare_titles(
    title: str,
    url: str,
    other_title: str,
    other_url: str,
    threshold: float = 0.85,
) -> DuplicateVerdict:
    """Check whether two articles are the same story.

    Exact URL equality wins over title similarity.
    """
    if url and other_url and url == other_url:
        return DuplicateVerdict(
            is_duplicate=True,
            reason=DuplicateReason.EXACT_URL,
            confidence=1.0,
            matched_against=other_url,
        )
    score = similarity(title, other_title)
    if score >= threshold:
        return DuplicateVerdict(
            is_duplicate=True,
            reason=DuplicateReason.SIMILAR_TITLE,
            confidence=score,
            matched_against=other_url,
        )
    return DuplicateVerdict(is_duplicate=False, confidence=score)


def is_duplicate(a: ArticleCandidate, b: ArticleCandidate, threshold: float = 0.85) -> DuplicateVerdict:
    return compare_titles(a.title, a.url, b.title, b.url, threshold)


def dedup_batch(
    candidates: list[ArticleCandidate],
    threshold: float = 0.85,
    logger: logging.Logger | None = None,
) -> DedupResult:
    """Remove duplicates within one batch of candidates.

    Each candidate is first checked by fingerprint against the accepted set
    (``exact_content``), then compared against every accepted candidate;
    the first match drops it.

    Args:
        candidates: Relevance-passed candidates in scrape order
        threshold: Similarity (0-1) at or above which titles are duplicates
        logger: Optional logger for dropped-duplicate events

    Returns:
        DedupResult with accepted candidates in input order
    """
    result = DedupResult()
    seen: set[str] = set()

    for candidate in candidates:
        digest = fingerprint(candidate)
        if digest in seen:
            verdict = DuplicateVerdict(
                is_duplicate=True,
                reason=DuplicateReason.EXACT_CONTENT,
                confidence=1.0,
                matched_against=candidate.url,
            )
        else:
            verdict = _first_match(candidate, result.unique, threshold)

        if verdict.is_duplicate:
            result.duplicates.append(DuplicateRecord(candidate, verdict))
            log_event(
                logger,
                "Duplicate dropped",
                event="duplicate_dropped",
                title=candidate.title,
                url=candidate.url,
                reason=verdict.reason.value,
                confidence=round(verdict.confidence, 3),
                matched_against=verdict.matched_against,
            )
            continue

        seen.add(digest)
        result.unique.append(candidate)
        result.fingerprints[candidate.url] = digest

    return result


def deduplicate(candidates: list[ArticleCandidate], threshold: float = 0.85) -> list[ArticleCandidate]:
    """Return the candidates that survive intra-batch dedup."""
    return dedup_batch(candidates, threshold).unique


async def dedup_against_store(
    candidates: list[ArticleCandidate],
    region: str,
    store: ArticleStore,
    cfg: DedupConfig,
    logger: logging.Logger | None = None,
) -> DedupResult:
    """Drop candidates already persisted for ``region`` within the window.

    A failed or timed-out store lookup raises ``RunAbort``; it is never read
    as "no duplicates".
    """
    result = DedupResult()
    if not candidates:
        return result

    existing = await _load_recent(store, region, cfg)

    for candidate in candidates:
        digest = fingerprint(candidate)
        verdict = _match_stored(candidate, digest, existing, cfg.similarity_threshold)
        if verdict.is_duplicate:
            result.duplicates.append(DuplicateRecord(candidate, verdict))
            log_event(
                logger,
                "Already stored",
                event="store_duplicate",
                title=candidate.title,
                url=candidate.url,
                reason=verdict.reason.value,
                matched_against=verdict.matched_against,
            )
            continue
        result.unique.append(candidate)
        result.fingerprints[candidate.url] = digest

    return result


async def _load_recent(store: ArticleStore, region: str, cfg: DedupConfig) -> list[StoredArticle]:
    try:
        return await asyncio.wait_for(
            store.find_recent(region, cfg.window_days),
            timeout=cfg.store_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise RunAbort(
            "dedup", f"store lookup for {region} timed out after {cfg.store_timeout_seconds}s"
        ) from exc
    except Exception as exc:  # noqa: BLE001
        raise RunAbort("dedup", f"store lookup for {region} failed: {exc}") from exc


def _first_match(
    candidate: ArticleCandidate,
    accepted: list[ArticleCandidate],
    threshold: float,
) -> DuplicateVerdict:
    for existing in accepted:
        verdict = is_duplicate(candidate, existing, threshold)
        if verdict.is_duplicate:
            return verdict
    return DuplicateVerdict(is_duplicate=False)


def _match_stored(
    candidate: ArticleCandidate,
    digest: str,
    existing: list[StoredArticle],
    threshold: float,
) -> DuplicateVerdict:
    for stored in existing:
        if stored.fingerprint == digest:
            return DuplicateVerdict(
                is_duplicate=True,
                reason=DuplicateReason.EXACT_CONTENT,
                confidence=1.0,
                matched_against=stored.url,
            )
        verdict = compare_titles(candidate.title, candidate.url, stored.title, stored.url, threshold)
        if verdict.is_duplicate:
            return verdict
    return DuplicateVerdict(is_duplicate=False)
