"""
Text normalization, title similarity and content fingerprints.

All functions here are pure and deterministic; they are the comparison
primitives used by both deduplication phases.
"""

from __future__ import annotations

import hashlib
import re

from rapidfuzz.distance import Levenshtein

from .types import ArticleCandidate


_WHITESPACE_RE = re.compile(r"\s+")
_QUOTES_RE = re.compile(r"[\"'`‘’“”]")
_PREFIX_RE = re.compile(r"^(breaking|urgent|latest|update|news|alert)\s*:\s*", re.IGNORECASE)
_SUFFIX_RE = re.compile(r"\s*-\s*(news|update|latest|breaking)$", re.IGNORECASE)
_PUNCT_RE = re.compile(r"[^\w\s]")


def normalize_text(text: str | None) -> str:
    """Return the comparison-only form of a title.

    Lowercases, trims, collapses whitespace, strips quote characters,
    boilerplate prefixes ("breaking:") and suffixes ("- news"), then drops
    remaining punctuation.

    Examples:
        >>> normalize_text("BREAKING: Assam floods displace thousands!!")
        'assam floods displace thousands'
    """
    if not text:
        return ""
    norm = _WHITESPACE_RE.sub(" ", text.lower().strip())
    norm = _QUOTES_RE.sub("", norm)
    norm = _PREFIX_RE.sub("", norm)
    norm = _SUFFIX_RE.sub("", norm)
    norm = _PUNCT_RE.sub("", norm)
    return _WHITESPACE_RE.sub(" ", norm).strip()


def similarity(a: str | None, b: str | None) -> float:
    """Edit-distance similarity of two normalized titles, within [0, 1].

    Identical normalized strings score 1.0 (including two empty ones);
    otherwise an empty side scores 0.0.
    """
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)
    if norm_a == norm_b:
        return 1.0
    if not norm_a or not norm_b:
        return 0.0
    longest = max(len(norm_a), len(norm_b))
    return 1.0 - Levenshtein.distance(norm_a, norm_b) / longest


def fingerprint(article: ArticleCandidate) -> str:
    """Return the exact-duplicate key of a candidate.

    MD5 over the normalized title and the URL; depends on nothing else so it
    is reproducible across runs.
    """
    return fingerprint_parts(article.title, article.url)


def fingerprint_parts(title: str | None, url: str | None) -> str:
    content = f"{normalize_text(title)}|{url or ''}"
    return hashlib.md5(content.encode("utf-8")).hexdigest()
