"""
Core domain models and business logic.

This package contains data types, text comparison primitives and
deduplication, independent of any external adapter.
"""

from .types import (
    ArticleCandidate,
    DuplicateReason,
    DuplicateVerdict,
    EnhancedContent,
    PersistableArticle,
    RegionRunResult,
    RelevanceVerdict,
    RunStatistics,
    StoredArticle,
)
from .text import fingerprint, normalize_text, similarity
from .dedup import dedup_against_store, dedup_batch, deduplicate, is_duplicate

__all__ = [
    "ArticleCandidate",
    "DuplicateReason",
    "DuplicateVerdict",
    "EnhancedContent",
    "PersistableArticle",
    "RegionRunResult",
    "RelevanceVerdict",
    "RunStatistics",
    "StoredArticle",
    "fingerprint",
    "normalize_text",
    "similarity",
    "dedup_against_store",
    "dedup_batch",
    "deduplicate",
    "is_duplicate",
]
