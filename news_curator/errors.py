"""Exception types shared across the curation pipeline.

Per-candidate failures (AI classification, enhancement) are absorbed into
that candidate's verdict or content and never surface as these exceptions.
Stage-level failures (store lookups during dedup) propagate as ``RunAbort``
and are converted into a failed ``RegionRunResult`` by the orchestrator.
"""

from __future__ import annotations


class CuratorError(Exception):
    """Base class for all news_curator errors."""


class AdapterUnavailable(CuratorError):
    """The AI adapter or store is not configured."""


class AdapterError(CuratorError):
    """An external call failed (network, HTTP status, provider error)."""


class ValidationError(CuratorError):
    """An AI response was malformed or missing required fields."""


class StoreError(CuratorError):
    """The persisted store could not be queried or written."""


class RunAbort(CuratorError):
    """A stage-level failure that aborts the whole region cycle."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message


class RunCancelled(CuratorError):
    """The region cycle was cancelled at a stage boundary."""

    def __init__(self, stage: str):
        super().__init__(f"cancelled before {stage}")
        self.stage = stage
