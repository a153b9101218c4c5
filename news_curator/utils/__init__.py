"""
Shared utility functions.

This package contains utility code used across multiple
pipeline stages.
"""

from .logging import (
    JsonlFormatter,
    RegionLogAdapter,
    bind_region,
    event_fields,
    log_event,
    redact_text,
    setup_llm_logger,
    setup_logging,
    truncate_text,
)

__all__ = [
    "setup_logging",
    "setup_llm_logger",
    "log_event",
    "bind_region",
    "event_fields",
    "redact_text",
    "truncate_text",
    "JsonlFormatter",
    "RegionLogAdapter",
]
