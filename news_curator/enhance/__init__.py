"""Content enhancement batcher."""

from .batcher import ContentEnhancer, truncate_headline

__all__ = ["ContentEnhancer", "truncate_headline"]
