"""
News Curator - regional news curation pipeline.

This package takes scraped article candidates for a region, removes items
that belong to another region, drops duplicates within the batch and
against recently persisted articles, rewrites headlines and summaries with
an AI provider (or a deterministic fallback), and persists the result.

Main entry point is the CLI via `news-curator run` command.

Example:
    $ news-curator run -i candidates.json --store articles.jsonl
"""

__all__ = ["__version__", "CurationPipeline", "ArticleCandidate", "RegionRunResult", "RunStatistics"]
__version__ = "0.1.0"

from .core.types import ArticleCandidate, RegionRunResult, RunStatistics
from .pipeline.runner import CurationPipeline
