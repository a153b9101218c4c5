"""Geographic gazetteer and keyword scoring.

The resolver combining keyword and AI signals lives in
``news_curator.geo.resolver``.
"""

from .gazetteer import DEFAULT_GAZETTEER, Gazetteer, Region, load_gazetteer
from .keywords import KeywordAnalysis, KeywordMatcher

__all__ = [
    "DEFAULT_GAZETTEER",
    "Gazetteer",
    "Region",
    "load_gazetteer",
    "KeywordAnalysis",
    "KeywordMatcher",
]
