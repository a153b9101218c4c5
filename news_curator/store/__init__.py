"""Persisted article stores."""

from .base import ArticleStore
from .jsonl import JsonlArticleStore
from .memory import InMemoryArticleStore

__all__ = ["ArticleStore", "InMemoryArticleStore", "JsonlArticleStore"]
