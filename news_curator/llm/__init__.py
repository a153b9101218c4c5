"""AI adapters, prompts and response parsing."""

from .prompts import PromptBuilder
from .providers import (
    AIAdapter,
    GeneratedContent,
    GeoClassification,
    UnavailableAdapter,
    available_providers,
    create_adapter,
)

__all__ = [
    "AIAdapter",
    "GeneratedContent",
    "GeoClassification",
    "PromptBuilder",
    "UnavailableAdapter",
    "available_providers",
    "create_adapter",
]
