from .base import AIAdapter, GeneratedContent, GeoClassification, UnavailableAdapter
from .factory import available_providers, create_adapter
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

__all__ = [
    "AIAdapter",
    "GeneratedContent",
    "GeoClassification",
    "UnavailableAdapter",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "available_providers",
    "create_adapter",
]
