"""Provider factory and registry for hot-swappable AI backends."""

from __future__ import annotations

import logging

from ...config import LoggingConfig, ProviderConfig, get_api_key
from ..prompts import PromptBuilder
from .base import AIAdapter, UnavailableAdapter
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

logger = logging.getLogger(__name__)

ProviderBuilder = type[AIAdapter]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "gemini": GeminiProvider,
    "openai": OpenAICompatibleProvider,
    "openai_compatible": OpenAICompatibleProvider,
    "openai-compatible": OpenAICompatibleProvider,
}

_DISABLED_NAMES = {"none", "off", "disabled", ""}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_adapter(
    provider_cfg: ProviderConfig,
    prompts: PromptBuilder,
    log_cfg: LoggingConfig | None = None,
    llm_logger: logging.Logger | None = None,
) -> AIAdapter:
    """Build an adapter from runtime config.

    A disabled provider or a missing API key yields an ``UnavailableAdapter``
    so the pipeline runs on keyword signals and fallback content.
    """
    name = provider_cfg.name.lower().strip()
    if name in _DISABLED_NAMES:
        return UnavailableAdapter("AI provider disabled in config")
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    api_key = get_api_key(provider_cfg)
    if not api_key:
        logger.warning(f"No API key for provider {name}; AI features will use fallback behavior")
        return UnavailableAdapter(f"Missing API key for {name}")
    return builder(provider_cfg, prompts, api_key, log_cfg, llm_logger)
