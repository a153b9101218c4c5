"""
Runtime configuration: one dataclass per section, loaded from YAML.

A YAML file only needs the options it changes; everything else keeps the
defaults below. Sections:
- ProviderConfig: AI provider settings
- RelevanceConfig: Geographic relevance resolution settings
- DedupConfig: Deduplication settings
- EnhanceConfig: Content enhancement batching settings
- StoreConfig: Persisted store settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the pluggable AI provider.

    Attributes:
        name: Provider name ("gemini", "openai", "openai_compatible" or "none")
        model: Model identifier
        api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        timeout_seconds: Timeout applied to every provider call
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openai"
    model: str = "gpt-3.5-turbo"
    api_key_env: str | None = None
    base_url: str = "https://api.openai.com/v1"
    api_key: str | None = None
    timeout_seconds: float = 30.0
    trust_env: bool = True


@dataclass
class RelevanceConfig:
    """Configuration for geographic relevance resolution.

    Attributes:
        enabled: Whether to run the geographic filter at all
        use_ai: Whether to ask the AI provider for a classification signal
        score_margin: Keyword points by which another region must beat the
            proposed one before the candidate is rejected
        keyword_weight: Score per keyword hit
        district_weight: Score per district hit
        landmark_weight: Score per landmark hit
        gazetteer_path: Optional YAML file replacing the built-in gazetteer
        max_prompt_chars: Maximum characters of body text sent to the AI
    """

    enabled: bool = True
    use_ai: bool = True
    score_margin: float = 3.0
    keyword_weight: float = 2.0
    district_weight: float = 3.0
    landmark_weight: float = 2.5
    gazetteer_path: str | None = None
    max_prompt_chars: int = 1000


@dataclass
class DedupConfig:
    """Configuration for article deduplication.

    Attributes:
        similarity_threshold: Title similarity (0-1) at or above which two
            candidates are duplicates
        window_days: Trailing window of persisted articles checked per region
        store_timeout_seconds: Timeout for the persisted-store lookup
    """

    similarity_threshold: float = 0.85
    window_days: int = 7
    store_timeout_seconds: float = 10.0


@dataclass
class EnhanceConfig:
    """Configuration for AI headline/summary enhancement.

    Attributes:
        enabled: Whether to call the provider; when False every article gets
            fallback content
        concurrency: Number of candidates enhanced concurrently per group
        batch_delay_seconds: Delay between groups
        max_headline_chars: Maximum headline length, longer ones are truncated
        fallback_summary_chars: Characters of original body used as fallback
        max_prompt_chars: Maximum characters of body text sent to the AI
        include_region_context: Add regional cultural context to the prompt
        tone: "casual", "formal", "urgent" or "engaging"
    """

    enabled: bool = True
    concurrency: int = 3
    batch_delay_seconds: float = 1.0
    max_headline_chars: int = 60
    fallback_summary_chars: int = 200
    max_prompt_chars: int = 1000
    include_region_context: bool = True
    tone: str = "casual"


@dataclass
class StoreConfig:
    """Configuration for the persisted article store.

    Attributes:
        path: JSONL file backing the local store used by the CLI
        insert_timeout_seconds: Timeout for the bulk insert at the end of a cycle
    """

    path: str = "articles.jsonl"
    insert_timeout_seconds: float = 30.0


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        llm_log_enabled: Whether to log AI responses to a separate file
        llm_log_redaction: Redaction mode for AI logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the AI log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = False
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    enhance: EnhanceConfig = field(default_factory=EnhanceConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()

_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "relevance": RelevanceConfig,
    "dedup": DedupConfig,
    "enhance": EnhanceConfig,
    "store": StoreConfig,
    "logging": LoggingConfig,
}

_TONES = {"casual", "formal", "urgent", "engaging"}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file over the defaults.

    Raises:
        ValueError: On an unknown key inside a section or an out-of-range value
    """
    if not path:
        return _fromdict(asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: expected a mapping of sections")

    cfg = _merge_config(DEFAULT_CONFIG, raw)
    validate_config(cfg)
    return cfg


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML sections into ``base``; unknown sections are ignored."""
    data = asdict(base)
    for section, values in raw.items():
        if section not in _SECTIONS or not isinstance(values, dict):
            continue
        unknown = set(values) - set(data[section])
        if unknown:
            raise ValueError(f"Unknown {section} option(s): {', '.join(sorted(unknown))}")
        data[section].update(values)
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    return AppConfig(**{section: cls(**data[section]) for section, cls in _SECTIONS.items()})


def validate_config(cfg: AppConfig) -> None:
    """Reject settings the pipeline cannot run with."""
    if not 0.0 <= cfg.dedup.similarity_threshold <= 1.0:
        raise ValueError("dedup.similarity_threshold must be within [0, 1]")
    if cfg.dedup.window_days < 0:
        raise ValueError("dedup.window_days must not be negative")
    if cfg.enhance.concurrency < 1:
        raise ValueError("enhance.concurrency must be at least 1")
    if cfg.enhance.batch_delay_seconds < 0:
        raise ValueError("enhance.batch_delay_seconds must not be negative")
    if cfg.enhance.max_headline_chars <= 3:
        raise ValueError("enhance.max_headline_chars must leave room for the ellipsis")
    if cfg.enhance.tone not in _TONES:
        raise ValueError(f"enhance.tone must be one of: {', '.join(sorted(_TONES))}")
    if cfg.relevance.score_margin < 0:
        raise ValueError("relevance.score_margin must not be negative")


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Resolve the provider key: inline value, named env var, then the provider's default env var."""
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    env_name = _DEFAULT_KEY_ENV.get(cfg.name.lower())
    return os.getenv(env_name) if env_name else None


_DEFAULT_KEY_ENV = {
    "gemini": "GOOGLE_API_KEY",
    "openai": "OPENAI_API_KEY",
    "openai_compatible": "OPENAI_API_KEY",
    "openai-compatible": "OPENAI_API_KEY",
}
