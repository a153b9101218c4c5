"""Tests for YAML configuration loading."""

from __future__ import annotations

import pytest

from news_curator.config import ProviderConfig, get_api_key, load_config


def test_defaults_without_file():
    cfg = load_config(None)

    assert cfg.dedup.similarity_threshold == 0.85
    assert cfg.dedup.window_days == 7
    assert cfg.enhance.concurrency == 3
    assert cfg.enhance.batch_delay_seconds == 1.0
    assert cfg.enhance.max_headline_chars == 60
    assert cfg.relevance.score_margin == 3.0


def test_yaml_overrides_merge_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "dedup:\n  window_days: 3\nenhance:\n  tone: formal\nunknown_section:\n  x: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.dedup.window_days == 3
    assert cfg.dedup.similarity_threshold == 0.85
    assert cfg.enhance.tone == "formal"
    assert cfg.enhance.concurrency == 3


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)).store.path == "articles.jsonl"


def test_api_key_resolution(monkeypatch):
    monkeypatch.setenv("CUSTOM_KEY", "from-env")
    monkeypatch.setenv("GOOGLE_API_KEY", "google")

    assert get_api_key(ProviderConfig(api_key="inline", api_key_env="CUSTOM_KEY")) == "inline"
    assert get_api_key(ProviderConfig(api_key_env="CUSTOM_KEY")) == "from-env"
    assert get_api_key(ProviderConfig(name="gemini")) == "google"
    assert get_api_key(ProviderConfig(name="none")) is None


def test_unknown_option_in_section_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("dedup:\n  threshold: 0.9\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown dedup option"):
        load_config(str(path))


@pytest.mark.parametrize(
    "body",
    [
        "dedup:\n  similarity_threshold: 1.5\n",
        "enhance:\n  concurrency: 0\n",
        "enhance:\n  tone: sarcastic\n",
    ],
)
def test_out_of_range_values_are_rejected(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(path))
