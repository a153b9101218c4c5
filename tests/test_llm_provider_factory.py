"""Tests for hot-swappable AI provider factory and adapter status handling."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from news_curator.config import LoggingConfig, ProviderConfig
from news_curator.core.types import ArticleCandidate
from news_curator.geo.gazetteer import DEFAULT_GAZETTEER
from news_curator.llm.prompts import PromptBuilder
from news_curator.llm.providers.base import UnavailableAdapter
from news_curator.llm.providers.factory import available_providers, create_adapter
from news_curator.llm.providers.gemini import GeminiProvider, _extract_text
from news_curator.llm.providers.openai_compatible import OpenAICompatibleProvider

PROMPTS = PromptBuilder(DEFAULT_GAZETTEER)
CANDIDATE = ArticleCandidate(title="Agartala rains", url="https://t.in/1", proposed_state="Tripura")


def _openai(timeout: float = 5.0) -> OpenAICompatibleProvider:
    return create_adapter(
        ProviderConfig(name="openai", model="gpt-4.1-mini", api_key="test-key", timeout_seconds=timeout),
        PROMPTS,
        LoggingConfig(),
    )


def _chat(content: str) -> dict:
    return {"choices": [{"message": {"content": content}}]}


def test_available_providers_contains_expected_backends():
    names = available_providers()
    assert "gemini" in names
    assert "openai" in names
    assert "openai_compatible" in names


def test_create_adapter_gemini():
    adapter = create_adapter(
        ProviderConfig(
            name="gemini",
            model="gemini-2.0-flash",
            api_key="test-key",
            base_url="https://generativelanguage.googleapis.com",
        ),
        PROMPTS,
        LoggingConfig(),
        llm_logger=None,
    )
    assert isinstance(adapter, GeminiProvider)


def test_create_adapter_openai_compatible():
    assert isinstance(_openai(), OpenAICompatibleProvider)


def test_create_adapter_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported provider"):
        create_adapter(ProviderConfig(name="unknown-provider", api_key="k"), PROMPTS)


def test_create_adapter_without_key_is_unavailable(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    adapter = create_adapter(ProviderConfig(name="openai"), PROMPTS)

    assert isinstance(adapter, UnavailableAdapter)
    assert not adapter.available
    result = asyncio.run(adapter.classify_geography(CANDIDATE, "Tripura"))
    assert result.status == "unavailable"


def test_disabled_provider_is_unavailable():
    adapter = create_adapter(ProviderConfig(name="none"), PROMPTS)
    assert isinstance(adapter, UnavailableAdapter)


def test_classification_parses_fenced_json(monkeypatch):
    adapter = _openai()

    async def fake_post(payload):  # noqa: ANN001
        assert payload["messages"][0]["role"] == "system"
        return _chat(
            "Here you go:\n```json\n"
            '{"primaryLocation": "Tripura", "isRelevantToProposed": true, "confidence": 1.7,'
            ' "reasoning": "Agartala", "isRegionalEvent": "false", "specificLocations": ["Agartala"]}\n```'
        )

    monkeypatch.setattr(adapter, "_post", fake_post)
    result = asyncio.run(adapter.classify_geography(CANDIDATE, "Tripura"))

    assert result.ok
    assert result.primary_location == "Tripura"
    assert result.is_relevant_to_proposed is True
    assert result.is_regional_event is False
    assert result.confidence == 1.0
    assert result.specific_locations == ["Agartala"]


def test_content_accepts_punchline_key(monkeypatch):
    adapter = _openai()

    async def fake_post(payload):  # noqa: ANN001
        return _chat('{"punchline": "Rain soaks Agartala", "summary": "Heavy rain."}')

    monkeypatch.setattr(adapter, "_post", fake_post)
    result = asyncio.run(adapter.generate_content(CANDIDATE, "Tripura"))

    assert result.ok
    assert result.headline == "Rain soaks Agartala"


def test_http_error_becomes_provider_error(monkeypatch):
    adapter = _openai()

    async def fake_post(payload):  # noqa: ANN001
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(adapter, "_post", fake_post)
    result = asyncio.run(adapter.classify_geography(CANDIDATE, "Tripura"))

    assert result.status == "provider_error"
    assert "ConnectError" in result.error


def test_malformed_completion_payload_becomes_provider_error(monkeypatch):
    adapter = _openai()

    async def fake_post(payload):  # noqa: ANN001
        return {"unexpected": True}

    monkeypatch.setattr(adapter, "_post", fake_post)
    result = asyncio.run(adapter.generate_content(CANDIDATE, "Tripura"))

    assert result.status == "provider_error"


def test_slow_provider_times_out(monkeypatch):
    adapter = _openai(timeout=0.01)

    async def fake_post(payload):  # noqa: ANN001
        await asyncio.sleep(1)
        return _chat("{}")

    monkeypatch.setattr(adapter, "_post", fake_post)
    result = asyncio.run(adapter.classify_geography(CANDIDATE, "Tripura"))

    assert result.status == "timeout"


def test_extract_text_joins_non_thought_parts():
    data = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"thought": True, "text": "internal reasoning"},
                        {"text": '{"headline": "A"'},
                        {"text": ', "summary": "B"}'},
                    ]
                }
            }
        ]
    }

    assert _extract_text(data) == '{"headline": "A", "summary": "B"}'


def test_extract_text_falls_back_to_all_text_when_only_thought():
    data = {"candidates": [{"content": {"parts": [{"thought": True, "text": "first"}, {"thought": True, "text": " second"}]}}]}

    assert _extract_text(data) == "first second"
    assert _extract_text({}) == ""
