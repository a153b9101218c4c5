"""Tests for AI content enhancement batching and fallbacks."""

from __future__ import annotations

import asyncio
import json

from news_curator.config import EnhanceConfig
from news_curator.core.types import ArticleCandidate
from news_curator.enhance.batcher import ContentEnhancer, truncate_headline
from news_curator.geo.gazetteer import DEFAULT_GAZETTEER
from news_curator.llm.prompts import PromptBuilder
from news_curator.llm.providers.base import AIAdapter, UnavailableAdapter


class _ContentAdapter(AIAdapter):
    """Adapter stub that records concurrency and returns a fixed reply."""

    name = "content-stub"

    def __init__(self, reply, delay: float = 0.0, cfg: EnhanceConfig | None = None):
        super().__init__(PromptBuilder(DEFAULT_GAZETTEER, enhance_cfg=cfg), timeout_seconds=1.0)
        self.reply = reply
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.prompts_seen: list[str] = []

    async def _complete(self, prompt, system_prompt, temperature, max_tokens):  # noqa: ANN001
        self.prompts_seen.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if isinstance(self.reply, Exception):
                raise self.reply
            return self.reply
        finally:
            self.in_flight -= 1


def _candidates(count: int) -> list[ArticleCandidate]:
    return [
        ArticleCandidate(
            title=f"Story {idx}",
            url=f"https://a.in/{idx}",
            proposed_state="Assam",
            body="abcdefghij" * 40,
        )
        for idx in range(count)
    ]


def _cfg(**overrides) -> EnhanceConfig:
    overrides.setdefault("batch_delay_seconds", 0)
    return EnhanceConfig(**overrides)


def test_long_headline_is_truncated_to_limit():
    reply = json.dumps({"headline": "H" * 90, "summary": "Two sentences. About Assam."})
    enhancer = ContentEnhancer(_ContentAdapter(reply), _cfg())

    [content] = asyncio.run(enhancer.enhance(_candidates(1), "Assam"))

    assert content.generated
    assert len(content.headline) == 60
    assert content.headline.endswith("...")
    assert content.summary == "Two sentences. About Assam."


def test_truncate_headline_leaves_short_text():
    assert truncate_headline("Short", 60) == "Short"
    assert truncate_headline("abcdefghij", 8) == "abcde..."


def test_adapter_that_always_raises_yields_fallback_for_every_candidate():
    enhancer = ContentEnhancer(_ContentAdapter(RuntimeError("quota exceeded")), _cfg())
    candidates = _candidates(4)

    results = asyncio.run(enhancer.enhance(candidates, "Assam"))

    assert len(results) == 4
    for candidate, content in zip(candidates, results):
        assert not content.generated
        assert content.headline == candidate.title
        assert content.summary.endswith("...")
        assert len(content.summary) == 203
        assert content.error


def test_fallback_headline_from_long_title_is_truncated():
    title = "Assam " + "x" * 84
    candidate = ArticleCandidate(title=title, url="https://a.in/long", proposed_state="Assam", body="Flood waters recede.")

    for adapter in (UnavailableAdapter(), _ContentAdapter(RuntimeError("quota exceeded"))):
        [content] = asyncio.run(ContentEnhancer(adapter, _cfg()).enhance([candidate], "Assam"))

        assert not content.generated
        assert len(content.headline) == 60
        assert content.headline == title[:57] + "..."


def test_fallback_without_title_or_body_uses_region_placeholders():
    enhancer = ContentEnhancer(UnavailableAdapter(), _cfg())
    candidate = ArticleCandidate(title="", url="https://a.in/x", proposed_state="Sikkim")

    [content] = asyncio.run(enhancer.enhance([candidate], "Sikkim"))

    assert content.headline == "Breaking News from Sikkim"
    assert content.summary == "Latest news update from Sikkim. Read more for details."
    assert not content.generated


def test_short_body_fallback_is_not_ellipsized():
    enhancer = ContentEnhancer(None, _cfg(enabled=False))
    candidate = ArticleCandidate(title="Tawang snowfall", url="https://a.in/y", proposed_state="Arunachal Pradesh", summary="Fresh snow.")

    [content] = asyncio.run(enhancer.enhance([candidate], "Arunachal Pradesh"))

    assert content.summary == "Fresh snow."


def test_missing_summary_field_falls_back():
    enhancer = ContentEnhancer(_ContentAdapter(json.dumps({"headline": "Only a headline"})), _cfg())

    [content] = asyncio.run(enhancer.enhance(_candidates(1), "Assam"))

    assert not content.generated
    assert content.headline == "Story 0"


def test_groups_bound_concurrency_and_keep_order():
    reply = json.dumps({"headline": "Headline", "summary": "Summary."})
    adapter = _ContentAdapter(reply, delay=0.01)
    enhancer = ContentEnhancer(adapter, _cfg(concurrency=3))

    results = asyncio.run(enhancer.enhance(_candidates(7), "Assam"))

    assert len(results) == 7
    assert all(content.generated for content in results)
    assert adapter.max_in_flight == 3
    assert [p.split('"')[1] for p in adapter.prompts_seen] == [f"Story {idx}" for idx in range(7)]


def test_prompt_uses_resolved_region_and_its_context():
    reply = json.dumps({"headline": "Headline", "summary": "Summary."})
    adapter = _ContentAdapter(reply)
    enhancer = ContentEnhancer(adapter, _cfg())
    candidate = ArticleCandidate(title="Festival news", url="https://a.in/z", proposed_state="Assam")

    asyncio.run(enhancer.enhance([candidate], "Nagaland"))

    prompt = adapter.prompts_seen[0]
    assert "Region: Nagaland" in prompt
    assert "Hornbill festival" in prompt
    assert "Region: Assam" not in prompt
