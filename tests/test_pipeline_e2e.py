"""End-to-end tests for region cycles through the curation pipeline."""

from __future__ import annotations

import asyncio
import json
import logging

from news_curator.config import AppConfig
from news_curator.core.types import ArticleCandidate, REGIONAL
from news_curator.geo.gazetteer import DEFAULT_GAZETTEER
from news_curator.llm.prompts import GEOGRAPHY_SYSTEM_PROMPT, PromptBuilder
from news_curator.llm.providers.base import AIAdapter, UnavailableAdapter
from news_curator.pipeline.runner import CurationPipeline
from news_curator.store import InMemoryArticleStore


class _FakeAI(AIAdapter):
    """Answers geography prompts from a title lookup and writes fixed content."""

    name = "fake"

    def __init__(self, locations: dict[str, str]):
        super().__init__(PromptBuilder(DEFAULT_GAZETTEER), timeout_seconds=1.0)
        self.locations = locations

    async def _complete(self, prompt, system_prompt, temperature, max_tokens):  # noqa: ANN001
        if system_prompt == GEOGRAPHY_SYSTEM_PROMPT:
            title = prompt.split('"')[1]
            location = self.locations.get(title, "Unclear")
            return json.dumps(
                {
                    "primaryLocation": location,
                    "isRelevantToProposed": location == "Assam",
                    "confidence": 0.9,
                    "reasoning": "test",
                    "isRegionalEvent": location == REGIONAL,
                }
            )
        return json.dumps({"headline": "Rhinos return to Kaziranga", "summary": "Park reopens."})


class _FailingStore(InMemoryArticleStore):
    async def find_recent(self, region, window_days):  # noqa: ANN001
        raise ConnectionError("store offline")


class _ReadOnlyStore(InMemoryArticleStore):
    async def insert_many(self, articles):  # noqa: ANN001
        raise PermissionError("read-only replica")


def _cfg() -> AppConfig:
    cfg = AppConfig()
    cfg.enhance.batch_delay_seconds = 0
    return cfg


def _batch() -> list[ArticleCandidate]:
    return [
        ArticleCandidate(
            title="Kaziranga park reopens in Assam",
            url="https://news.in/kaziranga",
            proposed_state="Assam",
            source="Assam Tribune",
            body="The Kaziranga national park near Jorhat reopened for tourists on Monday.",
        ),
        ArticleCandidate(
            title="Shillong traffic curbs in Meghalaya",
            url="https://news.in/shillong",
            proposed_state="Assam",
            body="Police in Shillong announced new traffic rules.",
        ),
        ArticleCandidate(
            title="BREAKING: Kaziranga park reopens in Assam",
            url="https://other.in/kaziranga-copy",
            proposed_state="Assam",
        ),
    ]


def _pipeline(store, adapter=None) -> CurationPipeline:  # noqa: ANN001
    return CurationPipeline.from_config(_cfg(), store, adapter=adapter or UnavailableAdapter())


def test_region_cycle_filters_dedups_and_persists():
    store = InMemoryArticleStore()
    result = _pipeline(store).run_region_sync("assam", _batch())

    assert result.success
    assert result.region == "Assam"
    stats = result.stats
    assert stats.scraped == 3
    assert stats.geo_filtered == 1
    assert stats.duplicates_removed == 1
    assert stats.persisted == 1
    assert stats.enhancement_fallbacks == 1

    [rejected] = result.rejected
    assert rejected.verdict.recommended_state == "Meghalaya"

    [record] = store.records
    assert record["url"] == "https://news.in/kaziranga"
    assert record["state"] == "Assam"
    assert record["ai_generated"] is False
    assert record["ai_headline"] == "Kaziranga park reopens in Assam"


def test_second_cycle_drops_already_persisted_articles():
    store = InMemoryArticleStore()
    pipeline = _pipeline(store)

    pipeline.run_region_sync("Assam", _batch())
    second = pipeline.run_region_sync("Assam", _batch())

    assert second.success
    assert second.stats.db_duplicates == 1
    assert second.stats.persisted == 0
    assert len(store.records) == 1
    assert pipeline.totals.total_cycles == 2
    assert pipeline.totals.total_persisted == 1


def test_ai_signals_drive_filtering_and_content():
    store = InMemoryArticleStore()
    adapter = _FakeAI(
        {
            "Kaziranga park reopens in Assam": "Assam",
            "Shillong traffic curbs in Meghalaya": "Meghalaya",
            "BREAKING: Kaziranga park reopens in Assam": "Regional",
        }
    )
    result = _pipeline(store, adapter).run_region_sync("Assam", _batch())

    assert result.success
    assert result.stats.geo_filtered == 2
    assert sum(1 for item in result.rejected if item.is_regional) == 1
    assert result.stats.enhanced == 1
    [article] = result.articles
    assert article.content.generated
    assert store.records[0]["ai_headline"] == "Rhinos return to Kaziranga"


def test_store_lookup_failure_fails_cycle_without_persisting():
    store = _FailingStore()
    result = _pipeline(store).run_region_sync("Assam", _batch())

    assert not result.success
    assert result.stage == "dedup"
    assert "store offline" in result.error
    assert result.stats.persisted == 0
    assert store.records == []


def test_insert_failure_fails_cycle():
    pipeline = _pipeline(_ReadOnlyStore())
    result = pipeline.run_region_sync("Assam", _batch())

    assert not result.success
    assert result.stage == "persisted"
    assert result.stats.persisted == 0
    assert pipeline.totals.failed_cycles == 1


def test_cancelled_cycle_stops_before_next_stage():
    store = InMemoryArticleStore()
    pipeline = _pipeline(store)

    async def _run():
        event = asyncio.Event()
        event.set()
        return await pipeline.run_region("Assam", _batch(), cancel_event=event)

    result = asyncio.run(_run())

    assert not result.success
    assert result.stage == "geo_filtered"
    assert store.records == []


def test_run_regions_runs_each_region_and_aggregates_totals():
    store = InMemoryArticleStore()
    pipeline = _pipeline(store)
    batches = {
        "Assam": _batch(),
        "Sikkim": [
            ArticleCandidate(title="Gangtok ropeway reopens", url="https://news.in/gangtok", proposed_state="Sikkim"),
        ],
    }

    results = asyncio.run(pipeline.run_regions(batches))

    assert [r.region for r in results] == ["Assam", "Sikkim"]
    assert all(r.success for r in results)
    assert {record["state"] for record in store.records} == {"Assam", "Sikkim"}
    assert pipeline.totals.total_scraped == 4
    assert pipeline.totals.total_persisted == 2
    assert pipeline.totals.last_run is not None


def test_pipeline_logs_structured_events(caplog):
    logger = logging.getLogger("curator_test_events")
    pipeline = CurationPipeline.from_config(_cfg(), InMemoryArticleStore(), adapter=UnavailableAdapter(), logger=logger)

    with caplog.at_level(logging.INFO, logger="curator_test_events"):
        pipeline.run_region_sync("Assam", _batch())

    events = [getattr(record, "event", None) for record in caplog.records]
    assert "pipeline_start" in events
    assert "geo_rejected" in events
    assert "duplicate_dropped" in events
    assert "region_persisted" in events


def test_fallback_headline_respects_length_limit():
    store = InMemoryArticleStore()
    candidate = ArticleCandidate(
        title="Guwahati " + "flood relief " * 6 + "in Assam",
        url="https://news.in/relief",
        proposed_state="Assam",
        body="Relief camps opened across Kamrup district.",
    )

    result = _pipeline(store).run_region_sync("Assam", [candidate])

    assert result.success
    headline = store.records[0]["ai_headline"]
    assert len(headline) <= 60
    assert headline.endswith("...")


def test_store_record_with_unreadable_timestamp_does_not_block_region():
    store = InMemoryArticleStore(
        [{"title": "Kaziranga park reopens in Assam", "url": "https://news.in/kaziranga", "state": "Assam", "content_hash": "x", "created_at": "yesterday"}]
    )

    result = _pipeline(store).run_region_sync("Assam", _batch())

    assert result.success
    assert result.stats.db_duplicates == 1
    assert result.stats.persisted == 0
