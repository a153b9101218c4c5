"""
Pipeline orchestration for one region cycle.

Each (region, cycle) moves through:
1. Scraped: candidates handed over by the scraper
2. GeoFiltered: candidates whose verdict keeps them in this region
3. Deduplicated: intra-batch, then against the persisted store
4. Enhanced: AI headline/summary or fallback content
5. Persisted: bulk insert into the store

Per-candidate failures degrade that candidate only. A stage-level failure
(store unreachable) aborts the cycle with nothing persisted, so the
caller can retry it wholesale. Cancellation is checked between stages.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import logging
import time

from ..config import AppConfig
from ..core.dedup import dedup_against_store, dedup_batch
from ..core.types import (
    ArticleCandidate,
    GeoRejection,
    PersistableArticle,
    RegionRunResult,
    RelevanceVerdict,
    RunStatistics,
)
from ..enhance.batcher import ContentEnhancer
from ..errors import RunAbort, RunCancelled
from ..geo.gazetteer import load_gazetteer
from ..geo.resolver import RelevanceResolver
from ..llm.prompts import PromptBuilder
from ..llm.providers.base import AIAdapter
from ..llm.providers.factory import create_adapter
from ..store.base import ArticleStore
from ..utils.logging import bind_region, log_event


class Stage(str, Enum):
    SCRAPED = "scraped"
    GEO_FILTERED = "geo_filtered"
    DEDUPLICATED = "deduplicated"
    ENHANCED = "enhanced"
    PERSISTED = "persisted"


@dataclass
class RunTotals:
    """Statistics aggregated across cycles; the only state kept between runs.

    Attributes:
        total_cycles: Region cycles executed
        failed_cycles: Cycles that aborted or were cancelled
        total_scraped: Candidates received across all cycles
        total_persisted: Articles inserted across all cycles
        last_run: When the most recent cycle finished
        average_run_seconds: Mean wall time per cycle
    """

    total_cycles: int = 0
    failed_cycles: int = 0
    total_scraped: int = 0
    total_persisted: int = 0
    last_run: datetime | None = None
    average_run_seconds: float = 0.0

    def record(self, result: RegionRunResult) -> None:
        self.total_cycles += 1
        if not result.success:
            self.failed_cycles += 1
        self.total_scraped += result.stats.scraped
        self.total_persisted += result.stats.persisted
        self.last_run = datetime.now(timezone.utc)
        self.average_run_seconds += (result.elapsed_seconds - self.average_run_seconds) / self.total_cycles


class CurationPipeline:
    """Runs the geo-filter, dedup, enhancement and persistence stages."""

    def __init__(
        self,
        store: ArticleStore,
        resolver: RelevanceResolver,
        enhancer: ContentEnhancer,
        cfg: AppConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.resolver = resolver
        self.enhancer = enhancer
        self.cfg = cfg or AppConfig()
        self.logger = logger or logging.getLogger("news_curator")
        self.totals = RunTotals()

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        store: ArticleStore,
        adapter: AIAdapter | None = None,
        logger: logging.Logger | None = None,
        llm_logger: logging.Logger | None = None,
    ) -> "CurationPipeline":
        """Compose a pipeline; builds the AI adapter from config unless one is given."""
        logger = logger or logging.getLogger("news_curator")
        gazetteer = load_gazetteer(cfg.relevance.gazetteer_path)
        if adapter is None:
            prompts = PromptBuilder(gazetteer, cfg.relevance, cfg.enhance)
            adapter = create_adapter(cfg.provider, prompts, cfg.logging, llm_logger)
        resolver = RelevanceResolver(adapter, gazetteer, cfg.relevance, event_logger=logger)
        enhancer = ContentEnhancer(adapter, cfg.enhance, event_logger=logger)
        return cls(store, resolver, enhancer, cfg, logger)

    async def run_region(
        self,
        region: str,
        candidates: list[ArticleCandidate],
        cancel_event: asyncio.Event | None = None,
    ) -> RegionRunResult:
        """Run one region cycle and return its structured result.

        Never raises for stage failures; they are reported through
        ``success=False`` and ``error``.
        """
        region = self.resolver.gazetteer.canonical(region) or region
        started = time.monotonic()
        stats = RunStatistics(scraped=len(candidates))
        result = RegionRunResult(region=region, success=False, stats=stats)
        events = bind_region(self.logger, region)

        log_event(
            events,
            f"Pipeline start for {region}",
            event="pipeline_start",
            scraped=stats.scraped,
        )

        try:
            self._checkpoint(cancel_event, Stage.GEO_FILTERED)
            relevant, verdicts = await self._geo_filter(candidates, result)

            self._checkpoint(cancel_event, Stage.DEDUPLICATED)
            batch = dedup_batch(relevant, self.cfg.dedup.similarity_threshold, events)
            stats.unique = len(batch.unique)
            stats.batch_duplicates = batch.duplicate_count
            fresh = await dedup_against_store(batch.unique, region, self.store, self.cfg.dedup, events)
            stats.db_duplicates = fresh.duplicate_count

            self._checkpoint(cancel_event, Stage.ENHANCED)
            contents = await self.enhancer.enhance(fresh.unique, region)
            stats.enhanced = sum(1 for content in contents if content.generated)
            stats.enhancement_fallbacks = len(contents) - stats.enhanced

            articles = []
            for candidate, content in zip(fresh.unique, contents):
                verdict = verdicts.get(id(candidate))
                articles.append(
                    PersistableArticle(
                        candidate=candidate,
                        state=verdict.recommended_state if verdict else region,
                        content=content,
                        fingerprint=fresh.fingerprints[candidate.url],
                        verdict=verdict,
                    )
                )

            self._checkpoint(cancel_event, Stage.PERSISTED)
            stats.persisted = await self._persist(region, articles)
            result.articles = articles
            result.success = True
        except RunAbort as exc:
            result.error = str(exc)
            result.stage = exc.stage
            stats.persisted = 0
            log_event(
                events,
                f"Cycle aborted for {region}: {exc}",
                level=logging.ERROR,
                event="region_aborted",
                stage=exc.stage,
            )
        except RunCancelled as exc:
            result.error = str(exc)
            result.stage = exc.stage
            stats.persisted = 0
            log_event(
                events,
                f"Cycle cancelled for {region}",
                level=logging.WARNING,
                event="region_cancelled",
                stage=exc.stage,
            )
        finally:
            result.elapsed_seconds = time.monotonic() - started
            self.totals.record(result)

        if result.success:
            log_event(
                events,
                f"Persisted {stats.persisted} article(s) for {region}",
                event="region_persisted",
                elapsed_seconds=round(result.elapsed_seconds, 2),
                **stats.as_dict(),
            )
        return result

    def run_region_sync(
        self,
        region: str,
        candidates: list[ArticleCandidate],
    ) -> RegionRunResult:
        """Blocking wrapper around ``run_region``."""
        return asyncio.run(self.run_region(region, candidates))

    async def run_regions(
        self,
        batches: dict[str, list[ArticleCandidate]],
        cancel_event: asyncio.Event | None = None,
    ) -> list[RegionRunResult]:
        """Run several region cycles concurrently; results follow ``batches`` order."""
        tasks = [
            asyncio.create_task(self.run_region(region, candidates, cancel_event))
            for region, candidates in batches.items()
        ]
        return await asyncio.gather(*tasks)

    async def _geo_filter(
        self,
        candidates: list[ArticleCandidate],
        result: RegionRunResult,
    ) -> tuple[list[ArticleCandidate], dict[int, RelevanceVerdict]]:
        stats = result.stats
        if not self.cfg.relevance.enabled:
            stats.relevant = len(candidates)
            return list(candidates), {}

        relevant: list[ArticleCandidate] = []
        verdicts: dict[int, RelevanceVerdict] = {}
        for candidate, verdict in await self.resolver.resolve_batch(candidates):
            if verdict.should_include:
                relevant.append(candidate)
                verdicts[id(candidate)] = verdict
            else:
                result.rejected.append(GeoRejection(candidate, verdict))

        stats.relevant = len(relevant)
        stats.geo_filtered = len(candidates) - len(relevant)
        return relevant, verdicts

    async def _persist(self, region: str, articles: list[PersistableArticle]) -> int:
        if not articles:
            return 0
        timeout = self.cfg.store.insert_timeout_seconds
        try:
            return await asyncio.wait_for(self.store.insert_many(articles), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise RunAbort(Stage.PERSISTED.value, f"insert for {region} timed out after {timeout}s") from exc
        except Exception as exc:  # noqa: BLE001
            raise RunAbort(Stage.PERSISTED.value, f"insert for {region} failed: {exc}") from exc

    @staticmethod
    def _checkpoint(cancel_event: asyncio.Event | None, stage: Stage) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RunCancelled(stage.value)
