"""
Geographic relevance resolution.

Decides which region a candidate truly belongs to by combining:
1. A keyword pass over title, summary and body (always available)
2. A best-effort AI classification (absent when the adapter is
   unavailable or fails)

The AI signal, when present, overrides the keyword decision. The
candidate's ``proposed_state`` is never mutated; the verdict carries the
recommendation separately.
"""

from __future__ import annotations

import logging

from ..config import RelevanceConfig
from ..core.types import REGIONAL, UNCLEAR, ArticleCandidate, RelevanceVerdict
from ..llm.providers.base import AIAdapter, GeoClassification
from ..utils.logging import log_event
from .gazetteer import DEFAULT_GAZETTEER, Gazetteer
from .keywords import KeywordAnalysis, KeywordMatcher

logger = logging.getLogger(__name__)

INFRA_FAILURE_CONFIDENCE = 0.3


class RelevanceResolver:
    """Combines keyword and AI signals into one RelevanceVerdict per candidate."""

    def __init__(
        self,
        adapter: AIAdapter | None = None,
        gazetteer: Gazetteer | None = None,
        cfg: RelevanceConfig | None = None,
        event_logger: logging.Logger | None = None,
    ):
        self.adapter = adapter
        self.gazetteer = gazetteer or DEFAULT_GAZETTEER
        self.cfg = cfg or RelevanceConfig()
        self.matcher = KeywordMatcher(self.gazetteer, self.cfg)
        self.event_logger = event_logger

    async def resolve(self, candidate: ArticleCandidate) -> RelevanceVerdict:
        proposed = self.gazetteer.canonical(candidate.proposed_state) or candidate.proposed_state

        keyword: KeywordAnalysis | None = None
        try:
            keyword = self.matcher.analyze(candidate.full_text, proposed)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Keyword analysis failed for {candidate.url}: {exc!r}")

        ai = await self._ai_signal(candidate, proposed)

        if keyword is None and ai is None:
            return RelevanceVerdict(
                is_relevant=True,
                confidence=INFRA_FAILURE_CONFIDENCE,
                recommended_state=proposed,
                reason="Analysis failed, defaulting to source assignment",
                signal="error",
            )

        return self.combine(keyword or KeywordAnalysis([], proposed), ai, proposed)

    async def resolve_batch(
        self, candidates: list[ArticleCandidate]
    ) -> list[tuple[ArticleCandidate, RelevanceVerdict]]:
        results = []
        for idx, candidate in enumerate(candidates, start=1):
            verdict = await self.resolve(candidate)
            if verdict.should_include:
                logger.debug(f"Geographic match {idx}/{len(candidates)} for {candidate.proposed_state}")
            else:
                log_event(
                    self.event_logger,
                    "Geographic mismatch",
                    event="geo_rejected",
                    title=candidate.title,
                    proposed_state=candidate.proposed_state,
                    recommended_state=verdict.recommended_state,
                    confidence=round(verdict.confidence, 3),
                    reason=verdict.reason,
                )
            results.append((candidate, verdict))
        return results

    def combine(
        self,
        keyword: KeywordAnalysis,
        ai: GeoClassification | None,
        proposed: str,
    ) -> RelevanceVerdict:
        verdict = self._keyword_verdict(keyword, proposed)
        if ai is None:
            return verdict

        location = self._normalize_location(ai.primary_location)
        if ai.is_regional_event or location == REGIONAL:
            return RelevanceVerdict(
                is_relevant=False,
                confidence=ai.confidence,
                recommended_state=REGIONAL,
                reason=f"Regional/multi-state event: {ai.reasoning}",
                signal="ai",
                keyword_scores=verdict.keyword_scores,
            )
        if location and location != UNCLEAR and location != proposed:
            return RelevanceVerdict(
                is_relevant=False,
                confidence=ai.confidence,
                recommended_state=location,
                reason=f"AI analysis: {ai.reasoning}",
                signal="ai",
                keyword_scores=verdict.keyword_scores,
            )
        if ai.is_relevant_to_proposed:
            return RelevanceVerdict(
                is_relevant=True,
                confidence=max(verdict.confidence, ai.confidence),
                recommended_state=proposed,
                reason=f"Confirmed by AI: {ai.reasoning}",
                signal="ai",
                keyword_scores=verdict.keyword_scores,
            )
        return verdict

    def _keyword_verdict(self, keyword: KeywordAnalysis, proposed: str) -> RelevanceVerdict:
        scores = keyword.score_map()
        top = keyword.top
        if top is None:
            return RelevanceVerdict(
                is_relevant=True,
                confidence=0.5,
                recommended_state=proposed,
                reason="Default assignment",
                signal="default",
                keyword_scores=scores,
            )

        if keyword.is_proposed_top:
            matches = keyword.proposed.matches if keyword.proposed else []
            return RelevanceVerdict(
                is_relevant=True,
                confidence=min(0.9, 0.6 + keyword.proposed_score / 10),
                recommended_state=proposed,
                reason=f"Strong keyword match for {proposed}: {', '.join(matches)}",
                keyword_scores=scores,
            )

        if keyword.proposed_score == 0:
            return RelevanceVerdict(
                is_relevant=False,
                confidence=min(0.9, 0.6 + top.score / 10),
                recommended_state=top.region,
                reason=(
                    f"No geographic relevance to {proposed}. "
                    f"Better match: {top.region} ({', '.join(top.matches)})"
                ),
                keyword_scores=scores,
            )

        if top.score - keyword.proposed_score > self.cfg.score_margin:
            return RelevanceVerdict(
                is_relevant=False,
                confidence=0.7,
                recommended_state=top.region,
                reason=f"Stronger geographic relevance to {top.region} than {proposed}",
                keyword_scores=scores,
            )

        return RelevanceVerdict(
            is_relevant=True,
            confidence=0.6,
            recommended_state=proposed,
            reason=f"Moderate geographic relevance to {proposed}",
            keyword_scores=scores,
        )

    async def _ai_signal(self, candidate: ArticleCandidate, proposed: str) -> GeoClassification | None:
        if not self.cfg.use_ai or self.adapter is None or not self.adapter.available:
            return None
        try:
            signal = await self.adapter.classify_geography(candidate, proposed)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"AI geographic analysis raised for {candidate.url}: {exc!r}")
            return None
        if not signal.ok:
            logger.debug(f"No AI geographic signal for {candidate.url}: {signal.status} {signal.error or ''}")
            return None
        return signal

    def _normalize_location(self, location: str | None) -> str | None:
        if not location:
            return None
        if location.strip().lower() == REGIONAL.lower():
            return REGIONAL
        if location.strip().lower() == UNCLEAR.lower():
            return UNCLEAR
        return self.gazetteer.canonical(location) or location.strip()
