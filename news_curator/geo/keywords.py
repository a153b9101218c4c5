"""Keyword pass of geographic relevance: gazetteer hits scored per region."""

from __future__ import annotations

from dataclasses import dataclass, field
import re

from ..config import RelevanceConfig
from .gazetteer import Gazetteer, Region


@dataclass
class RegionScore:
    region: str
    score: float
    matches: list[str] = field(default_factory=list)


@dataclass
class KeywordAnalysis:
    """Ranked keyword scores for one text.

    Attributes:
        scores: Regions with a positive score, highest first; ties keep
            gazetteer order
        proposed_state: The region the candidate was proposed for
    """

    scores: list[RegionScore]
    proposed_state: str

    @property
    def top(self) -> RegionScore | None:
        return self.scores[0] if self.scores else None

    @property
    def top_state(self) -> str | None:
        return self.top.region if self.top else None

    @property
    def top_score(self) -> float:
        return self.top.score if self.top else 0.0

    @property
    def proposed(self) -> RegionScore | None:
        for item in self.scores:
            if item.region == self.proposed_state:
                return item
        return None

    @property
    def proposed_score(self) -> float:
        proposed = self.proposed
        return proposed.score if proposed else 0.0

    @property
    def is_proposed_top(self) -> bool:
        """True when no region outscores the proposed one."""
        return self.proposed_score > 0 and self.proposed_score >= self.top_score

    def score_map(self) -> dict[str, float]:
        return {item.region: item.score for item in self.scores}


class KeywordMatcher:
    """Scores text against every gazetteer region.

    score = keyword_weight x keyword hits + district_weight x district hits
    + landmark_weight x landmark hits, counted with word-boundary matching.
    """

    def __init__(self, gazetteer: Gazetteer, cfg: RelevanceConfig | None = None):
        cfg = cfg or RelevanceConfig()
        self.gazetteer = gazetteer
        self._weighted: dict[str, list[tuple[re.Pattern[str], float]]] = {
            name: _compile(region, cfg) for name, region in gazetteer.regions.items()
        }

    def analyze(self, text: str, proposed_state: str) -> KeywordAnalysis:
        lowered = (text or "").lower()
        scores: list[RegionScore] = []
        for name, patterns in self._weighted.items():
            score = 0.0
            matches: list[str] = []
            for pattern, weight in patterns:
                hits = pattern.findall(lowered)
                if not hits:
                    continue
                score += len(hits) * weight
                for hit in hits:
                    if hit not in matches:
                        matches.append(hit)
            if score > 0:
                scores.append(RegionScore(region=name, score=score, matches=matches))

        scores.sort(key=lambda item: item.score, reverse=True)
        canonical = self.gazetteer.canonical(proposed_state) or proposed_state
        return KeywordAnalysis(scores=scores, proposed_state=canonical)


def _compile(region: Region, cfg: RelevanceConfig) -> list[tuple[re.Pattern[str], float]]:
    weighted = []
    for terms, weight in (
        (region.keywords, cfg.keyword_weight),
        (region.districts, cfg.district_weight),
        (region.landmarks, cfg.landmark_weight),
    ):
        for term in terms:
            weighted.append((re.compile(rf"\b{re.escape(term)}\b"), weight))
    return weighted
