"""Prompt loading and rendering helpers for AI providers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..config import EnhanceConfig, RelevanceConfig
from ..core.types import ArticleCandidate
from ..geo.gazetteer import Gazetteer


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"

GEOGRAPHY_SYSTEM_PROMPT = (
    "You are a geographic analysis expert for regional news. Always respond with valid JSON only."
)
CONTENT_SYSTEM_PROMPT = (
    "You are an expert content creator for regional news. Always respond with valid JSON only."
)

TONES = {
    "casual": "Use a friendly, conversational tone that feels like talking to a friend.",
    "formal": "Use a professional, news-style tone appropriate for serious journalism.",
    "urgent": "Use an urgent, attention-grabbing tone for breaking news.",
    "engaging": "Use an engaging, social media style tone that encourages interaction.",
}


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


class PromptBuilder:
    """Renders the geography and content prompts for a candidate."""

    def __init__(
        self,
        gazetteer: Gazetteer,
        relevance_cfg: RelevanceConfig | None = None,
        enhance_cfg: EnhanceConfig | None = None,
    ):
        self.gazetteer = gazetteer
        self.relevance_cfg = relevance_cfg or RelevanceConfig()
        self.enhance_cfg = enhance_cfg or EnhanceConfig()

    def geography(self, candidate: ArticleCandidate, proposed_state: str) -> str:
        return _render_template(
            "geography",
            title=candidate.title,
            summary=candidate.summary,
            content=candidate.body[: self.relevance_cfg.max_prompt_chars],
            proposed_state=proposed_state,
            regions=", ".join(self.gazetteer.names()),
        )

    def content(self, candidate: ArticleCandidate, region: str) -> str:
        cfg = self.enhance_cfg
        body = candidate.body or candidate.summary
        body_block = f"Content: {body[: cfg.max_prompt_chars]}...\n" if body else ""

        context_block = ""
        tone = TONES.get(cfg.tone, TONES["casual"])
        known = self.gazetteer.get(region)
        if cfg.include_region_context and known is not None:
            if known.cultural_context:
                context_block = f"Regional context: {known.name} is known for {known.cultural_context}.\n"
            if known.tone:
                tone = f"{tone} Keep it {known.tone}."

        return _render_template(
            "content",
            title=candidate.title,
            region=region,
            source=candidate.source or "unknown",
            body_block=body_block,
            context_block=context_block,
            tone=tone,
            max_headline_chars=str(cfg.max_headline_chars),
        )
