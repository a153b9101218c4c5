"""AI adapter interface: geography classification and content generation.

Callers always receive a status-tagged result object. The base class owns
the call boundary: it applies the per-call timeout, parses and validates
the model output, and turns every failure into a status instead of an
exception. Concrete providers only implement ``_complete``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass, field
import json
import logging
from typing import Any

import httpx

from ...config import LoggingConfig
from ...core.types import ArticleCandidate
from ...errors import AdapterError, AdapterUnavailable, ValidationError
from ...utils.logging import log_event, redact_text, truncate_text
from ..parsing import coerce_bool, coerce_confidence, parse_json_response, require_text
from ..prompts import CONTENT_SYSTEM_PROMPT, GEOGRAPHY_SYSTEM_PROMPT, PromptBuilder

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"
STATUS_TIMEOUT = "timeout"
STATUS_PROVIDER_ERROR = "provider_error"
STATUS_PARSE_ERROR = "parse_error"


@dataclass
class GeoClassification:
    """AI geography signal for one candidate.

    Only meaningful when ``status == "ok"``; any other status means
    "no AI signal".
    """

    status: str
    primary_location: str | None = None
    is_relevant_to_proposed: bool = False
    confidence: float = 0.0
    reasoning: str = ""
    is_regional_event: bool = False
    specific_locations: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


@dataclass
class GeneratedContent:
    """AI headline and summary; empty unless ``status == "ok"``."""

    status: str
    headline: str = ""
    summary: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


class AIAdapter(ABC):
    """Provider interface for geography classification and content generation."""

    name = "base"

    def __init__(
        self,
        prompts: PromptBuilder | None = None,
        timeout_seconds: float = 30.0,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        self.prompts = prompts
        self.timeout_seconds = timeout_seconds
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one prompt and return the raw text of the model reply."""
        raise NotImplementedError

    async def classify_geography(
        self, candidate: ArticleCandidate, proposed_state: str
    ) -> GeoClassification:
        if not self.available or self.prompts is None:
            return GeoClassification(status=STATUS_UNAVAILABLE, error=f"{self.name} unavailable")
        prompt = self.prompts.geography(candidate, proposed_state)
        status, obj, error = await self._request(
            candidate, "llm_classify_geography", prompt, GEOGRAPHY_SYSTEM_PROMPT, 0.3, 300
        )
        if status != STATUS_OK:
            return GeoClassification(status=status, error=error)
        try:
            return _to_classification(obj)
        except ValidationError as exc:
            return GeoClassification(status=STATUS_PARSE_ERROR, error=str(exc))

    async def generate_content(self, candidate: ArticleCandidate, region: str) -> GeneratedContent:
        if not self.available or self.prompts is None:
            return GeneratedContent(status=STATUS_UNAVAILABLE, error=f"{self.name} unavailable")
        prompt = self.prompts.content(candidate, region)
        status, obj, error = await self._request(
            candidate, "llm_generate_content", prompt, CONTENT_SYSTEM_PROMPT, 0.8, 400
        )
        if status != STATUS_OK:
            return GeneratedContent(status=status, error=error)
        try:
            return GeneratedContent(
                status=STATUS_OK,
                headline=require_text(obj, "headline", "punchline"),
                summary=require_text(obj, "summary"),
            )
        except ValidationError as exc:
            return GeneratedContent(status=STATUS_PARSE_ERROR, error=str(exc))

    async def _request(
        self,
        candidate: ArticleCandidate,
        event: str,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> tuple[str, dict[str, Any], str | None]:
        content = ""
        try:
            content = await asyncio.wait_for(
                self._complete(prompt, system_prompt, temperature, max_tokens),
                timeout=self.timeout_seconds,
            )
            obj = parse_json_response(content)
        except asyncio.TimeoutError:
            error = f"timed out after {self.timeout_seconds}s"
            self._log_llm_response(candidate, event, STATUS_TIMEOUT, error)
            return STATUS_TIMEOUT, {}, error
        except (json.JSONDecodeError, ValidationError) as exc:
            self._log_llm_response(candidate, event, STATUS_PARSE_ERROR, content)
            return STATUS_PARSE_ERROR, {}, str(exc)
        except AdapterUnavailable as exc:
            return STATUS_UNAVAILABLE, {}, str(exc)
        except (httpx.HTTPError, AdapterError) as exc:
            self._log_llm_response(candidate, event, STATUS_PROVIDER_ERROR, str(exc))
            return STATUS_PROVIDER_ERROR, {}, f"{type(exc).__name__}: {exc}"
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"{self.name} adapter raised unexpectedly: {exc!r}")
            return STATUS_PROVIDER_ERROR, {}, f"{type(exc).__name__}: {exc}"

        self._log_llm_response(candidate, event, STATUS_OK, content)
        return STATUS_OK, obj, None

    def _log_llm_response(
        self,
        candidate: ArticleCandidate,
        event: str,
        status: str,
        content: str,
    ) -> None:
        if self.llm_logger is None:
            return
        redaction = self.log_cfg.llm_log_redaction
        log_event(
            self.llm_logger,
            "LLM response",
            event=event,
            status=status,
            provider=self.name,
            article_title=candidate.title,
            article_url=redact_text(candidate.url, redaction),
            raw_response=truncate_text(redact_text(content, redaction)),
        )


class UnavailableAdapter(AIAdapter):
    """Explicit "no AI configured" adapter; every call yields ``unavailable``."""

    name = "unavailable"

    def __init__(self, reason: str = "AI provider not configured"):
        super().__init__(timeout_seconds=0.0)
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    async def _complete(self, prompt, system_prompt, temperature, max_tokens) -> str:  # noqa: ANN001
        raise AdapterUnavailable(self.reason)


def _to_classification(obj: dict[str, Any]) -> GeoClassification:
    if "primaryLocation" not in obj and "isRelevantToProposed" not in obj:
        raise ValidationError("Missing primaryLocation and isRelevantToProposed")
    location = obj.get("primaryLocation")
    if location is not None and not isinstance(location, str):
        raise ValidationError(f"Invalid primaryLocation: {location!r}")
    places = obj.get("specificLocations") or []
    if not isinstance(places, list):
        places = []
    return GeoClassification(
        status=STATUS_OK,
        primary_location=location.strip() if location else None,
        is_relevant_to_proposed=coerce_bool(obj.get("isRelevantToProposed")),
        confidence=coerce_confidence(obj.get("confidence")),
        reasoning=str(obj.get("reasoning") or "").strip(),
        is_regional_event=coerce_bool(obj.get("isRegionalEvent")),
        specific_locations=[str(p) for p in places if str(p).strip()],
    )
