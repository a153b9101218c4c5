"""Google Gemini provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ..prompts import PromptBuilder
from .base import AIAdapter


class GeminiProvider(AIAdapter):
    """Gemini-backed adapter using the ``generateContent`` REST endpoint."""

    name = "gemini"

    def __init__(
        self,
        cfg: ProviderConfig,
        prompts: PromptBuilder,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Google API key")
        super().__init__(prompts, cfg.timeout_seconds, log_cfg, llm_logger)
        self.cfg = cfg
        self.api_key = api_key

    async def _complete(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
                "responseMimeType": "application/json",
            },
        }
        data = await self._post(payload)
        return _extract_text(data)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        async with httpx.AsyncClient(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = await client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except Exception:  # noqa: BLE001
        return ""

    if not isinstance(parts, list):
        return ""

    non_thought_chunks: list[str] = []
    all_chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("text")
        if text is None:
            continue
        chunk = str(text)
        if not chunk:
            continue
        all_chunks.append(chunk)
        if not bool(part.get("thought")):
            non_thought_chunks.append(chunk)

    if non_thought_chunks:
        return "".join(non_thought_chunks)
    return "".join(all_chunks)
