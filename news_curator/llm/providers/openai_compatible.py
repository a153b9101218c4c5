"""OpenAI-compatible chat completions provider (OpenAI, OpenRouter, local gateways)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...errors import AdapterError
from ..prompts import PromptBuilder
from .base import AIAdapter


class OpenAICompatibleProvider(AIAdapter):
    """Adapter for any ``/chat/completions`` endpoint."""

    name = "openai_compatible"

    def __init__(
        self,
        cfg: ProviderConfig,
        prompts: PromptBuilder,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        if not api_key:
            raise ValueError("Missing OpenAI-compatible API key")
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
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        data = await self._post(payload)
        try:
            return str(data["choices"][0]["message"]["content"] or "").strip()
        except (KeyError, IndexError, TypeError) as exc:
            raise AdapterError(f"Unexpected completion payload: {exc!r}") from exc

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            return resp.json()
