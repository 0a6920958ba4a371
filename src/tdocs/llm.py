# src/tdocs/llm.py
"""
LLM client utilities.

Purpose:
- Centralize all interactions with the OpenAI-compatible chat completions API.
- Provide two primitives: chat_text (free-form markdown) and chat_json (JSON-only).
- Log latency and token usage per call for cost tracking.

The client is built once (LLMClient) and passed to whoever needs it; there is
no module-level OpenAI instance.
"""
from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from tdocs.errors import ConfigError, CredentialMissingError, TranslationError

logger = logging.getLogger("tdocs.llm")

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"


@dataclass
class LLMSettings:
    api_key: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: Optional[float] = None

    @classmethod
    def from_env(cls) -> "LLMSettings":
        raw_temperature = os.environ.get("TRANSLATE_TEMPERATURE") or None
        try:
            temperature = float(raw_temperature) if raw_temperature is not None else None
        except ValueError as e:
            raise ConfigError(f"TRANSLATE_TEMPERATURE must be a number, got {raw_temperature!r}") from e
        return cls(
            api_key=os.environ.get("OPENAI_API_KEY") or None,
            base_url=os.environ.get("OPENAI_BASE_URL") or DEFAULT_BASE_URL,
            model=os.environ.get("TRANSLATE_MODEL") or DEFAULT_MODEL,
            temperature=temperature,
        )


def _safe_usage_dict(usage: Any) -> Optional[Dict[str, int]]:
    """
    Normalize usage objects (OpenAI types or dict-like) to a dict with ints.
    """
    if usage is None:
        return None
    for attr in ("prompt_tokens", "completion_tokens", "total_tokens"):
        if not hasattr(usage, attr):
            break
    else:
        return {
            "prompt_tokens": int(getattr(usage, "prompt_tokens") or 0),
            "completion_tokens": int(getattr(usage, "completion_tokens") or 0),
            "total_tokens": int(getattr(usage, "total_tokens") or 0),
        }

    if isinstance(usage, dict):
        try:
            return {
                "prompt_tokens": int(usage.get("prompt_tokens", 0)),
                "completion_tokens": int(usage.get("completion_tokens", 0)),
                "total_tokens": int(usage.get("total_tokens", 0)),
            }
        except (TypeError, ValueError):
            return None

    return None


def strip_fences(txt: str) -> str:
    """Some models wrap JSON in ```json fences."""
    txt = txt.strip()
    if txt.startswith("```"):
        txt = txt.strip("`")
        if txt.startswith("json"):
            txt = txt[len("json"):]
        txt = txt.strip()
    return txt


class LLMClient:
    def __init__(self, settings: LLMSettings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client

    @property
    def model(self) -> str:
        return self.settings.model

    def require_credentials(self) -> None:
        if self._client is None and not self.settings.api_key:
            logger.error("Error: OPENAI_API_KEY is not set.")
            raise CredentialMissingError("OPENAI_API_KEY is not set.")

    def _get_client(self) -> Any:
        self.require_credentials()
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.settings.api_key, base_url=self.settings.base_url)
        return self._client

    async def chat_text(self, system: str, user: str, operation: str = "unspecified") -> str:
        client = self._get_client()

        kwargs: Dict[str, Any] = {}
        if self.settings.temperature is not None:
            kwargs["temperature"] = self.settings.temperature

        t0 = time.perf_counter()
        try:
            resp = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                **kwargs,
            )
        except OpenAIError as e:
            # any SDK failure aborts the current language only
            raise TranslationError(f"LLM call failed for {operation}: {e}") from e
        dt_ms = (time.perf_counter() - t0) * 1000.0

        logger.info(
            "llm_call op=%s model=%s latency_ms=%.1f usage=%s",
            operation,
            self.model,
            dt_ms,
            _safe_usage_dict(getattr(resp, "usage", None)),
        )

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise TranslationError("Failed to get translation response")
        return content.strip()

    async def chat_json(self, system: str, user: str, operation: str = "unspecified") -> Any:
        """
        Contract: the caller MUST instruct the model to return JSON only.
        Invalid JSON raises TranslationError (fail fast).
        """
        txt = strip_fences(await self.chat_text(system, user, operation=operation))
        try:
            return json.loads(txt)
        except json.JSONDecodeError as e:
            raise TranslationError(f"Expected JSON response for {operation}: {e}") from e
