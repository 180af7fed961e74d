"""
Gemini Provider — Google Gemini API implementation.

Uses the google.genai SDK. The client is created on first use, so the
service starts (and validation endpoints work) without an API key;
only generation routes fail when it is missing.

Features:
- Per-call model override (autocomplete uses a lighter model)
- Fallback to FALLBACK_MODEL when the requested model errors
- Circuit breaker: after repeated failures, refuse calls for a cool-down
- Exponential backoff on transient errors (429/5xx/timeouts)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from google import genai
from google.genai import types

from kaizen.config import settings
from kaizen.llm import LLMProvider

logger = logging.getLogger("kaizen.llm.gemini")

FALLBACK_MODEL = "gemini-2.5-flash"

_CB_FAILURE_THRESHOLD = 3
_CB_RECOVERY_TIMEOUT = 60

_TRANSIENT_MARKERS = (
    "429", "500", "503", "rate", "quota", "timeout",
    "connection", "unavailable", "overloaded",
)


class CircuitOpenError(Exception):
    """Raised when the circuit breaker is open."""


class CircuitBreaker:
    """closed → open after N consecutive failures → half-open after cool-down."""

    def __init__(
        self,
        failure_threshold: int = _CB_FAILURE_THRESHOLD,
        recovery_timeout: float = _CB_RECOVERY_TIMEOUT,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._failures = 0
        self._opened_at: float = 0
        self._state = "closed"

    @property
    def state(self) -> str:
        if self._state == "open" and time.monotonic() - self._opened_at >= self.recovery_timeout:
            self._state = "half-open"
        return self._state

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    def record_success(self) -> None:
        self._failures = 0
        self._state = "closed"

    def record_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold or self._state == "half-open":
            self._state = "open"
            self._opened_at = time.monotonic()
            logger.warning(
                "Circuit breaker OPEN after %d consecutive LLM failures; "
                "generation disabled for %ds.",
                self._failures, self.recovery_timeout,
            )


def _is_transient(error: Exception) -> bool:
    text = str(error).lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider with fallback and circuit breaker."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key or settings.GEMINI_API_KEY
        self._model = model or settings.GEMINI_MODEL
        self._client: Optional[genai.Client] = None
        self.circuit_breaker = CircuitBreaker()

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError(
                    "GEMINI_API_KEY not set. Get one from "
                    "https://aistudio.google.com/apikey"
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def _call_model(
        self,
        model: str,
        prompt: str,
        config: types.GenerateContentConfig,
        max_retries: int,
    ) -> str:
        client = self._get_client()
        for attempt in range(max_retries):
            try:
                response = await client.aio.models.generate_content(
                    model=model,
                    contents=prompt,
                    config=config,
                )
                return response.text or ""
            except Exception as e:
                if _is_transient(e) and attempt < max_retries - 1:
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise
        raise RuntimeError(f"No attempts made against {model}")

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> str:
        if self.circuit_breaker.is_open:
            raise CircuitOpenError(
                "LLM circuit breaker is open after repeated failures. "
                "Try again shortly."
            )

        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_instruction,
            max_output_tokens=max_output_tokens,
        )
        primary = model or self._model

        try:
            result = await self._call_model(primary, prompt, config, max_retries=2)
        except Exception as primary_err:
            if primary == FALLBACK_MODEL:
                self.circuit_breaker.record_failure()
                raise
            logger.warning(
                "Model %s failed (%s), falling back to %s",
                primary, primary_err, FALLBACK_MODEL,
            )
            try:
                result = await self._call_model(FALLBACK_MODEL, prompt, config, max_retries=1)
            except Exception as fallback_err:
                logger.error("Fallback model %s also failed: %s", FALLBACK_MODEL, fallback_err)
                self.circuit_breaker.record_failure()
                raise fallback_err from primary_err

        self.circuit_breaker.record_success()
        return result
