"""
Suggestion Cache

In-memory TTL cache for autocomplete suggestions.
Key = SHA-256(topic prefix + model). TTL from settings (default 1 hour).

Autocomplete fires after every debounced pause in typing; users often
pause on the same prefix twice (backspace, retype). Caching keeps those
repeats from costing a model call.

Usage:
    from kaizen.cache import suggestion_cache
    cached = await suggestion_cache.get(text, model)
    if cached is None:
        suggestion = await llm.generate_text(...)
        await suggestion_cache.put(text, model, suggestion)
"""

from __future__ import annotations

import asyncio
import hashlib
import time
from typing import Optional

from kaizen.config import settings


class SuggestionCache:
    """Async-safe in-memory cache with TTL eviction."""

    def __init__(self, ttl_seconds: int = 3600, max_entries: int = 1000):
        self._entries: dict[str, tuple[float, str]] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _make_key(text: str, model: str) -> str:
        raw = f"{text}||{model}"
        return hashlib.sha256(raw.encode()).hexdigest()

    async def get(self, text: str, model: str) -> Optional[str]:
        """Cached suggestion, or None if absent or expired."""
        key = self._make_key(text, model)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            stored_at, suggestion = entry
            if time.monotonic() - stored_at > self._ttl:
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return suggestion

    async def put(self, text: str, model: str, suggestion: str) -> None:
        """Store a suggestion. Evicts the oldest entry when full."""
        key = self._make_key(text, model)
        async with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[oldest]
            self._entries[key] = (time.monotonic(), suggestion)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> dict:
        """Cache hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }


# Singleton, shared across the application
suggestion_cache = SuggestionCache(ttl_seconds=settings.SUGGESTION_CACHE_TTL)
