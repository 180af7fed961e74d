"""
Rate Limiter — Per-Client Throttling of LLM Routes

Generation, edit and autocomplete each cost a model call. Validation
routes are free and are not throttled, and neither are autocomplete
prefixes that fail the gate.

Sliding window counters in an LRU-bounded in-memory dict, keyed by a
client identifier (the remote address behind the API). Single-process
only; a shared store is needed once the API runs more than one worker.

Defaults: 60 requests/minute, 1000/hour, overridable via env.
"""

from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from fastapi import HTTPException


MAX_TRACKED_CLIENTS = 5000
MINUTE = 60
HOUR = 3600


@dataclass
class RateWindow:
    """Request timestamps for one client, oldest first."""
    timestamps: list[float] = field(default_factory=list)

    def prune(self, now: float) -> None:
        """Forget requests older than the widest window."""
        cutoff = now - HOUR
        self.timestamps = [t for t in self.timestamps if t > cutoff]

    def count_since(self, cutoff: float) -> int:
        return sum(1 for t in self.timestamps if t > cutoff)

    def retry_after(self, now: float, window_seconds: int) -> int:
        """Seconds until the oldest request inside the window ages out."""
        inside = [t for t in self.timestamps if t > now - window_seconds]
        if not inside:
            return 1
        return max(1, int(inside[0] + window_seconds - now) + 1)


@dataclass
class RateLimits:
    """Rate limit configuration."""
    per_minute: int = 60
    per_hour: int = 1000


DEFAULT_LIMITS = RateLimits(
    per_minute=int(os.getenv("KAIZEN_RATE_PER_MINUTE", "60")),
    per_hour=int(os.getenv("KAIZEN_RATE_PER_HOUR", "1000")),
)

_windows: OrderedDict[str, RateWindow] = OrderedDict()
_lock = threading.Lock()

RATE_LIMIT_ENABLED = os.getenv("KAIZEN_RATE_LIMIT", "true").lower() == "true"


def _rejected(limit: int, unit: str, retry_after: int) -> HTTPException:
    return HTTPException(
        status_code=429,
        detail=f"Rate limit exceeded: {limit} requests/{unit}. "
               f"Retry after {retry_after} seconds.",
        headers={"Retry-After": str(retry_after)},
    )


def check_rate_limit(
    client_id: Optional[str],
    limits: Optional[RateLimits] = None,
) -> None:
    """
    Record a request for client_id and enforce its limits.

    Args:
        client_id: Remote address or other stable client key. None skips
            the check (no identifiable client).
        limits: Override default limits.

    Raises:
        HTTPException 429 if a limit is exceeded. Rejected requests are
        not recorded.
    """
    if not RATE_LIMIT_ENABLED or client_id is None:
        return

    limits = limits or DEFAULT_LIMITS
    now = time.time()

    with _lock:
        window = _windows.get(client_id)
        if window is None:
            if len(_windows) >= MAX_TRACKED_CLIENTS:
                _windows.popitem(last=False)
            window = _windows[client_id] = RateWindow()
        else:
            _windows.move_to_end(client_id)

        window.prune(now)

        if window.count_since(now - MINUTE) >= limits.per_minute:
            raise _rejected(limits.per_minute, "minute", window.retry_after(now, MINUTE))
        if window.count_since(now - HOUR) >= limits.per_hour:
            raise _rejected(limits.per_hour, "hour", window.retry_after(now, HOUR))

        window.timestamps.append(now)
