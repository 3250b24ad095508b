"""Rate gate: per-client admission before any collection starts.

Backed by the ``limits`` moving-window strategy. Without a configured storage
URI the gate is disabled, and storage outages fail open: availability wins
over strictness.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Protocol

from limits import parse
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string

from vibecard.models import RateDecision

logger = logging.getLogger(__name__)

_DAY_MS = 86_400_000


class RateGate(Protocol):
    async def check(self, identifier: str) -> RateDecision: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


def _reset_message(limit: int, reset_ms: int) -> str:
    minutes = max(1, math.ceil((reset_ms - _now_ms()) / 60_000))
    hours = minutes // 60
    if hours > 0:
        wait = f"{hours} hour{'s' if hours > 1 else ''}"
    else:
        wait = f"{minutes} minute{'s' if minutes > 1 else ''}"
    return f"Rate limit exceeded. You've used all {limit} free generations. Try again in {wait}."


class DisabledRateGate:
    """Admit everything; used when no storage is configured."""

    async def check(self, identifier: str) -> RateDecision:
        return RateDecision(success=True, limit=999, remaining=999, reset=_now_ms() + _DAY_MS)


class WindowRateGate:
    """Moving-window limit per client identifier."""

    def __init__(self, storage_uri: str, limit: str = "3/day", prefix: str = "vibecard:ratelimit") -> None:
        if not storage_uri.startswith("async+"):
            storage_uri = f"async+{storage_uri}"
        self.item = parse(limit)
        self.prefix = prefix
        self._limiter = MovingWindowRateLimiter(storage_from_string(storage_uri))

    async def check(self, identifier: str) -> RateDecision:
        limit = self.item.amount
        try:
            admitted = await self._limiter.hit(self.item, self.prefix, identifier)
            stats = await self._limiter.get_window_stats(self.item, self.prefix, identifier)
        except Exception:
            logger.warning("Rate limit check failed, admitting request", exc_info=True)
            return RateDecision(success=True, limit=limit, remaining=0, reset=_now_ms() + _DAY_MS)

        reset = int(stats.reset_time * 1000)
        if not admitted:
            return RateDecision(
                success=False,
                limit=limit,
                remaining=0,
                reset=reset,
                error=_reset_message(limit, reset),
            )
        return RateDecision(success=True, limit=limit, remaining=stats.remaining, reset=reset)


def build_rate_gate(storage_uri: str | None, limit: str, prefix: str) -> RateGate:
    if not storage_uri:
        logger.warning(
            "RATE_LIMIT_STORAGE_URI not set. Rate limiting is DISABLED. "
            "This is fine for development but dangerous in production."
        )
        return DisabledRateGate()
    return WindowRateGate(storage_uri, limit, prefix)
