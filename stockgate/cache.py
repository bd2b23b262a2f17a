# stockgate/cache.py
# Purpose: In-memory response cache shared by every API route.
# Why: Repeated identical queries within 10 minutes must not hit Twelve Data again.
# Pitfalls: Not persistent; resets if the process restarts. Two concurrent misses
#           for the same key both go upstream (no single-flight).

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from stockgate.observability import CACHE_LOOKUPS

logger = logging.getLogger("stockgate.cache")

DEFAULT_TTL_SEC = 600
DEFAULT_INTERVAL = "1day"


class ResponseCache:
    """Key -> JSON payload store with one fixed TTL for every entry.

    Expired entries are swept from the store at most once per TTL period, on the
    next set() after that period has passed. With max_items set, a full store
    evicts the entry closest to expiry.
    """

    def __init__(
        self,
        ttl_sec: float = DEFAULT_TTL_SEC,
        clock: Callable[[], float] = time.monotonic,
        max_items: int | None = None,
    ):
        self.ttl_sec = ttl_sec
        self.max_items = max_items
        self._clock = clock
        # store: key -> (expiry, data)
        self._store: dict[str, tuple[float, Any]] = {}
        self._next_sweep = clock() + ttl_sec

    def get(self, key: str) -> Any:
        """Return cached data if still fresh, else None."""
        entry = self._store.get(key)
        if entry is None:
            return None
        expiry, data = entry
        if self._clock() >= expiry:
            # expired
            self._store.pop(key, None)
            return None
        return data

    def set(self, key: str, data: Any) -> None:
        """Store data, replacing any previous entry for key."""
        now = self._clock()
        if now >= self._next_sweep:
            self.purge_expired()
            self._next_sweep = now + self.ttl_sec
        if self.max_items is not None and key not in self._store:
            while self._store and len(self._store) >= self.max_items:
                oldest = min(self._store, key=lambda k: self._store[k][0])
                self._store.pop(oldest, None)
        self._store[key] = (now + self.ttl_sec, data)

    def purge_expired(self) -> int:
        """Drop every expired entry; return how many went."""
        now = self._clock()
        dead = [k for k, (expiry, _) in self._store.items() if now >= expiry]
        for k in dead:
            self._store.pop(k, None)
        if dead:
            logger.debug("cache sweep dropped %d expired entries", len(dead))
        return len(dead)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        # live entries only; dead ones may linger until the next sweep
        now = self._clock()
        return sum(1 for expiry, _ in self._store.values() if now < expiry)


async def get_or_fetch(
    cache: ResponseCache,
    key: str,
    fetch: Callable[[], Awaitable[Any]],
    *,
    route: str,
) -> Any:
    """
    Cache-aside lookup:
      - hit  -> return the stored payload, no upstream call
      - miss -> await fetch(); store the result only if fetch() returned
    Exceptions from fetch() propagate untouched and leave the cache as it was.
    """
    hit = cache.get(key)
    if hit is not None:
        CACHE_LOOKUPS.labels(route=route, result="hit").inc()
        logger.debug("cache hit key=%s", key)
        return hit

    CACHE_LOOKUPS.labels(route=route, result="miss").inc()
    data = await fetch()
    cache.set(key, data)
    return data


# --------------------------------------------------------------------------------------
# Key derivation (one formula per route; keep these stable)
# --------------------------------------------------------------------------------------
def search_key(query: str) -> str:
    return f"search_{query}"


def top_performers_key() -> str:
    return "top_performers"


def quote_key(symbol: str) -> str:
    return f"quote_{symbol}"


def company_info_key(symbol: str) -> str:
    return f"company_info_{symbol}"


def historical_data_key(symbol: str, interval: str | None = None) -> str:
    return f"historical_data_{symbol}_{interval or DEFAULT_INTERVAL}"
