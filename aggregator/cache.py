"""Cache-aside layer with TTL freshness and single-flight fetches.

AsyncTTLCache keeps a bounded, least-recently-used set of entries. A read of
a fresh entry never touches upstream. A miss or an expired entry starts one
fetch per key; concurrent readers of the same key await that fetch and
receive its result or its error. The previous entry is replaced only after a
fetch succeeds, and failures are never stored.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog
from cachetools import LRUCache

logger = structlog.get_logger()

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value with its insertion time and time-to-live.

    Attributes:
        value: Cached value, replaced wholesale on refresh
        created_at: Clock reading when the value was stored
        ttl: Freshness window in seconds
    """

    value: V
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        """Return True while the entry is within its TTL."""
        return now - self.created_at < self.ttl


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    """Mark a failed fetch as observed even when every waiter was cancelled."""
    if not task.cancelled():
        task.exception()


class AsyncTTLCache(Generic[V]):
    """Bounded keyed cache for async producers.

    Args:
        maxsize: Maximum number of entries; least recently used are evicted
        ttl: Default freshness window in seconds
        clock: Monotonic clock, injectable for tests
        name: Label used in log events
    """

    def __init__(
        self,
        maxsize: int,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self._entries: LRUCache[Hashable, CacheEntry[V]] = LRUCache(maxsize=maxsize)
        self._in_flight: dict[Hashable, asyncio.Task[V]] = {}
        self._ttl = ttl
        self._clock = clock
        self._name = name

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def maxsize(self) -> int:
        return int(self._entries.maxsize)

    async def get_or_fetch(
        self,
        key: Hashable,
        producer: Callable[[], Awaitable[V]],
        ttl: float | None = None,
    ) -> V:
        """Return the fresh value for key, fetching it at most once concurrently.

        Args:
            key: Cache key
            producer: Coroutine factory producing a fresh value
            ttl: Override of the default TTL for the stored entry

        Returns:
            Cached or freshly produced value

        Raises:
            Exception: Whatever the in-flight producer raised, replayed to
                every waiter of that fetch
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            logger.debug(
                "cache_miss",
                cache=self._name,
                key=key,
                expired=entry is not None,
            )
            task = asyncio.ensure_future(self._refresh(key, producer, ttl))
            task.add_done_callback(_retrieve_exception)
            self._in_flight[key] = task
        else:
            logger.debug("cache_join_in_flight", cache=self._name, key=key)

        # Shield so one cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(task)

    async def _refresh(
        self,
        key: Hashable,
        producer: Callable[[], Awaitable[V]],
        ttl: float | None,
    ) -> V:
        try:
            value = await producer()
        except Exception:
            logger.warning("cache_refresh_failed", cache=self._name, key=key)
            raise
        finally:
            self._in_flight.pop(key, None)

        self._entries[key] = CacheEntry(
            value=value,
            created_at=self._clock(),
            ttl=self._ttl if ttl is None else ttl,
        )
        return value

    def peek(self, key: Hashable) -> V | None:
        """Return the stored value for key, fresh or stale, without fetching."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def invalidate(self, key: Hashable) -> None:
        """Drop the stored entry for key, if any."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all stored entries. In-flight fetches still complete and store."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        """Return True if key holds a fresh entry."""
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and entry.is_fresh(self._clock())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["AsyncTTLCache", "CacheEntry"]
