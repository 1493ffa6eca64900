from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

import numpy as np

from resumefit.config import JD_CACHE_MAX_DEFAULT, JD_CACHE_TTL_SECONDS_DEFAULT

logger = logging.getLogger(__name__)


def content_key(normalized_text: str) -> str:
    """SHA-256 of the normalized job-description text."""
    return hashlib.sha256((normalized_text or "").encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    key: str
    vector: np.ndarray
    inserted_at: float


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0
    shared_inflight: int = 0


class JDEmbeddingCache:
    """
    Bounded, time-expiring memo of job-description embeddings.

    - TTL is checked lazily on lookup; an expired entry is deleted and reported as a miss.
    - On insert beyond capacity, the entry with the oldest inserted_at is evicted.
      Hits do NOT refresh inserted_at unless refresh_on_hit=True, so the default is
      FIFO-by-insertion rather than least-recently-used.
    - get_or_compute() is single-flight per key: concurrent callers for the same JD
      await one provider call instead of issuing duplicates. A failed computation is
      propagated to every waiter and nothing is cached. The computation runs as its
      own task, so a cancelled caller leaves it running for the remaining waiters
      (and the result is still cached).

    Per-process only. The cache affects latency, never the computed score.
    """

    def __init__(
            self,
            *,
            max_entries: int = JD_CACHE_MAX_DEFAULT,
            ttl_seconds: float = JD_CACHE_TTL_SECONDS_DEFAULT,
            refresh_on_hit: bool = False,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max = max_entries
        self._ttl = float(ttl_seconds)
        self._refresh_on_hit = refresh_on_hit
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, asyncio.Future] = {}
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    @property
    def max_entries(self) -> int:
        return self._max

    def get(self, key: str) -> Optional[np.ndarray]:
        hit = self._entries.get(key)
        if hit is None:
            self.stats.misses += 1
            return None
        now = self._clock()
        if now - hit.inserted_at > self._ttl:
            del self._entries[key]
            self.stats.expirations += 1
            self.stats.misses += 1
            logger.debug("JD embedding cache expired %s", key[:12])
            return None
        self.stats.hits += 1
        if self._refresh_on_hit:
            self._entries[key] = CacheEntry(key=key, vector=hit.vector, inserted_at=now)
        return hit.vector

    def put(self, key: str, vector: np.ndarray) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(key=key, vector=vector, inserted_at=self._clock())
        if len(self._entries) > self._max:
            self._evict_oldest()

    def _evict_oldest(self) -> None:
        # min() keeps the first of equal timestamps, i.e. the earliest inserted.
        oldest = min(self._entries.values(), key=lambda e: e.inserted_at)
        del self._entries[oldest.key]
        self.stats.evictions += 1
        logger.debug("JD embedding cache evicted %s", oldest.key[:12])

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[np.ndarray]]) -> np.ndarray:
        cached = self.get(key)
        if cached is not None:
            logger.debug("JD embedding cache hit %s", key[:12])
            return cached

        task = self._inflight.get(key)
        if task is not None:
            self.stats.shared_inflight += 1
            logger.debug("JD embedding cache joined in-flight %s", key[:12])
        else:
            logger.debug("JD embedding cache miss %s", key[:12])
            task = asyncio.ensure_future(self._compute_and_store(key, compute))
            task.add_done_callback(_consume_outcome)
            self._inflight[key] = task
        # Each caller waits on the shared task through its own shield: cancelling one
        # caller stops its wait, not the computation the others are waiting for.
        return await asyncio.shield(task)

    async def _compute_and_store(self, key: str, compute: Callable[[], Awaitable[np.ndarray]]) -> np.ndarray:
        try:
            vector = await compute()
            self.put(key, vector)
            return vector
        finally:
            self._inflight.pop(key, None)


def _consume_outcome(task: "asyncio.Future") -> None:
    # Every waiter may have gone away; retrieve the exception so it is not reported as unhandled.
    if not task.cancelled():
        task.exception()
