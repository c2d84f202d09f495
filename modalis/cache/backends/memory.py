"""
ModalisCache — In-process backend (the fast tier).

Entries live in one OrderedDict whose order is the eviction order: LRU
moves an entry to the end on every hit, FIFO leaves it where it was
inserted. The TTL policy drops the entry that expires soonest.

Each namespace (cache group) keeps the set of its keys, so
``flush_group`` drops a group without walking the whole store. Expired
entries are dropped lazily on read and by a background sweeper driven by
an expiry heap.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict, defaultdict
from heapq import heappop, heappush
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ..core import CacheBackend, CacheEntry, CacheStats, EvictionPolicy

logger = logging.getLogger("modalis.cache.memory")


class MemoryBackend(CacheBackend):
    """
    Bounded in-process tier guarded by a single ``asyncio.Lock``.

    Example:
        fast = MemoryBackend(max_size=500, eviction_policy="lru")
        await fast.initialize()
        await fast.set("modalis:block_42", payload, ttl=3600, namespace="modalis")
    """

    __slots__ = (
        "_entries",
        "_groups",
        "_expiry_heap",
        "_lock",
        "_policy",
        "_capacity",
        "_stats",
        "_started",
        "_sweep_every",
        "_sweeper",
    )

    def __init__(
        self,
        max_size: int = 10000,
        eviction_policy: str = "lru",
        sweep_interval: float = 30.0,
    ):
        self._capacity = max_size
        self._policy = EvictionPolicy(eviction_policy)
        self._sweep_every = sweep_interval

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._groups: Dict[str, Set[str]] = defaultdict(set)
        # (expires_at, key); stale pairs are skipped when popped
        self._expiry_heap: List[Tuple[float, str]] = []
        self._lock = asyncio.Lock()

        self._stats = CacheStats(backend="memory", max_size=max_size)
        self._started = time.monotonic()
        self._sweeper: Optional[asyncio.Task] = None

    @property
    def name(self) -> str:
        return f"memory:{self._policy.value}"

    @property
    def supports_group_flush(self) -> bool:
        return True

    async def initialize(self) -> None:
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._started = time.monotonic()
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def shutdown(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
        async with self._lock:
            self._entries.clear()
            self._groups.clear()
            self._expiry_heap.clear()

    async def get(self, key: str) -> Optional[CacheEntry]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired:
                self._drop(key)
                entry = None
            if entry is None:
                self._stats.misses += 1
                return None

            if self._policy is EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            entry.touch()
            self._stats.hits += 1
            return entry

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        namespace: str = "default",
    ) -> None:
        expires_at = time.monotonic() + ttl if ttl is not None and ttl > 0 else None

        async with self._lock:
            # A rewrite may move the key to another group
            self._drop(key)
            while self._entries and len(self._entries) >= self._capacity:
                self._drop(self._victim())
                self._stats.evictions += 1

            self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at, namespace=namespace)
            self._groups[namespace].add(key)
            if expires_at is not None:
                heappush(self._expiry_heap, (expires_at, key))
            self._stats.sets += 1

    async def delete(self, key: str) -> bool:
        async with self._lock:
            removed = self._drop_all((key,))
        return removed > 0

    async def delete_by_prefix(self, prefix: str) -> int:
        async with self._lock:
            return self._drop_all([k for k in self._entries if k.startswith(prefix)])

    async def flush_group(self, namespace: str) -> int:
        async with self._lock:
            return self._drop_all(list(self._groups.get(namespace, ())))

    async def stats(self) -> CacheStats:
        self._stats.size = len(self._entries)
        self._stats.uptime_seconds = time.monotonic() - self._started
        return self._stats

    # ── Lock-held helpers ────────────────────────────────────────────

    def _drop(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        group = self._groups.get(entry.namespace)
        if group is not None:
            group.discard(key)
            if not group:
                del self._groups[entry.namespace]
        return True

    def _drop_all(self, keys: Iterable[str]) -> int:
        removed = sum(1 for key in keys if self._drop(key))
        self._stats.deletes += removed
        return removed

    def _victim(self) -> str:
        if self._policy is EvictionPolicy.TTL:
            expiring = [(e.expires_at, k) for k, e in self._entries.items() if e.expires_at is not None]
            if expiring:
                return min(expiring)[1]
        # Front of the OrderedDict: least recent (LRU) or oldest (FIFO)
        return next(iter(self._entries))

    def _purge_expired(self) -> int:
        now = time.monotonic()
        purged = 0
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            _, key = heappop(self._expiry_heap)
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired and self._drop(key):
                purged += 1
        self._stats.evictions += purged
        return purged

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_every)
            async with self._lock:
                purged = self._purge_expired()
            if purged:
                logger.debug(f"Swept {purged} expired render entries")
