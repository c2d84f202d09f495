"""
ModalisCache — Disabled tier.

``create_cache_backend("null")`` puts this in place of a tier that is
switched off: reads always miss and writes vanish, so ``RenderCache``
keeps one code path whatever the configuration.
"""

from __future__ import annotations

from typing import Any, Optional

from ..core import CacheBackend, CacheEntry, CacheStats


class NullBackend(CacheBackend):
    """Tier that stores nothing; it only counts what it was asked to do."""

    __slots__ = ("_stats",)

    def __init__(self):
        self._stats = CacheStats(backend="null")

    @property
    def name(self) -> str:
        return "null"

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def get(self, key: str) -> Optional[CacheEntry]:
        self._stats.misses += 1
        return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None, namespace: str = "default") -> None:
        self._stats.sets += 1

    async def delete(self, key: str) -> bool:
        return False

    async def delete_by_prefix(self, prefix: str) -> int:
        return 0

    async def stats(self) -> CacheStats:
        return self._stats
