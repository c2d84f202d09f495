"""
ModalisCache — Two-tier render cache.

Read path:  fast → durable (re-prime fast on hit) → miss
Write path: write-through to both tiers, same key, same namespace
Delete:     both tiers + the fragment object entry for the same id
Clear:      group flush on the fast tier, prefix scan on the durable tier

Caching is an optimization: every tier error is logged and degrades to a
miss (reads) or a no-op (writes). Nothing here raises to the caller. No
stampede protection: concurrent misses render and write independently.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Optional

from ..render.result import RenderResult
from .core import CacheBackend, CacheConfig
from .key_builder import FragmentKeyBuilder

logger = logging.getLogger("modalis.cache")

# default_ttl -> override or None
TtlProvider = Callable[[int], Optional[int]]


class RenderCache:
    """
    Composite render-result cache keyed by fragment id.

    The effective TTL is resolved once per processing unit (first use
    after construction or ``begin_unit()``): a per-call provider, else
    the configured override, else the static default.
    """

    def __init__(
        self,
        fast: CacheBackend,
        durable: CacheBackend,
        config: Optional[CacheConfig] = None,
        ttl_provider: Optional[TtlProvider] = None,
        key_builder: Optional[FragmentKeyBuilder] = None,
    ):
        self.fast = fast
        self.durable = durable
        self.config = config or CacheConfig()
        self.ttl_provider = ttl_provider
        self.keys = key_builder or FragmentKeyBuilder(prefix=self.config.key_prefix)
        self._resolved_ttl: Optional[int] = None

    async def initialize(self) -> None:
        await self.fast.initialize()
        await self.durable.initialize()
        logger.info(f"Render cache ready: fast={self.fast.name} durable={self.durable.name}")

    async def shutdown(self) -> None:
        await self.fast.shutdown()
        await self.durable.shutdown()

    # ── TTL ──────────────────────────────────────────────────────────

    def begin_unit(self) -> None:
        """Start a new processing unit; the TTL is re-resolved on next use."""
        self._resolved_ttl = None

    @property
    def effective_ttl(self) -> int:
        if self._resolved_ttl is None:
            default = self.config.default_ttl
            override = self.config.ttl_override
            if self.ttl_provider is not None:
                try:
                    override = self.ttl_provider(default)
                except Exception as e:
                    logger.warning(f"TTL provider failed, using configured TTL: {e}")
            ttl = override if override is not None else default
            self._resolved_ttl = int(ttl)
        return self._resolved_ttl

    # ── Operations ───────────────────────────────────────────────────

    async def get(self, fragment_id: int) -> Optional[RenderResult]:
        """Cached result for ``fragment_id``, or None on a miss."""
        if not self.config.enabled:
            return None

        key = self.keys.render_key(fragment_id)

        try:
            entry = await self.fast.get(key)
        except Exception as e:
            logger.warning(f"Fast tier GET failed for '{key}': {e}")
            entry = None

        if entry is not None:
            result = self._decode(key, entry.value)
            if result is not None:
                logger.debug(f"Render cache hit (fast): {key}")
                return result

        try:
            entry = await self.durable.get(key)
        except Exception as e:
            logger.warning(f"Durable tier GET failed for '{key}': {e}")
            return None

        if entry is None:
            logger.debug(f"Render cache miss: {key}")
            return None

        result = self._decode(key, entry.value)
        if result is None:
            return None

        remaining = entry.ttl_remaining
        if remaining is None:
            ttl = self.effective_ttl
        elif remaining <= 0:
            logger.debug(f"Render cache miss (durable entry expiring): {key}")
            return None
        else:
            # Whole seconds, never 0: the fast tier reads 0 as "no expiry"
            ttl = max(1, math.ceil(remaining))
        await self._safe_set(self.fast, key, result.to_dict(), ttl)
        logger.debug(f"Render cache hit (durable), promoted to fast tier: {key}")
        return result

    async def set(self, fragment_id: int, result: RenderResult, ttl: Optional[int] = None) -> None:
        """Write-through to both tiers."""
        if not self.config.enabled:
            return

        key = self.keys.render_key(fragment_id)
        ttl = ttl if ttl is not None else self.effective_ttl
        payload = result.to_dict()

        await self._safe_set(self.fast, key, payload, ttl)
        await self._safe_set(self.durable, key, payload, ttl)

    async def delete(self, fragment_id: int) -> bool:
        """
        Invalidate one fragment in both tiers plus its fragment object entry.

        Returns True if anything was removed.
        """
        render_key = self.keys.render_key(fragment_id)
        object_key = self.keys.fragment_object_key(fragment_id)

        removed = False
        for backend, key in (
            (self.fast, render_key),
            (self.durable, render_key),
            (self.fast, object_key),
        ):
            try:
                removed = await backend.delete(key) or removed
            except Exception as e:
                logger.warning(f"{backend.name} DELETE failed for '{key}': {e}")
        return removed

    async def clear_all(self) -> int:
        """
        Drop every cached render.

        Returns:
            Number of durable-tier entries deleted.
        """
        try:
            if self.fast.supports_group_flush:
                await self.fast.flush_group(self.config.namespace)
            else:
                await self.fast.delete_by_prefix(self.keys.prefix)
        except Exception as e:
            logger.warning(f"Fast tier flush failed: {e}")

        try:
            count = await self.durable.delete_by_prefix(self.keys.prefix)
        except Exception as e:
            logger.warning(f"Durable tier prefix delete failed: {e}")
            return 0

        logger.info(f"Render cache cleared: {count} durable entries removed")
        return count

    async def stats(self) -> Dict[str, Any]:
        fast = await self.fast.stats()
        durable = await self.durable.stats()
        return {"fast": fast.to_dict(), "durable": durable.to_dict(), "ttl": self.effective_ttl}

    # ── Helpers ──────────────────────────────────────────────────────

    async def _safe_set(self, backend: CacheBackend, key: str, payload: Dict[str, Any], ttl: int) -> None:
        try:
            await backend.set(key, payload, ttl=ttl, namespace=self.config.namespace)
        except Exception as e:
            logger.warning(f"{backend.name} SET failed for '{key}': {e}")

    def _decode(self, key: str, value: Any) -> Optional[RenderResult]:
        try:
            result = RenderResult.from_payload(value)
        except Exception as e:
            logger.warning(f"Discarding unreadable cache payload for '{key}': {e}")
            return None
        if result is None:
            logger.warning(f"Discarding unreadable cache payload for '{key}'")
        return result
