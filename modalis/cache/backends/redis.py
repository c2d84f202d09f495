"""
ModalisCache — Redis backend (the durable tier).

Render payloads are encoded by a pluggable ``CacheSerializer`` and stored
under ``{key_prefix}{key}``. Expiry is read back with PTTL so a promoted
entry keeps millisecond-accurate lifetime in the fast tier.

Redis has no cache groups: ``supports_group_flush`` is False and
``RenderCache.clear_all()`` reaches this tier through ``delete_by_prefix``
(SCAN in batches, then one DEL).

Every client error is counted and re-raised as ``CacheBackendFault``, every
codec error as ``CacheSerializationFault``; ``RenderCache`` logs both and
carries on with a miss.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, List, Optional

from ...faults import CacheBackendFault, CacheConnectionFault, CacheSerializationFault
from ..core import CacheBackend, CacheEntry, CacheSerializer, CacheStats

logger = logging.getLogger("modalis.cache.redis")


class RedisBackend(CacheBackend):
    """
    Durable tier on redis-py's asyncio client.

    Pass ``client`` to reuse an existing connection (or a test double);
    otherwise ``initialize()`` builds a pooled client from ``url``.
    """

    __slots__ = (
        "_client",
        "_url",
        "_pool_options",
        "_key_prefix",
        "_codec",
        "_scan_batch",
        "_stats",
        "_connected_at",
    )

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        max_connections: int = 10,
        socket_timeout: float = 5.0,
        connect_timeout: float = 5.0,
        key_prefix: str = "",
        serializer: Optional[CacheSerializer] = None,
        client: Optional[Any] = None,
        scan_count: int = 1000,
    ):
        self._client = client
        self._url = url
        self._pool_options = {
            "max_connections": max_connections,
            "socket_timeout": socket_timeout,
            "socket_connect_timeout": connect_timeout,
            # Payloads are bytes produced by the codec
            "decode_responses": False,
        }
        self._key_prefix = key_prefix
        if serializer is None:
            from ..serializers import JsonCacheSerializer

            serializer = JsonCacheSerializer()
        self._codec = serializer
        self._scan_batch = scan_count
        self._stats = CacheStats(backend="redis")
        self._connected_at = time.monotonic()

    @property
    def name(self) -> str:
        return "redis"

    async def initialize(self) -> None:
        """Build the pooled client and check the server answers PING."""
        if self._client is not None:
            return

        import redis.asyncio as aioredis

        client = aioredis.from_url(self._url, **self._pool_options)
        try:
            await client.ping()
        except Exception as e:
            await client.aclose()
            logger.error(f"Durable tier unreachable at {self._url}: {e}")
            raise CacheConnectionFault(backend="redis", reason=str(e)) from e

        self._client = client
        self._connected_at = time.monotonic()
        logger.info(f"Durable tier connected: {self._url}")

    async def shutdown(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    # ── Operations ───────────────────────────────────────────────────

    async def get(self, key: str) -> Optional[CacheEntry]:
        stored_key = self._key_prefix + key
        raw = await self._call("get", key, lambda c: c.get(stored_key))
        if raw is None:
            self._stats.misses += 1
            return None
        # Milliseconds left; -1 means no expiry, -2 that the key just vanished
        pttl = await self._call("pttl", key, lambda c: c.pttl(stored_key))

        value = self._decode(key, raw)
        self._stats.hits += 1
        expires_at = time.monotonic() + pttl / 1000.0 if pttl and pttl > 0 else None
        return CacheEntry(key=key, value=value, expires_at=expires_at)

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        namespace: str = "default",
    ) -> None:
        data = self._encode(key, value)
        expiry = ttl if ttl is not None and ttl > 0 else None
        await self._call("set", key, lambda c: c.set(self._key_prefix + key, data, ex=expiry))
        self._stats.sets += 1

    async def delete(self, key: str) -> bool:
        removed = await self._call("delete", key, lambda c: c.delete(self._key_prefix + key))
        self._stats.deletes += removed
        return removed > 0

    async def delete_by_prefix(self, prefix: str) -> int:
        """SCAN ``{key_prefix}{prefix}*`` and delete every match in one DEL."""
        stored = await self._call(
            "delete_by_prefix", prefix, lambda c: self._scan(c, f"{self._key_prefix}{prefix}*")
        )
        if not stored:
            return 0
        removed = await self._call("delete_by_prefix", prefix, lambda c: c.delete(*stored))
        self._stats.deletes += removed
        return removed

    async def stats(self) -> CacheStats:
        self._stats.uptime_seconds = time.monotonic() - self._connected_at
        if self._client is not None:
            try:
                self._stats.size = await self._client.dbsize()
            except Exception as e:
                logger.debug(f"Durable tier size unavailable: {e}")
        return self._stats

    # ── Helpers ──────────────────────────────────────────────────────

    async def _call(self, operation: str, key: str, command: Callable[[Any], Awaitable[Any]]) -> Any:
        """Run one client command, translating any failure into a fault."""
        if self._client is None:
            self._stats.errors += 1
            raise CacheBackendFault(backend="redis", operation=operation, reason="not connected")
        try:
            return await command(self._client)
        except Exception as e:
            self._stats.errors += 1
            logger.debug(f"Redis {operation} failed for '{key}': {e}")
            raise CacheBackendFault(backend="redis", operation=operation, reason=str(e)) from e

    async def _scan(self, client: Any, match: str) -> List[Any]:
        found: List[Any] = []
        cursor = None
        while cursor != 0:
            cursor, batch = await client.scan(cursor=cursor or 0, match=match, count=self._scan_batch)
            found.extend(batch)
        return found

    def _encode(self, key: str, value: Any) -> bytes:
        try:
            return self._codec.serialize(value)
        except Exception as e:
            self._stats.errors += 1
            raise CacheSerializationFault(key=key, operation="serialize", reason=str(e)) from e

    def _decode(self, key: str, raw: bytes) -> Any:
        try:
            return self._codec.deserialize(raw)
        except Exception as e:
            self._stats.errors += 1
            raise CacheSerializationFault(key=key, operation="deserialize", reason=str(e)) from e
