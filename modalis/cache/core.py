"""
ModalisCache — Tier contract and shared value types.

Both tiers of the render cache (the in-process fast tier and the
persistent durable tier) implement ``CacheBackend`` and hand back
``CacheEntry`` objects, so ``RenderCache`` never needs to know which
storage sits underneath.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable


class EvictionPolicy(str, Enum):
    """Which entry the fast tier drops when it is full."""
    LRU = "lru"
    FIFO = "fifo"
    TTL = "ttl"


@dataclass(slots=True)
class CacheEntry:
    """
    A stored value as read back from one tier.

    ``expires_at`` is on the ``time.monotonic()`` clock; None never expires.
    """
    key: str
    value: Any
    expires_at: Optional[float] = None
    namespace: str = "default"
    created_at: float = field(default_factory=time.monotonic)
    access_count: int = 0

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    @property
    def ttl_remaining(self) -> Optional[float]:
        """Seconds left before expiry (never negative), or None."""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def touch(self) -> None:
        self.access_count += 1


@dataclass
class CacheStats:
    """Per-tier counters, exposed through ``RenderCache.stats()``."""
    backend: str = "unknown"
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    errors: int = 0
    size: int = 0
    max_size: int = 0
    uptime_seconds: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Hits as a percentage of lookups (0.0 before the first lookup)."""
        lookups = self.hits + self.misses
        return (self.hits / lookups) * 100.0 if lookups else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            name: getattr(self, name)
            for name in ("backend", "hits", "misses", "sets", "deletes", "evictions", "errors", "size", "max_size")
        }
        data["hit_rate"] = round(self.hit_rate, 2)
        data["uptime_seconds"] = round(self.uptime_seconds, 2)
        return data


@dataclass
class CacheConfig:
    """
    Render cache configuration.

    Loaded via ``ConfigLoader.get_cache_config()`` and
    :func:`modalis.cache.factory.build_cache_config`.
    """
    enabled: bool = True
    fast_backend: str = "memory"       # "memory", "null"
    durable_backend: str = "memory"    # "memory", "redis", "null"
    default_ttl: int = 12 * 60 * 60    # Static default: 12 hours
    ttl_override: Optional[int] = None # Wins over default_ttl when set
    fragment_object_ttl: int = 300     # Fragment lookup cache, independent TTL
    namespace: str = "modalis"         # Shared group for both tiers
    key_prefix: str = "modalis:"
    max_size: int = 10000              # Memory tier capacity
    eviction_policy: str = "lru"
    serializer: str = "json"           # "json", "msgpack"

    # Redis-specific
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 10
    redis_socket_timeout: float = 5.0
    redis_socket_connect_timeout: float = 5.0

    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "enabled": self.enabled,
            "fast_backend": self.fast_backend,
            "durable_backend": self.durable_backend,
            "default_ttl": self.default_ttl,
            "ttl_override": self.ttl_override,
            "fragment_object_ttl": self.fragment_object_ttl,
            "namespace": self.namespace,
            "key_prefix": self.key_prefix,
            "max_size": self.max_size,
            "eviction_policy": self.eviction_policy,
            "serializer": self.serializer,
            "redis_url": self.redis_url,
            "redis_max_connections": self.redis_max_connections,
            "log_level": self.log_level,
        }



@runtime_checkable
class CacheSerializer(Protocol):
    """Turns render payloads into bytes for the durable tier and back."""

    def serialize(self, value: Any) -> bytes:
        ...

    def deserialize(self, data: bytes) -> Any:
        ...


class CacheBackend(ABC):
    """
    Storage contract for one render cache tier.

    A tier enforces its own TTLs and keeps at most one entry per key.
    Deleting by key prefix is required: it is how ``clear_all()`` reaches
    tiers without cache groups. Tiers that do have groups advertise it
    through ``supports_group_flush`` and implement ``flush_group``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label used in log lines and stats."""

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections or start background work."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Release everything ``initialize()`` acquired."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """Live entry for ``key``; None when absent or expired."""

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
        namespace: str = "default",
    ) -> None:
        """
        Store ``value`` under ``key``, replacing any previous entry.

        Args:
            ttl: Lifetime in seconds; None or 0 stores without expiry
            namespace: Cache group the entry belongs to
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Drop ``key``; True when something was removed."""

    @abstractmethod
    async def delete_by_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix`` and return how many."""

    @abstractmethod
    async def stats(self) -> CacheStats:
        ...

    @property
    def supports_group_flush(self) -> bool:
        return False

    async def flush_group(self, namespace: str) -> int:
        """Drop a whole cache group in one operation."""
        raise NotImplementedError(f"{self.name} has no cache groups")


__all__ = [
    "CacheBackend",
    "CacheConfig",
    "CacheEntry",
    "CacheSerializer",
    "CacheStats",
    "EvictionPolicy",
]
