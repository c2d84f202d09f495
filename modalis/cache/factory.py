"""
ModalisCache — Backend factories.

Builds ``CacheConfig`` from ``ConfigLoader`` output and the fast/durable
backends (plus the ``RenderCache`` around them) from that config.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..faults import CacheConfigFault
from .backends.memory import MemoryBackend
from .backends.null import NullBackend
from .core import CacheBackend, CacheConfig
from .render_cache import RenderCache, TtlProvider

logger = logging.getLogger("modalis.cache.factory")


def create_cache_backend(backend_type: str, config: CacheConfig) -> CacheBackend:
    """
    Factory: create one tier's backend.

    Args:
        backend_type: "memory", "redis" or "null"
        config: CacheConfig instance
    """
    backend_type = backend_type.lower()

    if backend_type == "memory":
        return MemoryBackend(
            max_size=config.max_size,
            eviction_policy=config.eviction_policy,
        )

    elif backend_type == "redis":
        from .backends.redis import RedisBackend
        from .serializers import get_serializer

        return RedisBackend(
            url=config.redis_url,
            max_connections=config.redis_max_connections,
            socket_timeout=config.redis_socket_timeout,
            connect_timeout=config.redis_socket_connect_timeout,
            serializer=get_serializer(config.serializer),
        )

    elif backend_type == "null":
        return NullBackend()

    else:
        raise CacheConfigFault(reason=f"Unknown cache backend: {backend_type}")


def create_render_cache(config: CacheConfig, ttl_provider: Optional[TtlProvider] = None) -> RenderCache:
    """Factory: fast + durable backends wrapped in a RenderCache."""
    if config.fast_backend.lower() == "redis":
        raise CacheConfigFault(reason="the fast tier must be in-process (memory or null)")

    fast = create_cache_backend(config.fast_backend, config)
    durable = create_cache_backend(config.durable_backend, config)
    return RenderCache(fast, durable, config=config, ttl_provider=ttl_provider)


def build_cache_config(config_dict: Dict[str, Any]) -> CacheConfig:
    """
    Build CacheConfig from dictionary (e.g., from ConfigLoader).

    Raises:
        CacheConfigFault: non-positive TTLs
    """
    defaults = CacheConfig()
    config = CacheConfig(
        enabled=config_dict.get("enabled", defaults.enabled),
        fast_backend=config_dict.get("fast_backend", defaults.fast_backend),
        durable_backend=config_dict.get("durable_backend", defaults.durable_backend),
        default_ttl=config_dict.get("default_ttl", defaults.default_ttl),
        ttl_override=config_dict.get("ttl_override", defaults.ttl_override),
        fragment_object_ttl=config_dict.get("fragment_object_ttl", defaults.fragment_object_ttl),
        namespace=config_dict.get("namespace", defaults.namespace),
        key_prefix=config_dict.get("key_prefix", defaults.key_prefix),
        max_size=config_dict.get("max_size", defaults.max_size),
        eviction_policy=config_dict.get("eviction_policy", defaults.eviction_policy),
        serializer=config_dict.get("serializer", defaults.serializer),
        redis_url=config_dict.get("redis_url", defaults.redis_url),
        redis_max_connections=config_dict.get("redis_max_connections", defaults.redis_max_connections),
        redis_socket_timeout=config_dict.get("redis_socket_timeout", defaults.redis_socket_timeout),
        redis_socket_connect_timeout=config_dict.get(
            "redis_socket_connect_timeout", defaults.redis_socket_connect_timeout
        ),
        log_level=config_dict.get("log_level", defaults.log_level),
    )

    if not isinstance(config.default_ttl, int) or config.default_ttl <= 0:
        raise CacheConfigFault(reason=f"default_ttl must be a positive integer, got {config.default_ttl!r}")
    if config.ttl_override is not None and (not isinstance(config.ttl_override, int) or config.ttl_override <= 0):
        raise CacheConfigFault(reason=f"ttl_override must be a positive integer, got {config.ttl_override!r}")

    return config
