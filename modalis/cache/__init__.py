"""
ModalisCache — two-tier render cache.

- ``MemoryBackend`` as the fast tier, ``RedisBackend`` (or memory) as the
  durable tier
- ``RenderCache`` for read-through / write-through of render results
- ``CacheInvalidator`` for content store events
"""

from .backends.memory import MemoryBackend
from .backends.null import NullBackend
from .backends.redis import RedisBackend
from .core import CacheBackend, CacheConfig, CacheEntry, CacheSerializer, CacheStats, EvictionPolicy
from .factory import build_cache_config, create_cache_backend, create_render_cache
from .invalidation import CacheInvalidator
from .key_builder import FragmentKeyBuilder
from .render_cache import RenderCache
from .serializers import JsonCacheSerializer, MsgpackCacheSerializer, get_serializer

__all__ = [
    "CacheBackend",
    "CacheConfig",
    "CacheEntry",
    "CacheInvalidator",
    "CacheSerializer",
    "CacheStats",
    "EvictionPolicy",
    "FragmentKeyBuilder",
    "JsonCacheSerializer",
    "MemoryBackend",
    "MsgpackCacheSerializer",
    "NullBackend",
    "RedisBackend",
    "RenderCache",
    "build_cache_config",
    "create_cache_backend",
    "create_render_cache",
    "get_serializer",
]
