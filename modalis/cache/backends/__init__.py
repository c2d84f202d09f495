"""
ModalisCache Backends — Storage implementations for the two tiers.
"""

from .memory import MemoryBackend
from .redis import RedisBackend
from .null import NullBackend

__all__ = [
    "MemoryBackend",
    "RedisBackend",
    "NullBackend",
]
