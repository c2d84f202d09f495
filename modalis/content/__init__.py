"""
Content store collaborator: fragment models, providers, cached lookups.
"""

from .models import (
    AccessPolicy,
    ContentProvider,
    Fragment,
    FragmentStatus,
    InMemoryContentProvider,
    is_renderable,
)
from .store import FragmentStore

__all__ = [
    "AccessPolicy",
    "ContentProvider",
    "Fragment",
    "FragmentStatus",
    "FragmentStore",
    "InMemoryContentProvider",
    "is_renderable",
]
