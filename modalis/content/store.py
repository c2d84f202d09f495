"""
FragmentStore — content provider reads with a short-lived object cache.

Fragment lookups are cached on the fast tier under their own key and a
fixed TTL, independent of the render TTL. ``RenderCache.delete()`` removes
this entry together with the render entries.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..cache.core import CacheBackend
from ..cache.key_builder import FragmentKeyBuilder
from .models import ContentProvider, Fragment

logger = logging.getLogger("modalis.content")


class FragmentStore:
    def __init__(
        self,
        provider: ContentProvider,
        cache: Optional[CacheBackend] = None,
        key_builder: Optional[FragmentKeyBuilder] = None,
        ttl: int = 300,
        namespace: str = "modalis",
    ):
        self.provider = provider
        self.cache = cache
        self.keys = key_builder or FragmentKeyBuilder()
        self.ttl = ttl
        self.namespace = namespace

    async def get(self, fragment_id: int) -> Optional[Fragment]:
        """
        Fragment by id; only found fragments are cached.

        A failing provider counts as "not found".
        """
        key = self.keys.fragment_object_key(fragment_id)

        if self.cache is not None:
            try:
                entry = await self.cache.get(key)
                if entry is not None:
                    return Fragment.from_dict(entry.value)
            except Exception as e:
                logger.warning(f"Fragment object cache read failed for '{key}': {e}")

        try:
            fragment = self.provider.get_fragment(fragment_id)
        except Exception as e:
            logger.warning(f"Content provider failed for fragment {fragment_id}: {e}")
            return None

        if fragment is not None and self.cache is not None:
            try:
                await self.cache.set(key, fragment.to_dict(), ttl=self.ttl, namespace=self.namespace)
            except Exception as e:
                logger.warning(f"Fragment object cache write failed for '{key}': {e}")

        return fragment
