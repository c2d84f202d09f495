"""
ModalisCache — Invalidation listener for content store events.

Each hook re-reads the fragment from the content provider, so
shareability reflects the state at invalidation time. A fragment the
provider no longer knows is invalidated unconditionally. Failures are
logged and swallowed; TTL expiry is the backstop.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..content.models import ContentProvider, Fragment, FragmentStatus
from .render_cache import RenderCache

logger = logging.getLogger("modalis.cache.invalidation")


class CacheInvalidator:
    def __init__(self, cache: RenderCache, provider: ContentProvider):
        self.cache = cache
        self.provider = provider

    def _currently_shareable(self, fragment_id: int) -> bool:
        try:
            fragment = self.provider.get_fragment(fragment_id)
        except Exception as e:
            logger.warning(f"Could not re-read fragment {fragment_id}, invalidating anyway: {e}")
            return True
        return fragment is None or fragment.shareable

    async def _invalidate(self, fragment_id: int, reason: str) -> bool:
        if not self._currently_shareable(fragment_id):
            logger.debug(f"Fragment {fragment_id} not shareable, skipping invalidation ({reason})")
            return False
        try:
            await self.cache.delete(fragment_id)
        except Exception as e:
            logger.warning(f"Invalidation of fragment {fragment_id} failed ({reason}): {e}")
            return False
        logger.debug(f"Invalidated fragment {fragment_id} ({reason})")
        return True

    async def on_save(self, fragment_id: int) -> bool:
        """Content saved."""
        return await self._invalidate(fragment_id, "save")

    async def on_status_change(self, fragment_id: int, old_status: str, new_status: str) -> bool:
        """Status transition; only crossings of the public boundary count."""
        if old_status == new_status:
            return False
        if FragmentStatus.PUBLISH not in (old_status, new_status):
            return False
        return await self._invalidate(fragment_id, f"status {old_status} -> {new_status}")

    async def on_update(
        self,
        fragment_id: int,
        before: Optional[Fragment],
        after: Optional[Fragment],
    ) -> bool:
        """Update where the access-control attribute or status changed."""
        if before is None or after is None:
            return await self._invalidate(fragment_id, "update")
        if before.access_control == after.access_control and before.status == after.status:
            return False
        return await self._invalidate(fragment_id, "access or status update")
