"""
FragmentService — request façade over store, renderer and render cache.

One call per popup request: validate the raw id, serve from the cache
when possible, otherwise render and cache. Callers only ever see the
generic "Invalid request." / "Content not available." messages.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .cache.factory import build_cache_config, create_render_cache
from .cache.render_cache import RenderCache, TtlProvider
from .config import ConfigLoader, RenderConfig, configure_logging
from .content.models import ContentProvider, Fragment, is_renderable
from .content.store import FragmentStore
from .faults import Fault, FragmentNotFoundFault, InvalidFragmentIdFault
from .render.renderer import FragmentRenderer

logger = logging.getLogger("modalis.service")


def parse_fragment_id(raw_id: Any, max_id: int = 2147483647) -> int:
    """
    Validate a client-supplied fragment id.

    Raises:
        InvalidFragmentIdFault: not a positive integer up to ``max_id``
    """
    if isinstance(raw_id, bool):
        raise InvalidFragmentIdFault(raw_id)
    if isinstance(raw_id, int):
        value = raw_id
    elif isinstance(raw_id, str) and raw_id.strip().isascii() and raw_id.strip().isdigit():
        value = int(raw_id.strip())
    else:
        raise InvalidFragmentIdFault(raw_id)
    if not 0 < value <= max_id:
        raise InvalidFragmentIdFault(raw_id)
    return value


class FragmentService:
    def __init__(
        self,
        renderer: FragmentRenderer,
        cache: RenderCache,
        store: Optional[FragmentStore] = None,
        render_config: Optional[RenderConfig] = None,
    ):
        self.renderer = renderer
        self.cache = cache
        self.store = store
        self.render_config = render_config or renderer.render_config

    async def _fetch(self, fragment_id: int) -> Optional[Fragment]:
        if self.store is not None:
            return await self.store.get(fragment_id)
        return self.renderer.get_fragment(fragment_id)

    def _title(self, fragment: Fragment) -> str:
        return fragment.title or self.render_config.default_title

    async def get_payload(self, raw_id: Any) -> Dict[str, Any]:
        """
        Wire payload for one fragment plus ``title`` and ``cached``.

        Raises:
            InvalidFragmentIdFault: malformed id
            FragmentNotFoundFault: fragment not renderable
        """
        fragment_id = parse_fragment_id(raw_id, self.render_config.max_fragment_id)
        self.cache.begin_unit()

        fragment = await self._fetch(fragment_id)
        if not is_renderable(fragment, self.renderer.access_policy):
            raise FragmentNotFoundFault(fragment_id)

        cached = await self.cache.get(fragment_id)
        if cached is not None and cached.html:
            payload = cached.to_dict()
            payload.update(title=self._title(fragment), cached=True)
            return payload

        result = self.renderer.render_fragment(fragment, fragment_id=fragment_id)
        if result.html:
            await self.cache.set(fragment_id, result)

        payload = result.to_dict()
        payload.update(title=self._title(fragment), cached=False)
        return payload

    async def respond(self, raw_id: Any) -> Dict[str, Any]:
        """Transport envelope: ``{"success": bool, "data": ...}``."""
        try:
            return {"success": True, "data": await self.get_payload(raw_id)}
        except Fault as fault:
            logger.debug(f"Fragment request rejected: {fault!r}")
            return {"success": False, "data": fault.to_public_dict()}


def build_service(
    loader: ConfigLoader,
    provider: ContentProvider,
    ttl_provider: Optional[TtlProvider] = None,
    **collaborators: Any,
) -> FragmentService:
    """
    Wire a ``FragmentService`` from configuration.

    ``collaborators`` go to ``FragmentRenderer`` (pipeline, registries,
    style engine, URL filter, access policy...).
    """
    cache_config = build_cache_config(loader.get_cache_config())
    configure_logging(cache_config.log_level)

    cache = create_render_cache(cache_config, ttl_provider=ttl_provider)
    store = FragmentStore(
        provider,
        cache=cache.fast,
        key_builder=cache.keys,
        ttl=cache_config.fragment_object_ttl,
        namespace=cache_config.namespace,
    )
    render_config = loader.get_render_config()
    renderer = FragmentRenderer(
        provider,
        asset_config=loader.get_asset_config(),
        render_config=render_config,
        **collaborators,
    )
    return FragmentService(renderer, cache, store=store, render_config=render_config)
