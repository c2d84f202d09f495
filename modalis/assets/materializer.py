"""
Asset materializer — turns discovered handles into shippable assets.

Two steps:

1. ``filter_style_handles`` drops handles the host page already ships or
   that only make sense inside the editor.
2. ``materialize`` resolves each remaining handle through its registry to
   an absolute, versioned, filtered URL plus inline snippets.

A handle that cannot be resolved, or whose URL filter blows up, is skipped
with a warning; one bad asset never fails a render.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from ..config import AssetConfig
from ..faults import AssetResolutionFault
from .capture import OrderedHandleSet
from .registry import AssetKind, AssetRecord, AssetRegistry

logger = logging.getLogger("modalis.assets.materializer")

ABSOLUTE_URL_RE = re.compile(r"^(https?:)?//", re.IGNORECASE)
SAFE_SCHEMES = ("http", "https")
# RFC 3986 reserved characters minus the single quote, plus "%" for existing escapes
URL_SAFE_CHARS = ":/?#[]@!$&()*+,;=%"

# (url, handle, kind) -> url
UrlFilter = Callable[[str, str, str], str]


@dataclass(frozen=True)
class AssetMaterialization:
    """A resolved asset as shipped to the client."""

    handle: str
    resolved_url: str = ""
    inline_before: str = ""
    inline_after: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.resolved_url or self.inline_before or self.inline_after)

    def to_dict(self) -> Dict[str, str]:
        return {
            "handle": self.handle,
            "src": self.resolved_url,
            "inline_before": self.inline_before,
            "inline_after": self.inline_after,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetMaterialization":
        return cls(
            handle=str(data.get("handle") or ""),
            resolved_url=str(data.get("src") or ""),
            inline_before=str(data.get("inline_before") or ""),
            inline_after=str(data.get("inline_after") or ""),
        )


def join_inline(data: Any) -> str:
    """Inline data may be one snippet or several; several join with newlines."""
    if not data:
        return ""
    if isinstance(data, str):
        return data
    return "\n".join(str(part) for part in data if part)


def exclusion_rule(handle: str, config: AssetConfig) -> Optional[str]:
    """
    Name of the first exclusion rule matching ``handle``, or None.

    Rules are checked in order: baseline set, editor-only set, editor-only
    prefixes.
    """
    if handle in config.baseline_exclusions:
        return "baseline"
    if handle in config.editor_styles:
        return "editor"
    for prefix in config.editor_prefixes:
        if handle.startswith(prefix):
            return "editor-prefix"
    return None


def filter_style_handles(handles: Iterable[str], config: Optional[AssetConfig] = None) -> List[str]:
    """Drop excluded handles, keep order and de-duplicate."""
    config = config or AssetConfig()
    kept = OrderedHandleSet()
    for handle in handles:
        if not handle or not isinstance(handle, str):
            continue
        if exclusion_rule(handle, config) is None:
            kept.add(handle)
    return kept.to_list()


def with_version(url: str, version: str) -> str:
    """Set the ``ver`` query parameter, replacing any existing one."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "ver"]
    query.append(("ver", str(version)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def sanitize_url(url: str) -> str:
    """
    Return ``url`` escaped for embedding in a markup attribute.

    Control characters and non-http(s) schemes yield an empty string. Quotes,
    angle brackets, backslashes, whitespace and other characters outside the
    URL-safe set are percent-encoded.
    """
    url = (url or "").strip()
    if not url:
        return ""
    if any(ord(ch) < 32 for ch in url):
        return ""
    scheme = urlsplit(url).scheme.lower()
    if scheme and scheme not in SAFE_SCHEMES:
        return ""
    return quote(url, safe=URL_SAFE_CHARS)


class AssetMaterializer:
    """
    Resolves handles against one (styles, scripts) registry pair.

    Built per render call; the registries are the ones the render used.
    """

    def __init__(
        self,
        config: Optional[AssetConfig] = None,
        styles: Optional[AssetRegistry] = None,
        scripts: Optional[AssetRegistry] = None,
        url_filter: Optional[UrlFilter] = None,
    ):
        self.config = config or AssetConfig()
        self.styles = styles
        self.scripts = scripts
        self.url_filter = url_filter

    def _registry(self, kind: str) -> Optional[AssetRegistry]:
        return self.styles if kind == AssetKind.STYLE else self.scripts

    def _lookup(self, handle: str, kind: str) -> Optional[AssetRecord]:
        registry = self._registry(kind)
        if registry is None:
            return None
        try:
            return registry.record_for(handle)
        except Exception as e:
            raise AssetResolutionFault(handle, kind, f"registry lookup failed: {e}") from e

    def filter_style_handles(self, handles: Iterable[str]) -> List[str]:
        return filter_style_handles(handles, self.config)

    def expand_dependencies(self, handles: Sequence[str]) -> List[str]:
        """
        Pull in registered style dependencies.

        Each dependency lands immediately before its first dependent;
        excluded and unregistered dependencies are skipped.
        """
        expanded = OrderedHandleSet()
        visiting: Set[str] = set()

        def registered(handle: str) -> bool:
            try:
                return self._lookup(handle, AssetKind.STYLE) is not None
            except AssetResolutionFault:
                return False

        def visit(handle: str) -> None:
            if handle in expanded or handle in visiting:
                return
            visiting.add(handle)
            try:
                record = self._lookup(handle, AssetKind.STYLE)
            except AssetResolutionFault as fault:
                logger.warning(f"Dependency expansion skipped for '{handle}': {fault.message}")
                record = None
            if record is not None:
                for dep in record.deps:
                    if not dep or not isinstance(dep, str):
                        continue
                    if exclusion_rule(dep, self.config) is not None:
                        continue
                    if not registered(dep):
                        continue
                    visit(dep)
            visiting.discard(handle)
            expanded.add(handle)

        for handle in handles:
            visit(handle)
        return expanded.to_list()

    def normalize_url(self, url: str, handle: str, kind: str, version: Optional[str] = None) -> str:
        """
        Absolute, versioned, filtered and sanitized URL for one asset.

        Raises:
            AssetResolutionFault: the URL filter raised
        """
        if not ABSOLUTE_URL_RE.match(url):
            content_url = self.config.content_url
            if not (content_url and url.startswith(content_url)) and self.config.base_url:
                base_url = self.config.base_url
                if base_url.endswith("/") and url.startswith("/"):
                    base_url = base_url[:-1]
                url = f"{base_url}{url}"

        if version:
            url = with_version(url, version)

        if self.url_filter is not None:
            try:
                url = self.url_filter(url, handle, kind)
            except Exception as e:
                raise AssetResolutionFault(handle, kind, f"url filter failed: {e}") from e

        return sanitize_url(url or "")

    def materialize(self, handle: str, kind: str = AssetKind.STYLE) -> Optional[AssetMaterialization]:
        """
        Resolve one handle.

        Returns None when the handle is unregistered, fails to resolve, or
        resolves to nothing worth shipping.
        """
        try:
            record = self._lookup(handle, kind)
            if record is None:
                return None

            url = ""
            if record.url:
                url = self.normalize_url(record.url, handle, kind, record.version)
        except AssetResolutionFault as fault:
            logger.warning(f"Skipping {kind} '{handle}': {fault.message}")
            return None

        asset = AssetMaterialization(
            handle=handle,
            resolved_url=url,
            inline_before=join_inline(record.inline_before),
            inline_after=join_inline(record.inline_after),
        )
        if asset.is_empty:
            return None
        return asset

    def materialize_all(
        self,
        style_handles: Sequence[str],
        script_handles: Sequence[str] = (),
    ) -> Tuple[Tuple[AssetMaterialization, ...], Tuple[AssetMaterialization, ...]]:
        """
        Materialize every discovered handle, preserving discovery order.

        Style handles are filtered (and dependency-expanded when enabled);
        script handles are taken as collected.
        """
        handles = self.filter_style_handles(style_handles)
        if self.config.include_dependencies:
            handles = self.expand_dependencies(handles)

        styles = [a for a in (self.materialize(h, AssetKind.STYLE) for h in handles) if a is not None]
        scripts = [
            a
            for a in (self.materialize(h, AssetKind.SCRIPT) for h in OrderedHandleSet(script_handles))
            if a is not None
        ]
        return tuple(styles), tuple(scripts)

    def inline_after(self, handle: str, kind: str = AssetKind.STYLE) -> str:
        """Joined inline-after data of a registered handle, or ``""``."""
        try:
            record = self._lookup(handle, kind)
        except AssetResolutionFault as fault:
            logger.warning(f"Inline data unavailable for '{handle}': {fault.message}")
            return ""
        if record is None:
            return ""
        return join_inline(record.inline_after)
