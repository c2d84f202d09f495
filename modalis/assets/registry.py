"""
Dependency registries — where asset handles resolve to URLs.

The host application owns the real registries; this module defines the
protocols the asset pipeline consumes plus an in-process reference
implementation used by the service defaults and tests.

A registry has two views:
- the **queue**: ordered handles activated so far (``current_queue``)
- the **records**: handle → url/version/deps/inline snippets (``record_for``)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

logger = logging.getLogger("modalis.assets.registry")


class AssetKind:
    """Asset kinds understood by the materializer and URL filters."""

    STYLE = "style"
    SCRIPT = "script"


@dataclass
class AssetRecord:
    """Registered asset: source URL, version, dependencies, inline data."""

    handle: str
    url: str = ""
    version: Optional[str] = None
    deps: Tuple[str, ...] = ()
    inline_before: List[str] = field(default_factory=list)
    inline_after: List[str] = field(default_factory=list)


@runtime_checkable
class AssetRegistry(Protocol):
    """What the differ and materializer need from a dependency registry."""

    def current_queue(self) -> Sequence[str]:
        ...

    def record_for(self, handle: str) -> Optional[AssetRecord]:
        ...


@runtime_checkable
class VariationLookup(Protocol):
    """Legacy per-variation style registry."""

    def lookup(self, component_type: str, slug: str) -> Optional[str]:
        ...


class DependencyRegistry:
    """
    In-process dependency registry.

    ``enqueue`` activates a handle (appends it to the queue once);
    ``register`` records how it resolves. A handle can be enqueued
    without being registered, in which case materialization skips it.
    """

    def __init__(self, kind: str = AssetKind.STYLE):
        self.kind = kind
        self._records: Dict[str, AssetRecord] = {}
        self._queue: List[str] = []

    def register(
        self,
        handle: str,
        url: str = "",
        version: Optional[str] = None,
        deps: Iterable[str] = (),
    ) -> AssetRecord:
        record = AssetRecord(handle=handle, url=url or "", version=version, deps=tuple(deps))
        existing = self._records.get(handle)
        if existing is not None:
            # Inline data survives re-registration
            record.inline_before = existing.inline_before
            record.inline_after = existing.inline_after
        self._records[handle] = record
        return record

    def add_inline(self, handle: str, data: str, position: str = "after") -> bool:
        """Attach an inline snippet to a registered handle."""
        record = self._records.get(handle)
        if record is None:
            logger.debug(f"Inline data for unregistered {self.kind} '{handle}' ignored")
            return False
        if position == "before":
            record.inline_before.append(data)
        else:
            record.inline_after.append(data)
        return True

    def enqueue(self, handle: str) -> None:
        if handle and handle not in self._queue:
            self._queue.append(handle)

    def dequeue(self, handle: str) -> None:
        if handle in self._queue:
            self._queue.remove(handle)

    def is_registered(self, handle: str) -> bool:
        return handle in self._records

    def current_queue(self) -> List[str]:
        return list(self._queue)

    def record_for(self, handle: str) -> Optional[AssetRecord]:
        return self._records.get(handle)

    def __repr__(self) -> str:
        return f"<DependencyRegistry kind={self.kind!r} registered={len(self._records)} queued={len(self._queue)}>"


class StyleVariationRegistry:
    """Legacy (component type, variation slug) → style handle registry."""

    def __init__(self):
        self._handles: Dict[Tuple[str, str], str] = {}

    def register(self, component_type: str, slug: str, handle: str) -> None:
        self._handles[(component_type, slug)] = handle

    def unregister(self, component_type: str, slug: str) -> None:
        self._handles.pop((component_type, slug), None)

    def lookup(self, component_type: str, slug: str) -> Optional[str]:
        return self._handles.get((component_type, slug))


__all__ = [
    "AssetKind",
    "AssetRecord",
    "AssetRegistry",
    "DependencyRegistry",
    "StyleVariationRegistry",
    "VariationLookup",
]
