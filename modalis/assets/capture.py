"""
Dependency snapshot differ and the per-render asset collector.

The differ watches the style and script queues of a pair of registries.
``start_capture()`` snapshots both queues, each ``checkpoint()`` collects
the handles that appeared since the previous snapshot and advances the
baseline, ``finish_capture()`` hands back everything collected in
first-seen order.

One capture may be in flight per ``DependencyCapture`` instance. The
renderer builds a fresh ``AssetCollector`` per render call, so concurrent
renders never share differ state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from ..faults import CaptureFault
from .registry import AssetRegistry
from .scanner import RenderedComponent, StructuralScanner

logger = logging.getLogger("modalis.assets.capture")


class OrderedHandleSet:
    """Insertion-ordered, de-duplicated handle collection."""

    __slots__ = ("_items", "_seen")

    def __init__(self, handles: Iterable[str] = ()):
        self._items: List[str] = []
        self._seen: Set[str] = set()
        self.update(handles)

    def add(self, handle: str) -> bool:
        if not handle or handle in self._seen:
            return False
        self._seen.add(handle)
        self._items.append(handle)
        return True

    def update(self, handles: Iterable[str]) -> None:
        for handle in handles:
            self.add(handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[str]:
        return list(self._items)


@dataclass(frozen=True)
class CapturedHandles:
    """Result of one capture: handles in discovery order."""

    styles: Tuple[str, ...] = ()
    scripts: Tuple[str, ...] = ()


def _queue_delta(queue: Iterable[str], baseline: Set[str]) -> List[str]:
    return [h for h in queue if h and isinstance(h, str) and h not in baseline]


class DependencyCapture:
    """Snapshot differ over a (styles, scripts) registry pair."""

    def __init__(self, styles: Optional[AssetRegistry] = None, scripts: Optional[AssetRegistry] = None):
        self.styles = styles
        self.scripts = scripts
        self._active = False
        self._style_baseline: Set[str] = set()
        self._script_baseline: Set[str] = set()
        self._collected_styles = OrderedHandleSet()
        self._collected_scripts = OrderedHandleSet()

    @property
    def is_active(self) -> bool:
        return self._active

    @staticmethod
    def _snapshot(registry: Optional[AssetRegistry]) -> Set[str]:
        if registry is None:
            return set()
        return set(registry.current_queue())

    def start_capture(self) -> None:
        if self._active:
            raise CaptureFault("capture already in progress")
        self._style_baseline = self._snapshot(self.styles)
        self._script_baseline = self._snapshot(self.scripts)
        self._collected_styles = OrderedHandleSet()
        self._collected_scripts = OrderedHandleSet()
        self._active = True

    def checkpoint(self) -> Tuple[List[str], List[str]]:
        """
        Collect handles activated since the last snapshot.

        Returns:
            The newly collected ``(styles, scripts)`` of this checkpoint.
        """
        if not self._active:
            raise CaptureFault("checkpoint without an active capture")

        new_styles: List[str] = []
        if self.styles is not None:
            queue = list(self.styles.current_queue())
            new_styles = [h for h in _queue_delta(queue, self._style_baseline) if self._collected_styles.add(h)]
            self._style_baseline = set(queue)

        new_scripts: List[str] = []
        if self.scripts is not None:
            queue = list(self.scripts.current_queue())
            new_scripts = [h for h in _queue_delta(queue, self._script_baseline) if self._collected_scripts.add(h)]
            self._script_baseline = set(queue)

        return new_styles, new_scripts

    def add_styles(self, handles: Iterable[str]) -> None:
        """Union externally discovered style handles into the collected set."""
        if not self._active:
            raise CaptureFault("handles added without an active capture")
        self._collected_styles.update(handles)

    def add_scripts(self, handles: Iterable[str]) -> None:
        if not self._active:
            raise CaptureFault("handles added without an active capture")
        self._collected_scripts.update(handles)

    def finish_capture(self) -> CapturedHandles:
        if not self._active:
            raise CaptureFault("finish without an active capture")
        result = CapturedHandles(
            styles=tuple(self._collected_styles),
            scripts=tuple(self._collected_scripts),
        )
        self._active = False
        self._style_baseline = set()
        self._script_baseline = set()
        self._collected_styles = OrderedHandleSet()
        self._collected_scripts = OrderedHandleSet()
        return result


class AssetCollector:
    """
    Per-render collector: structural scan plus queue diff per component.

    ``on_component`` is the hook the component-rendering stage calls after
    each nested render.
    """

    def __init__(self, capture: DependencyCapture, scanner: StructuralScanner):
        self.capture = capture
        self.scanner = scanner
        self.components = 0

    def start(self) -> None:
        self.capture.start_capture()

    def on_component(self, component: RenderedComponent) -> None:
        styles, scripts = self.scanner.scan(component)
        self.capture.add_styles(styles)
        self.capture.add_scripts(scripts)
        self.capture.checkpoint()
        self.components += 1

    def finish(self) -> CapturedHandles:
        captured = self.capture.finish_capture()
        logger.debug(
            f"Captured {len(captured.styles)} style / {len(captured.scripts)} script "
            f"handles from {self.components} components"
        )
        return captured
