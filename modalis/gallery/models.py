"""
Gallery dataset models and their client wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..config import GalleryConfig
from ..faults import GalleryFault


@dataclass(frozen=True)
class GalleryItem:
    """One gallery image. ``stable_id`` is a positive int or None."""

    stable_id: Optional[int] = None
    display_url: str = ""
    caption: str = ""
    alt_text: str = ""
    original_index: int = 0

    def to_wire(self) -> Dict[str, Any]:
        return {
            "id": self.stable_id or 0,
            "fullUrl": self.display_url,
            "caption": self.caption,
            "alt": self.alt_text,
        }


@dataclass(frozen=True)
class GallerySettings:
    modal_width: int = 600
    close_button_mode: str = "both"
    navigation_mode: str = "both"

    @classmethod
    def from_attrs(
        cls,
        attrs: Mapping[str, Any],
        config: Optional[GalleryConfig] = None,
        strict: bool = False,
    ) -> "GallerySettings":
        """
        Normalise raw gallery attributes.

        Invalid values fall back to defaults, or raise ``GalleryFault``
        when ``strict`` is set. Widths below the minimum are clamped.
        """
        config = config or GalleryConfig()

        raw_width = attrs.get("modalSize", config.default_modal_width)
        try:
            width = int(raw_width)
        except (TypeError, ValueError):
            if strict:
                raise GalleryFault("modalSize", raw_width)
            width = config.default_modal_width
        width = max(config.min_modal_width, width)

        close = attrs.get("closeButtons", config.default_close_button_mode)
        if close not in config.close_button_modes:
            if strict:
                raise GalleryFault("closeButtons", close)
            close = config.default_close_button_mode

        navigation = attrs.get("imageNavigation", config.default_navigation_mode)
        if navigation not in config.navigation_modes:
            if strict:
                raise GalleryFault("imageNavigation", navigation)
            navigation = config.default_navigation_mode

        return cls(modal_width=width, close_button_mode=close, navigation_mode=navigation)


@dataclass
class GalleryDataset:
    """Items in display order plus modal settings; reconciled in place."""

    items: List[GalleryItem] = field(default_factory=list)
    settings: GallerySettings = field(default_factory=GallerySettings)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "images": [item.to_wire() for item in self.items],
            "modalSize": self.settings.modal_width,
            "closeButtons": self.settings.close_button_mode,
            "imageNavigation": self.settings.navigation_mode,
        }
