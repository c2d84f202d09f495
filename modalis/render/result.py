"""
RenderResult — the immutable composite output of one fragment render.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..assets.materializer import AssetMaterialization


@dataclass(frozen=True)
class StructuralCss:
    """CSS blobs kept apart so callers can inject them as distinct elements."""

    block_supports_css: str = ""
    variation_css: str = ""


@dataclass(frozen=True)
class RenderResult:
    html: str
    style_handles: Tuple[str, ...] = ()
    structural_css: StructuralCss = field(default_factory=StructuralCss)
    global_stylesheet: str = ""
    styles: Tuple[AssetMaterialization, ...] = ()
    scripts: Tuple[AssetMaterialization, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Wire payload; field names are part of the client contract."""
        return {
            "html": self.html,
            "styles": list(self.style_handles),
            "block_supports_css": self.structural_css.block_supports_css,
            "block_style_variation_css": self.structural_css.variation_css,
            "global_stylesheet": self.global_stylesheet,
            "asset_data": {
                "styles": [asset.to_dict() for asset in self.styles],
                "scripts": [asset.to_dict() for asset in self.scripts],
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderResult":
        """
        Rebuild from a wire payload.

        Missing fields default; ``asset_data`` defaults to no assets.
        """
        asset_data = data.get("asset_data") or {}
        if not isinstance(asset_data, dict):
            asset_data = {}

        def assets(kind: str) -> Tuple[AssetMaterialization, ...]:
            return tuple(
                AssetMaterialization.from_dict(item)
                for item in asset_data.get(kind) or ()
                if isinstance(item, dict)
            )

        return cls(
            html=str(data.get("html") or ""),
            style_handles=tuple(h for h in data.get("styles") or () if isinstance(h, str)),
            structural_css=StructuralCss(
                block_supports_css=str(data.get("block_supports_css") or ""),
                variation_css=str(data.get("block_style_variation_css") or ""),
            ),
            global_stylesheet=str(data.get("global_stylesheet") or ""),
            styles=assets("styles"),
            scripts=assets("scripts"),
        )

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["RenderResult"]:
        """
        Normalise a stored cache payload.

        Accepts a wire dict, a JSON-encoded wire dict, or a bare HTML string
        from older writers. Anything else is unusable (None).
        """
        if isinstance(payload, RenderResult):
            return payload
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        if isinstance(payload, str):
            try:
                decoded = json.loads(payload)
            except json.JSONDecodeError:
                return cls(html=payload)
            if not isinstance(decoded, dict):
                return cls(html=payload)
            payload = decoded
        if isinstance(payload, dict):
            return cls.from_dict(payload)
        return None
