"""
Asset discovery: snapshot differ, structural scanner, materializer.
"""

from .capture import AssetCollector, CapturedHandles, DependencyCapture, OrderedHandleSet
from .materializer import (
    AssetMaterialization,
    AssetMaterializer,
    filter_style_handles,
)
from .registry import (
    AssetKind,
    AssetRecord,
    AssetRegistry,
    DependencyRegistry,
    StyleVariationRegistry,
    VariationLookup,
)
from .scanner import RenderedComponent, StructuralScanner

__all__ = [
    "AssetCollector",
    "AssetKind",
    "AssetMaterialization",
    "AssetMaterializer",
    "AssetRecord",
    "AssetRegistry",
    "CapturedHandles",
    "DependencyCapture",
    "DependencyRegistry",
    "OrderedHandleSet",
    "RenderedComponent",
    "StructuralScanner",
    "StyleVariationRegistry",
    "VariationLookup",
    "filter_style_handles",
]
