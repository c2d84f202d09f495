"""
Fragment rendering: transform pipeline, renderer, render result.
"""

from .pipeline import PipelineStage, TransformPipeline
from .renderer import FragmentRenderer, GlobalStylesProvider, StyleEngine
from .result import RenderResult, StructuralCss

__all__ = [
    "FragmentRenderer",
    "GlobalStylesProvider",
    "PipelineStage",
    "RenderResult",
    "StructuralCss",
    "StyleEngine",
    "TransformPipeline",
]
