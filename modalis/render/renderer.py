"""
Fragment renderer.

Runs a fragment's content through the transform pipeline while a
per-render asset collector watches the component stage, then gathers the
structural CSS blobs and materializes every discovered handle.

Every collaborator call is fallible: a failing CSS source yields an empty
blob, a failing asset is skipped by the materializer. Only "not
renderable" is reported, and always as the same ``FragmentNotFoundFault``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Protocol, runtime_checkable

from ..assets.capture import AssetCollector, CapturedHandles, DependencyCapture
from ..assets.materializer import AssetMaterializer, UrlFilter
from ..assets.registry import AssetKind, AssetRegistry, VariationLookup
from ..assets.scanner import RenderedComponent, StructuralScanner
from ..config import AssetConfig, RenderConfig
from ..content.models import AccessPolicy, ContentProvider, Fragment, is_renderable
from ..faults import FragmentNotFoundFault
from .pipeline import TransformPipeline
from .result import RenderResult, StructuralCss

logger = logging.getLogger("modalis.render")


@runtime_checkable
class StyleEngine(Protocol):
    """Block-supports style engine."""

    def get_computed_css(self, context: str) -> str:
        ...


@runtime_checkable
class GlobalStylesProvider(Protocol):
    def get_global_stylesheet(self) -> str:
        ...


class FragmentRenderer:
    """
    Renders fragments to ``RenderResult``.

    Registries given to the constructor are the defaults; ``render`` also
    accepts a per-call pair so concurrent hosts can isolate queues.
    """

    def __init__(
        self,
        content_provider: ContentProvider,
        pipeline: Optional[TransformPipeline] = None,
        styles: Optional[AssetRegistry] = None,
        scripts: Optional[AssetRegistry] = None,
        variation_registry: Optional[VariationLookup] = None,
        style_engine: Optional[StyleEngine] = None,
        global_styles: Optional[GlobalStylesProvider] = None,
        url_filter: Optional[UrlFilter] = None,
        access_policy: Optional[AccessPolicy] = None,
        asset_config: Optional[AssetConfig] = None,
        render_config: Optional[RenderConfig] = None,
    ):
        self.content_provider = content_provider
        self.pipeline = pipeline or TransformPipeline()
        self.styles = styles
        self.scripts = scripts
        self.variation_registry = variation_registry
        self.style_engine = style_engine
        self.global_styles = global_styles
        self.url_filter = url_filter
        self.access_policy = access_policy
        self.asset_config = asset_config or AssetConfig()
        self.render_config = render_config or RenderConfig()

    def get_fragment(self, fragment_id: int) -> Optional[Fragment]:
        try:
            return self.content_provider.get_fragment(fragment_id)
        except Exception as e:
            logger.warning(f"Content provider failed for fragment {fragment_id}: {e}")
            return None

    def render(
        self,
        fragment_id: int,
        styles: Optional[AssetRegistry] = None,
        scripts: Optional[AssetRegistry] = None,
    ) -> RenderResult:
        """
        Render a fragment by id.

        Raises:
            FragmentNotFoundFault: absent, not public, restricted or
                unshareable (indistinguishably)
        """
        return self.render_fragment(
            self.get_fragment(fragment_id),
            fragment_id=fragment_id,
            styles=styles,
            scripts=scripts,
        )

    def render_fragment(
        self,
        fragment: Optional[Fragment],
        fragment_id: Optional[int] = None,
        styles: Optional[AssetRegistry] = None,
        scripts: Optional[AssetRegistry] = None,
    ) -> RenderResult:
        """Render an already fetched fragment (None counts as absent)."""
        try:
            renderable = is_renderable(fragment, self.access_policy)
        except Exception as e:
            logger.warning(f"Access policy failed for fragment {fragment_id}: {e}")
            renderable = False
        if not renderable:
            raise FragmentNotFoundFault(fragment_id)

        styles = styles if styles is not None else self.styles
        scripts = scripts if scripts is not None else self.scripts

        collector = AssetCollector(
            DependencyCapture(styles, scripts),
            StructuralScanner(self.variation_registry, self.asset_config.variation_handle),
        )
        captured: List[CapturedHandles] = []

        @contextmanager
        def component_scope() -> Iterator[Callable[[RenderedComponent], None]]:
            collector.start()
            try:
                yield collector.on_component
            finally:
                captured.append(collector.finish())

        html = self.pipeline.run(fragment.content, component_scope=component_scope)
        handles = captured[0] if captured else CapturedHandles()

        materializer = AssetMaterializer(self.asset_config, styles, scripts, self.url_filter)
        structural_css = StructuralCss(
            block_supports_css=self._block_supports_css(),
            variation_css=materializer.inline_after(self.asset_config.variation_handle, AssetKind.STYLE),
        )
        style_assets, script_assets = materializer.materialize_all(handles.styles, handles.scripts)

        result = RenderResult(
            html=html,
            style_handles=tuple(materializer.filter_style_handles(handles.styles)),
            structural_css=structural_css,
            global_stylesheet=self._global_stylesheet(),
            styles=style_assets,
            scripts=script_assets,
        )
        logger.debug(
            f"Rendered fragment {fragment.id}: {len(result.style_handles)} style handles, "
            f"{len(style_assets)} styles, {len(script_assets)} scripts"
        )
        return result

    def _block_supports_css(self) -> str:
        if self.style_engine is None:
            return ""
        try:
            return self.style_engine.get_computed_css(self.render_config.block_supports_context) or ""
        except Exception as e:
            logger.warning(f"Block-supports CSS unavailable: {e}")
            return ""

    def _global_stylesheet(self) -> str:
        if self.global_styles is None:
            return ""
        try:
            return self.global_styles.get_global_stylesheet() or ""
        except Exception as e:
            logger.warning(f"Global stylesheet unavailable: {e}")
            return ""
