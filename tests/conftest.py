"""
Shared test fixtures and helpers for the modalis test suite.
"""

from typing import Callable, List, Optional

import pytest

from modalis.assets.registry import AssetKind, DependencyRegistry, StyleVariationRegistry
from modalis.assets.scanner import RenderedComponent
from modalis.cache.backends.memory import MemoryBackend
from modalis.cache.core import CacheConfig
from modalis.cache.render_cache import RenderCache
from modalis.config import AssetConfig
from modalis.content.models import Fragment, InMemoryContentProvider
from modalis.render.pipeline import TransformPipeline
from modalis.render.renderer import FragmentRenderer


# ============================================================================
# Helpers
# ============================================================================


def component_stage(components: List[RenderedComponent], enqueue: Optional[Callable] = None):
    """
    Build a component-rendering stage that "renders" the given components.

    Each component's markup is appended to the content; ``enqueue`` (if any)
    is called with the component first, simulating side-effect activation.
    """

    def stage(content: str, on_component) -> str:
        parts = [content]
        for component in components:
            if enqueue is not None:
                enqueue(component)
            parts.append(component.markup)
            on_component(component)
        return "".join(parts)

    return stage


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def make_component_stage():
    return component_stage


@pytest.fixture
def styles():
    return DependencyRegistry(AssetKind.STYLE)


@pytest.fixture
def scripts():
    return DependencyRegistry(AssetKind.SCRIPT)


@pytest.fixture
def variations():
    return StyleVariationRegistry()


@pytest.fixture
def asset_config():
    return AssetConfig(base_url="https://site")


@pytest.fixture
def provider():
    return InMemoryContentProvider(
        {
            42: Fragment(id=42, content="<p>Hi</p>", title="Greeting"),
            7: Fragment(id=7, content="<p>draft</p>", status="draft"),
            8: Fragment(id=8, content="<p>secret</p>", access_control="hunter2"),
            9: Fragment(id=9, content="<p>private copy</p>", shareable=False),
        }
    )


@pytest.fixture
def renderer(provider, styles, scripts, variations, asset_config):
    return FragmentRenderer(
        provider,
        pipeline=TransformPipeline(),
        styles=styles,
        scripts=scripts,
        variation_registry=variations,
        asset_config=asset_config,
    )


@pytest.fixture
def cache_config():
    return CacheConfig(default_ttl=60)


@pytest.fixture
def fast_tier():
    return MemoryBackend(max_size=100)


@pytest.fixture
def durable_tier():
    return MemoryBackend(max_size=1000)


@pytest.fixture
def render_cache(fast_tier, durable_tier, cache_config):
    return RenderCache(fast_tier, durable_tier, config=cache_config)
