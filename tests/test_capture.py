"""
Tests for the dependency snapshot differ and the per-render collector.
"""

import pytest

from modalis.assets.capture import AssetCollector, DependencyCapture, OrderedHandleSet
from modalis.assets.scanner import RenderedComponent, StructuralScanner
from modalis.faults import CaptureFault


class TestOrderedHandleSet:
    def test_dedupes_in_first_seen_order(self):
        s = OrderedHandleSet(["b", "a", "b", "", "c"])
        assert s.to_list() == ["b", "a", "c"]
        assert "a" in s
        assert len(s) == 3


class TestDependencyCapture:

    def test_preexisting_handles_excluded(self, styles, scripts):
        styles.enqueue("theme")
        capture = DependencyCapture(styles, scripts)
        capture.start_capture()
        styles.enqueue("theme")
        styles.enqueue("button")
        capture.checkpoint()
        assert capture.finish_capture().styles == ("button",)

    def test_checkpoint_advances_baseline(self, styles, scripts):
        capture = DependencyCapture(styles, scripts)
        capture.start_capture()
        styles.enqueue("a")
        assert capture.checkpoint() == (["a"], [])
        assert capture.checkpoint() == ([], [])
        scripts.enqueue("x")
        assert capture.checkpoint() == ([], ["x"])

    def test_dequeued_then_requeued_between_checkpoints(self, styles, scripts):
        capture = DependencyCapture(styles, scripts)
        capture.start_capture()
        styles.enqueue("a")
        capture.checkpoint()
        styles.dequeue("a")
        capture.checkpoint()
        styles.enqueue("a")
        capture.checkpoint()
        assert capture.finish_capture().styles == ("a",)

    def test_finish_resets(self, styles, scripts):
        capture = DependencyCapture(styles, scripts)
        capture.start_capture()
        styles.enqueue("a")
        capture.checkpoint()
        capture.finish_capture()
        assert capture.is_active is False
        capture.start_capture()
        assert capture.finish_capture().styles == ()

    def test_nested_capture_rejected(self, styles, scripts):
        capture = DependencyCapture(styles, scripts)
        capture.start_capture()
        with pytest.raises(CaptureFault):
            capture.start_capture()

    def test_operations_require_active_capture(self, styles):
        capture = DependencyCapture(styles)
        with pytest.raises(CaptureFault):
            capture.checkpoint()
        with pytest.raises(CaptureFault):
            capture.add_styles(["a"])
        with pytest.raises(CaptureFault):
            capture.finish_capture()

    def test_add_styles_unions(self, styles):
        capture = DependencyCapture(styles)
        capture.start_capture()
        capture.add_styles(["x", "y"])
        styles.enqueue("y")
        styles.enqueue("z")
        capture.checkpoint()
        assert capture.finish_capture().styles == ("x", "y", "z")

    def test_missing_registries(self):
        capture = DependencyCapture()
        capture.start_capture()
        assert capture.checkpoint() == ([], [])
        assert capture.finish_capture().scripts == ()


class TestAssetCollector:

    def test_structural_and_enqueued_handles(self, styles, scripts, variations):
        collector = AssetCollector(DependencyCapture(styles, scripts), StructuralScanner(variations))
        collector.start()

        styles.enqueue("button-view")
        collector.on_component(
            RenderedComponent(component_type="core/button", style_handles=("core-button",))
        )
        scripts.enqueue("slider-js")
        collector.on_component(RenderedComponent(component_type="acme/slider"))

        captured = collector.finish()
        assert captured.styles == ("core-button", "button-view")
        assert captured.scripts == ("slider-js",)
        assert collector.components == 2
