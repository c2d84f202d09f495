"""
Tests for the structural asset scanner.
"""

from modalis.assets.scanner import (
    VARIATION_STYLES_HANDLE,
    RenderedComponent,
    StructuralScanner,
    markup_classes,
    variation_slugs,
)


class TestMarkupClasses:
    def test_collects_nested_classes(self):
        html = '<div class="a b"><span class="c">x</span></div>'
        assert markup_classes(html) == ["a", "b", "c"]

    def test_no_markup(self):
        assert markup_classes("") == []
        assert markup_classes("<p>plain</p>") == []


class TestVariationSlugs:
    def test_extracts_distinct_slugs(self):
        tokens = ["wp-block-button", "is-style-outline", "is-style-outline", "is-style-fill"]
        assert variation_slugs(tokens) == ["outline", "fill"]

    def test_no_variations(self):
        assert variation_slugs(["wp-block-group", "has-text"]) == []


class TestStructuralScanner:

    def test_declared_handles_in_order(self):
        component = RenderedComponent(
            component_type="core/image",
            style_handles=("core-image",),
            view_style_handles=("core-image-view",),
            script_handles=("lightbox",),
        )
        styles, scripts = StructuralScanner().scan(component)
        assert styles == ["core-image", "core-image-view"]
        assert scripts == ["lightbox"]

    def test_variation_class_on_component(self):
        component = RenderedComponent(component_type="core/button", class_name="is-style-outline")
        styles, _ = StructuralScanner().scan(component)
        assert styles == [VARIATION_STYLES_HANDLE]

    def test_variation_class_in_markup(self):
        component = RenderedComponent(
            component_type="core/group",
            markup='<div class="wp-block-group"><p class="is-style-fancy">x</p></div>',
        )
        styles, _ = StructuralScanner().scan(component)
        assert VARIATION_STYLES_HANDLE in styles

    def test_legacy_lookup_added_too(self, variations):
        variations.register("core/button", "outline", "legacy-outline")
        component = RenderedComponent(component_type="core/button", class_name="is-style-outline")
        styles, _ = StructuralScanner(variations).scan(component)
        assert styles == [VARIATION_STYLES_HANDLE, "legacy-outline"]

    def test_legacy_lookup_requires_type(self, variations):
        variations.register("core/button", "outline", "legacy-outline")
        styles, _ = StructuralScanner(variations).scan(RenderedComponent(class_name="is-style-outline"))
        assert "legacy-outline" not in styles

    def test_custom_variation_handle(self):
        scanner = StructuralScanner(variation_handle="variations")
        styles, _ = scanner.scan(RenderedComponent(class_name="is-style-x"))
        assert styles == ["variations"]

    def test_plain_component(self):
        assert StructuralScanner().scan(RenderedComponent(markup="<p>x</p>")) == ([], [])
