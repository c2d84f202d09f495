"""
Tests for gallery display-order reconciliation.
"""

import pytest

from modalis.gallery.models import GalleryDataset, GalleryItem
from modalis.gallery.reconciler import extract_display_order, reconcile

A = GalleryItem(stable_id=1, display_url="a.jpg", original_index=0)
B = GalleryItem(stable_id=2, display_url="b.jpg", original_index=1)
C = GalleryItem(stable_id=3, display_url="c.jpg", original_index=2)


def figures(*ids):
    return "".join(f'<figure class="wp-block-image" data-image-id="{i}"><img src="x"/></figure>' for i in ids)


@pytest.fixture
def dataset():
    return GalleryDataset(items=[A, B, C])


class TestExtractDisplayOrder:
    def test_document_order(self):
        assert extract_display_order(figures(3, 1, 2)) == [3, 1, 2]

    def test_ignores_invalid_ids(self):
        markup = figures(1) + '<div data-image-id="abc"></div><div data-image-id="0"></div>' + figures(2)
        assert extract_display_order(markup) == [1, 2]

    def test_untagged(self):
        assert extract_display_order("<figure><img/></figure>") == []


class TestReconcile:

    def test_reorders_to_rendered_order(self, dataset):
        assert reconcile(dataset, figures(3, 1, 2)).items == [C, A, B]

    def test_idempotent(self, dataset):
        markup = figures(2, 3, 1)
        once = list(reconcile(dataset, markup).items)
        assert reconcile(dataset, markup).items == once

    def test_same_order_unchanged(self, dataset):
        assert reconcile(dataset, figures(1, 2, 3)).items == [A, B, C]

    def test_count_mismatch_keeps_original(self, dataset):
        assert reconcile(dataset, figures(2, 1)).items == [A, B, C]

    def test_unknown_id_keeps_original(self, dataset):
        assert reconcile(dataset, figures(1, 2, 9)).items == [A, B, C]

    def test_duplicate_ids_keep_original(self, dataset):
        assert reconcile(dataset, figures(1, 1, 2)).items == [A, B, C]

    def test_untagged_markup_keeps_original(self, dataset):
        assert reconcile(dataset, "<div>no figures</div>").items == [A, B, C]

    def test_items_without_stable_id(self):
        ds = GalleryDataset(items=[GalleryItem(display_url="a"), B])
        assert reconcile(ds, figures(2, 1)).items == ds.items

    def test_returns_same_dataset(self, dataset):
        assert reconcile(dataset, figures(3, 2, 1)) is dataset
