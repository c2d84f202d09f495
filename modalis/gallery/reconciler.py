"""
Gallery order reconciler.

Galleries may shuffle their images at render time. Each image container
carries its stable id in ``data-image-id``; reading those ids in document
order gives the order actually shown, and the dataset is rearranged to
match so client-side navigation follows what the visitor sees.

Any mismatch leaves the dataset exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from bs4 import BeautifulSoup

from .models import GalleryDataset, GalleryItem

logger = logging.getLogger("modalis.gallery")

STABLE_ID_ATTR = "data-image-id"


def extract_display_order(markup: str) -> List[int]:
    """Positive stable ids of tagged containers, in document order."""
    if not markup or STABLE_ID_ATTR not in markup:
        return []
    soup = BeautifulSoup(markup, "html.parser")
    order: List[int] = []
    for tag in soup.find_all(attrs={STABLE_ID_ATTR: True}):
        raw = tag.get(STABLE_ID_ATTR, "")
        try:
            stable_id = int(str(raw).strip())
        except ValueError:
            continue
        if stable_id > 0:
            order.append(stable_id)
    return order


def reconcile(dataset: GalleryDataset, markup: str) -> GalleryDataset:
    """
    Reorder ``dataset.items`` to the rendered order found in ``markup``.

    Mutates and returns ``dataset``. Never raises; on any mismatch the
    items are left untouched.
    """
    try:
        display_order = extract_display_order(markup)
    except Exception as e:
        logger.warning(f"Gallery markup scan failed, keeping original order: {e}")
        return dataset

    if not display_order:
        return dataset

    if len(display_order) != len(dataset.items):
        logger.warning(
            f"Gallery reconciliation aborted: {len(display_order)} tagged items "
            f"for {len(dataset.items)} dataset items"
        )
        return dataset

    if len(set(display_order)) != len(display_order):
        logger.warning("Gallery reconciliation aborted: duplicate stable ids in markup")
        return dataset

    by_id: Dict[int, GalleryItem] = {
        item.stable_id: item for item in dataset.items if item.stable_id
    }

    missing = [stable_id for stable_id in display_order if stable_id not in by_id]
    if missing:
        logger.warning(f"Gallery reconciliation aborted: unknown stable ids {missing}")
        return dataset

    dataset.items = [by_id[stable_id] for stable_id in display_order]
    return dataset
