"""
Gallery datasets, stable-id tagging and order reconciliation.
"""

from .extractor import Attachment, GalleryExtractor, caption_from_markup
from .models import GalleryDataset, GalleryItem, GallerySettings
from .reconciler import extract_display_order, reconcile

__all__ = [
    "Attachment",
    "GalleryDataset",
    "GalleryExtractor",
    "GalleryItem",
    "GallerySettings",
    "caption_from_markup",
    "extract_display_order",
    "reconcile",
]
