"""
Gallery dataset extraction and stable-id tagging.

Builds a ``GalleryDataset`` from a gallery component's attributes, fills
missing captions from its markup, and tags every image figure with the
``data-image-id`` attribute the reconciler reads back.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config import GalleryConfig
from .models import GalleryDataset, GalleryItem, GallerySettings
from .reconciler import STABLE_ID_ATTR

logger = logging.getLogger("modalis.gallery")

IMAGE_COMPONENT = "core/image"


@dataclass(frozen=True)
class Attachment:
    id: int
    full_url: str
    caption: str = ""
    alt: str = ""


AttachmentLookup = Callable[[int], Optional[Attachment]]


def _positive_int(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


def _inner_html(tag: Tag) -> str:
    return "".join(str(child) for child in tag.contents).strip()


def _is_caption_class(value: Optional[str]) -> bool:
    return bool(value) and "caption" in value


def caption_from_markup(markup: Any) -> str:
    """``figcaption`` content, else ``p.caption`` content, else ``""``."""
    soup = markup if isinstance(markup, Tag) else BeautifulSoup(markup or "", "html.parser")
    figcaption = soup.find("figcaption")
    if figcaption is not None:
        caption = _inner_html(figcaption)
        if caption:
            return caption
    paragraph = soup.find("p", class_=_is_caption_class)
    if paragraph is not None:
        return _inner_html(paragraph)
    return ""


def _is_image_figure(tag: Tag) -> bool:
    if tag.name != "figure":
        return False
    classes = tag.get("class") or []
    return any("wp-block-image" in cls for cls in classes)


class GalleryExtractor:
    """
    Turns gallery components into datasets and tagged markup.

    Attachment lookups are memoized for the extractor's lifetime.
    """

    def __init__(
        self,
        attachment_lookup: Optional[AttachmentLookup] = None,
        config: Optional[GalleryConfig] = None,
        id_prefix: str = "modalis-gallery-",
    ):
        self.attachment_lookup = attachment_lookup
        self.config = config or GalleryConfig()
        self.id_prefix = id_prefix
        self._attachments: Dict[int, Optional[Attachment]] = {}
        self._counter = itertools.count(1)

    def attachment(self, attachment_id: int) -> Optional[Attachment]:
        if attachment_id <= 0 or self.attachment_lookup is None:
            return None
        if attachment_id not in self._attachments:
            try:
                self._attachments[attachment_id] = self.attachment_lookup(attachment_id)
            except Exception as e:
                logger.warning(f"Attachment lookup failed for {attachment_id}: {e}")
                self._attachments[attachment_id] = None
        return self._attachments[attachment_id]

    # ── Dataset ──────────────────────────────────────────────────────

    def _from_image_attr(self, index: int, image: Mapping[str, Any]) -> GalleryItem:
        stable_id = _positive_int(image.get("id"))
        caption = image.get("caption") or ""
        alt = image.get("alt") or ""
        if (not caption or not alt) and stable_id:
            attachment = self.attachment(stable_id)
            if attachment is not None:
                caption = caption or attachment.caption
                alt = alt or attachment.alt
        return GalleryItem(
            stable_id=stable_id or None,
            display_url=image.get("fullUrl") or image.get("url") or "",
            caption=caption,
            alt_text=alt,
            original_index=index,
        )

    def _from_inner_image(self, index: int, component: Mapping[str, Any]) -> Optional[GalleryItem]:
        attrs = component.get("attrs") or {}
        stable_id = _positive_int(attrs.get("id"))
        attachment = self.attachment(stable_id)
        if attachment is None:
            return None
        caption = (
            attrs.get("caption")
            or caption_from_markup(component.get("inner_html") or "")
            or attachment.caption
        )
        return GalleryItem(
            stable_id=stable_id,
            display_url=attachment.full_url,
            caption=caption,
            alt_text=attrs.get("alt") or attachment.alt,
            original_index=index,
        )

    def build_dataset(
        self,
        attrs: Mapping[str, Any],
        inner_components: Iterable[Mapping[str, Any]] = (),
    ) -> GalleryDataset:
        """
        Items come from, in order of preference: the ``images`` attribute,
        inner image components, the ``ids`` attribute via attachment lookup.
        """
        items: List[GalleryItem] = []

        images = attrs.get("images") or []
        if images:
            items = [self._from_image_attr(i, image) for i, image in enumerate(images)]
        else:
            for index, component in enumerate(inner_components):
                if component.get("name") != IMAGE_COMPONENT:
                    continue
                item = self._from_inner_image(index, component)
                if item is not None:
                    items.append(item)

            if not items:
                for index, raw_id in enumerate(attrs.get("ids") or []):
                    attachment = self.attachment(_positive_int(raw_id))
                    if attachment is not None:
                        items.append(
                            GalleryItem(
                                stable_id=attachment.id,
                                display_url=attachment.full_url,
                                caption=attachment.caption,
                                alt_text=attachment.alt,
                                original_index=index,
                            )
                        )

        return GalleryDataset(items=items, settings=GallerySettings.from_attrs(attrs, self.config))

    # ── Markup ───────────────────────────────────────────────────────

    def fill_captions(self, dataset: GalleryDataset, soup: BeautifulSoup) -> None:
        """Missing captions from image figures, matched by position."""
        figures = [tag for tag in soup.find_all("figure") if _is_image_figure(tag)]
        for index, figure in enumerate(figures):
            if index >= len(dataset.items) or dataset.items[index].caption:
                continue
            caption = caption_from_markup(figure)
            if caption:
                dataset.items[index] = replace(dataset.items[index], caption=caption)

    def _match(self, dataset: GalleryDataset, figure: Tag) -> Tuple[int, Optional[GalleryItem]]:
        img = figure.find("img")
        if img is None:
            return -1, None
        figure_id = _positive_int(img.get("data-id"))
        if figure_id:
            for index, item in enumerate(dataset.items):
                if item.stable_id == figure_id:
                    return index, item
        src = (img.get("src") or "").strip()
        if src:
            for index, item in enumerate(dataset.items):
                if item.display_url and item.display_url == src:
                    return index, item
        return -1, None

    def tag_markup(self, dataset: GalleryDataset, markup: str) -> str:
        """
        Tag the gallery container and each matched image figure.

        Figures that match no dataset item are left as they are.
        """
        soup = BeautifulSoup(markup, "html.parser")
        self.fill_captions(dataset, soup)

        for figure in soup.find_all("figure"):
            if not _is_image_figure(figure):
                continue
            index, item = self._match(dataset, figure)
            if item is None:
                continue
            if not item.caption:
                caption = caption_from_markup(figure)
                if caption:
                    item = replace(item, caption=caption)
                    dataset.items[index] = item
            if item.stable_id:
                figure[STABLE_ID_ATTR] = str(item.stable_id)
            figure["data-image-index"] = str(index)

        container = self._container(soup)
        if container is not None:
            container["data-gallery"] = "true"
            container["data-gallery-id"] = f"{self.id_prefix}{next(self._counter)}"
            container["data-gallery-data"] = json.dumps(dataset.to_wire())
            container["data-modal-size"] = str(dataset.settings.modal_width)

        return str(soup)

    @staticmethod
    def _container(soup: BeautifulSoup) -> Optional[Tag]:
        for tag in soup.find_all(True):
            classes = tag.get("class") or []
            if "wp-block-gallery" in classes:
                return tag
        for tag in soup.find_all("figure"):
            classes = " ".join(tag.get("class") or [])
            if "wp-block-gallery" in classes or "blocks-gallery-grid" in classes:
                return tag
        return soup.find(True)

    def process(
        self,
        attrs: Mapping[str, Any],
        markup: str,
        inner_components: Iterable[Mapping[str, Any]] = (),
    ) -> Tuple[Optional[GalleryDataset], str]:
        """
        Dataset plus tagged markup for one gallery component.

        Returns ``(None, markup)`` unchanged when the gallery has no images.
        """
        dataset = self.build_dataset(attrs, inner_components)
        if not dataset.items:
            return None, markup
        return dataset, self.tag_markup(dataset, markup)
