"""
Structural asset scanner.

Derives style handles from what a nested component *is* rather than what
it enqueued: its static handle declarations and any ``is-style-<slug>``
variation classes on the component or inside its emitted markup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from .registry import VariationLookup

logger = logging.getLogger("modalis.assets.scanner")

STYLE_VARIATION_RE = re.compile(r"\bis-style-([a-z0-9-]+)", re.IGNORECASE)

VARIATION_STYLES_HANDLE = "block-style-variation-styles"


@dataclass(frozen=True)
class RenderedComponent:
    """One nested sub-component as observed right after it rendered."""

    component_type: str = ""
    class_name: str = ""
    markup: str = ""
    style_handles: Tuple[str, ...] = ()
    view_style_handles: Tuple[str, ...] = ()
    script_handles: Tuple[str, ...] = ()


def markup_classes(markup: str) -> List[str]:
    """Every class token of every element in ``markup``, in document order."""
    if not markup or "class" not in markup:
        return []
    soup = BeautifulSoup(markup, "html.parser")
    tokens: List[str] = []
    for tag in soup.find_all(class_=True):
        value = tag.get("class")
        if isinstance(value, str):
            tokens.extend(value.split())
        else:
            tokens.extend(value)
    return tokens


def variation_slugs(class_tokens: Iterable[str]) -> List[str]:
    """Distinct ``is-style-<slug>`` slugs in first-seen order."""
    slugs: List[str] = []
    for token in class_tokens:
        for match in STYLE_VARIATION_RE.finditer(token):
            slug = match.group(1).lower()
            if slug not in slugs:
                slugs.append(slug)
    return slugs


class StructuralScanner:
    """
    Adds handles implied by a component's declarations and variation classes.

    Two independent rules apply to variation classes:

    1. any ``is-style-*`` class adds the single shared variation handle;
    2. each slug is also looked up in the legacy variation registry and a
       match adds that handle too, regardless of rule 1.
    """

    def __init__(
        self,
        variation_registry: Optional[VariationLookup] = None,
        variation_handle: str = VARIATION_STYLES_HANDLE,
    ):
        self.variation_registry = variation_registry
        self.variation_handle = variation_handle

    def scan(self, component: RenderedComponent) -> Tuple[List[str], List[str]]:
        """
        Returns:
            ``(style_handles, script_handles)`` in declaration order.
        """
        styles: List[str] = []
        for handle in (*component.style_handles, *component.view_style_handles):
            if handle and isinstance(handle, str):
                styles.append(handle)

        scripts = [h for h in component.script_handles if h and isinstance(h, str)]

        tokens = component.class_name.split() if component.class_name else []
        tokens.extend(markup_classes(component.markup))

        slugs = variation_slugs(tokens)
        if slugs:
            styles.append(self.variation_handle)

        if slugs and self.variation_registry is not None and component.component_type:
            for slug in slugs:
                legacy = self.variation_registry.lookup(component.component_type, slug)
                if legacy:
                    styles.append(legacy)

        return styles, scripts
