"""
Popup trigger scanning.

A page references a fragment with either a class token
``spp-trigger-{id}`` or a link to ``#spp-trigger-{id}``; both accept an
optional ``-{width}`` suffix for the modal's maximum width.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from bs4 import BeautifulSoup

CLASS_TRIGGER_RE = re.compile(r"^spp-trigger-([0-9]+)(?:-([0-9]+))?$")
HREF_TRIGGER_RE = re.compile(r"#spp-trigger-([0-9]+)(?:-([0-9]+))?")


@dataclass(frozen=True)
class Trigger:
    type: str  # "class" or "href"
    id: int
    max_width: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "id": self.id}
        if self.max_width is not None:
            data["max_width"] = self.max_width
        return data


class TriggerScanner:
    def __init__(self, max_id: int = 2147483647, min_width: int = 100, max_width: int = 5000):
        self.max_id = max_id
        self.min_width = min_width
        self.max_width = max_width

    def _trigger(self, kind: str, raw_id: str, raw_width: Optional[str]) -> Optional[Trigger]:
        fragment_id = int(raw_id)
        if not 0 < fragment_id <= self.max_id:
            return None
        width = int(raw_width) if raw_width is not None else None
        if width is not None and not self.min_width <= width <= self.max_width:
            width = None
        return Trigger(type=kind, id=fragment_id, max_width=width)

    def scan_html(self, html: str) -> List[Trigger]:
        """
        Triggers in ``html``: class triggers first, then href triggers, each
        in document order, de-duplicated per (type, id, width).
        """
        if not html or not isinstance(html, str) or "spp-trigger-" not in html:
            return []

        soup = BeautifulSoup(html, "html.parser")
        found: List[Trigger] = []
        seen: Set[Tuple[str, int, Optional[int]]] = set()

        def add(trigger: Optional[Trigger]) -> None:
            if trigger is None:
                return
            key = (trigger.type, trigger.id, trigger.max_width)
            if key not in seen:
                seen.add(key)
                found.append(trigger)

        for tag in soup.find_all(class_=True):
            for token in tag.get("class") or []:
                match = CLASS_TRIGGER_RE.match(token)
                if match:
                    add(self._trigger("class", match.group(1), match.group(2)))

        for tag in soup.find_all(href=True):
            for match in HREF_TRIGGER_RE.finditer(tag.get("href") or ""):
                add(self._trigger("href", match.group(1), match.group(2)))

        return found

    def fragment_ids(self, html: str) -> List[int]:
        """Distinct referenced fragment ids in trigger order."""
        ids: List[int] = []
        for trigger in self.scan_html(html):
            if trigger.id not in ids:
                ids.append(trigger.id)
        return ids
