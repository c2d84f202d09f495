"""
Content models — fragments as the content store exposes them.

The store owns fragments; this package only reads them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable


class FragmentStatus:
    """Visibility states; only ``PUBLISH`` is publicly visible."""

    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    FUTURE = "future"
    TRASH = "trash"


@dataclass(frozen=True)
class Fragment:
    """
    A reusable, addressable piece of content.

    ``access_control`` is the access-control attribute (e.g. a password);
    any non-empty value restricts the fragment.
    """

    id: int
    content: str = ""
    title: str = ""
    status: str = FragmentStatus.PUBLISH
    access_control: str = ""
    shareable: bool = True

    @property
    def is_public(self) -> bool:
        return self.status == FragmentStatus.PUBLISH

    @property
    def is_restricted(self) -> bool:
        return bool(self.access_control)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fragment":
        return cls(
            id=int(data["id"]),
            content=data.get("content") or "",
            title=data.get("title") or "",
            status=data.get("status") or FragmentStatus.DRAFT,
            access_control=data.get("access_control") or "",
            shareable=bool(data.get("shareable", False)),
        )


AccessPolicy = Callable[[Fragment], bool]


def is_renderable(fragment: Optional[Fragment], access_policy: Optional[AccessPolicy] = None) -> bool:
    """
    Whether a fragment may be rendered standalone.

    Absent, not public, restricted, unshareable and policy-denied fragments
    are all simply "not renderable"; callers must not tell them apart.
    """
    if fragment is None:
        return False
    if not fragment.is_public or fragment.is_restricted or not fragment.shareable:
        return False
    if access_policy is not None and not access_policy(fragment):
        return False
    return True


@runtime_checkable
class ContentProvider(Protocol):
    def get_fragment(self, fragment_id: int) -> Optional[Fragment]:
        ...


class InMemoryContentProvider:
    """Dict-backed content provider."""

    def __init__(self, fragments: Optional[Dict[int, Fragment]] = None):
        self._fragments: Dict[int, Fragment] = dict(fragments or {})

    def put(self, fragment: Fragment) -> None:
        self._fragments[fragment.id] = fragment

    def remove(self, fragment_id: int) -> None:
        self._fragments.pop(fragment_id, None)

    def get_fragment(self, fragment_id: int) -> Optional[Fragment]:
        return self._fragments.get(fragment_id)
