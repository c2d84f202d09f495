"""
ModalisCache — Cache key builder.

Both tiers store a render result under the same derived key so a single
``delete()`` or prefix scan reaches every copy.
"""

from __future__ import annotations


class FragmentKeyBuilder:
    """
    Colon-free key builder for fragment-scoped entries.

    Pattern: ``{prefix}{kind}_{fragment_id}``

    Example: ``modalis:block_42`` and ``modalis:pattern_42``

    A non-zero version is embedded after the prefix; bumping it makes every
    previous key invisible.
    """

    RENDER = "block"
    FRAGMENT_OBJECT = "pattern"

    def __init__(self, prefix: str = "modalis:", version: int = 0):
        self._prefix = prefix
        self._version = version

    @property
    def prefix(self) -> str:
        """Common prefix of every key this builder produces."""
        if self._version > 0:
            return f"{self._prefix}v{self._version}:"
        return self._prefix

    def build(self, kind: str, fragment_id: int) -> str:
        return f"{self.prefix}{kind}_{int(fragment_id)}"

    def render_key(self, fragment_id: int) -> str:
        return self.build(self.RENDER, fragment_id)

    def fragment_object_key(self, fragment_id: int) -> str:
        return self.build(self.FRAGMENT_OBJECT, fragment_id)

    @property
    def render_prefix(self) -> str:
        """Prefix shared by every render entry; used for durable scans."""
        return f"{self.prefix}{self.RENDER}_"
