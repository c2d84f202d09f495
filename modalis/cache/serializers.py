"""
ModalisCache — Byte codecs for the durable tier.

A cached render is a plain wire dict (strings, lists, nested dicts), so
the codec only has to be compact and portable. JSON is the default;
msgpack is available through the ``modalis[msgpack]`` extra.

Codecs raise whatever their library raises; ``RedisBackend`` turns that
into ``CacheSerializationFault``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Type

from ..faults import CacheConfigFault


class JsonCacheSerializer:
    """UTF-8 JSON. Values JSON cannot express are stored as ``str()``."""

    name = "json"

    def serialize(self, value: Any) -> bytes:
        return json.dumps(value, default=str, ensure_ascii=False).encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)


class MsgpackCacheSerializer:
    """MessagePack; the library is imported on first use."""

    name = "msgpack"

    def serialize(self, value: Any) -> bytes:
        import msgpack

        return msgpack.packb(value, use_bin_type=True, default=str)

    def deserialize(self, data: bytes) -> Any:
        import msgpack

        return msgpack.unpackb(data, raw=False)


SERIALIZERS: Dict[str, Type] = {
    JsonCacheSerializer.name: JsonCacheSerializer,
    MsgpackCacheSerializer.name: MsgpackCacheSerializer,
}


def get_serializer(name: str = "json"):
    """
    Codec registered under ``name``.

    Raises:
        CacheConfigFault: unknown codec name
    """
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise CacheConfigFault(
            reason=f"Unknown serializer '{name}', expected one of {sorted(SERIALIZERS)}"
        ) from None
