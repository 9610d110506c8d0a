"""Payload codecs keyed by frame tag."""

from collections.abc import Callable

from ..constants import FrameTag
from .base import Codec

# Import all codec implementations
from .json_codec import JSONCodec, JSONSignal
from .protobuf_codec import ProtobufCodec

__all__ = [
    "Codec",
    "JSONCodec",
    "JSONSignal",
    "ProtobufCodec",
    "register_codec",
    "get_codec",
    "list_codecs",
]


# Codec registry
_CODECS: dict[int, Callable[[], Codec]] = {}


def register_codec(tag: int, factory: Callable[[], Codec]) -> None:
    """Register a codec factory for a frame tag."""
    _CODECS[tag] = factory


def get_codec(tag: int) -> Codec:
    """Get a codec instance by frame tag."""
    if tag not in _CODECS:
        raise ValueError(f"Unsupported frame tag: {tag}")
    return _CODECS[tag]()


def list_codecs() -> list[int]:
    """List all registered frame tags."""
    return list(_CODECS.keys())


# Register default codecs
register_codec(FrameTag.PROTO, ProtobufCodec)
register_codec(FrameTag.PROTO_GZIP, ProtobufCodec)
register_codec(FrameTag.JSON, JSONCodec)
register_codec(FrameTag.JSON_GZIP, JSONCodec)
