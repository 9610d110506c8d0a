"""Frame structures and serialization."""

import gzip
import logging
import struct
import zlib
from collections.abc import Iterator
from dataclasses import dataclass

from .constants import HEADER_SIZE, MAX_PAYLOAD_BYTES
from .errors import DecompressionError, FrameBoundsError

_HEADER = struct.Struct(">BI")

# ----------------------------------------------------------------------------
# Frame structures
# ----------------------------------------------------------------------------


@dataclass
class Frame:
    """One tagged, length-prefixed unit of the wire protocol."""

    tag: int
    payload: bytes

    @property
    def size(self) -> int:
        """Encoded size of the frame on the wire."""
        return HEADER_SIZE + len(self.payload)


# ----------------------------------------------------------------------------
# Frame serialization/deserialization
# ----------------------------------------------------------------------------


def pack_frame(frame: Frame) -> bytes:
    """Pack a Frame into its binary wire format.

    Args:
        frame: The frame to serialize

    Returns:
        Tag byte, big-endian 4-byte payload length, then the payload

    Raises:
        ValueError: If the tag or payload length does not fit the header
    """
    if not 0 <= frame.tag <= 0xFF:
        raise ValueError(f"Frame tag out of range: {frame.tag}")
    if len(frame.payload) > MAX_PAYLOAD_BYTES:
        raise ValueError(f"Frame payload too large: {len(frame.payload)} bytes")
    return _HEADER.pack(frame.tag, len(frame.payload)) + frame.payload


def unpack_header(buffer: bytes, offset: int = 0) -> tuple[int, int]:
    """Read the ``(tag, length)`` header at ``offset``.

    Raises:
        FrameBoundsError: If fewer than ``HEADER_SIZE`` bytes remain
    """
    if len(buffer) - offset < HEADER_SIZE:
        raise FrameBoundsError(f"Truncated frame header at offset {offset}")
    tag, length = _HEADER.unpack_from(buffer, offset)
    return tag, length


def iter_frames(buffer: bytes) -> Iterator[Frame]:
    """Yield every frame of a frame-aligned buffer, in order.

    Args:
        buffer: Concatenation of zero or more frames

    Yields:
        Parsed frames

    Raises:
        FrameBoundsError: If a header or declared payload runs past the end;
            raised after all preceding frames have been yielded
    """
    view = memoryview(buffer)
    offset = 0
    while offset < len(view):
        tag, length = unpack_header(view, offset)
        start = offset + HEADER_SIZE
        end = start + length
        if end > len(view):
            raise FrameBoundsError(
                f"Frame at offset {offset} declares {length} bytes, only {len(view) - start} remain"
            )
        logging.debug("Frame at offset %d: tag=%d length=%d", offset, tag, length)
        yield Frame(tag=tag, payload=bytes(view[start:end]))
        offset = end


# ----------------------------------------------------------------------------
# Compression
# ----------------------------------------------------------------------------


def compress(payload: bytes) -> bytes:
    """Gzip-compress a payload."""
    return gzip.compress(payload)


def decompress(payload: bytes) -> bytes:
    """Gunzip a payload.

    Raises:
        DecompressionError: If the payload is not a complete gzip stream
    """
    try:
        return gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(f"Invalid gzip payload: {exc}") from exc
