"""Coarse JPEG/PNG dimension sniffing and image data-URI handling."""

import base64
import binascii
import logging
import re
import struct
from typing import NamedTuple

from .constants import (
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    JPEG_EOI,
    JPEG_SOF_FIRST,
    JPEG_SOF_LAST,
    PNG_SIGNATURE_HEAD,
    PNG_SIGNATURE_TAIL,
)

_DATA_URI_MIME = re.compile(r"data:image/([^;]+)")


class ImageSize(NamedTuple):
    """Pixel dimensions of an image."""

    width: int
    height: int


DEFAULT_IMAGE_SIZE = ImageSize(DEFAULT_IMAGE_WIDTH, DEFAULT_IMAGE_HEIGHT)


def sniff_jpeg(data: bytes) -> ImageSize:
    """Read width/height from the first Start-Of-Frame segment of a JPEG.

    Args:
        data: Raw JPEG bytes

    Returns:
        Image size, or ``DEFAULT_IMAGE_SIZE`` if no SOF segment can be read
    """
    offset = 2  # SOI
    try:
        while offset < len(data):
            (marker,) = struct.unpack_from(">H", data, offset)
            offset += 2

            if JPEG_SOF_FIRST <= marker <= JPEG_SOF_LAST:
                offset += 3  # segment length + sample precision
                height, width = struct.unpack_from(">HH", data, offset)
                return ImageSize(width, height)

            if marker == JPEG_EOI:
                break

            (length,) = struct.unpack_from(">H", data, offset)
            offset += length
    except struct.error:
        pass
    return DEFAULT_IMAGE_SIZE


def sniff_png(data: bytes) -> ImageSize:
    """Read width/height from the IHDR chunk of a PNG.

    Args:
        data: Raw PNG bytes

    Returns:
        Image size, or ``DEFAULT_IMAGE_SIZE`` if the signature does not match
    """
    if len(data) < 24:
        return DEFAULT_IMAGE_SIZE
    head, tail = struct.unpack_from(">II", data, 0)
    if head != PNG_SIGNATURE_HEAD or tail != PNG_SIGNATURE_TAIL:
        return DEFAULT_IMAGE_SIZE
    width, height = struct.unpack_from(">II", data, 16)
    return ImageSize(width, height)


def sniff_dimensions(mime: str, data: bytes) -> ImageSize:
    """Sniff dimensions for a declared image MIME subtype.

    Unsupported subtypes and zero dimensions fall back to the defaults.
    """
    if mime in ("jpeg", "jpg"):
        size = sniff_jpeg(data)
    elif mime == "png":
        size = sniff_png(data)
    else:
        size = DEFAULT_IMAGE_SIZE
    return ImageSize(size.width or DEFAULT_IMAGE_WIDTH, size.height or DEFAULT_IMAGE_HEIGHT)


def parse_data_uri(url: str) -> tuple[str, bytes] | None:
    """Split a ``data:image/<mime>;base64,<payload>`` URL.

    Args:
        url: Image URL from a chat content part

    Returns:
        ``(mime, raw bytes)``, or None for external URLs and undecodable data
    """
    if not url.startswith("data:image/"):
        return None

    header, _, payload = url.partition(",")
    match = _DATA_URI_MIME.match(header)
    if not payload or match is None:
        return None

    try:
        data = base64.b64decode(payload)
    except (binascii.Error, ValueError) as exc:
        logging.warning("Failed to decode image data URI: %s", exc)
        return None
    return match.group(1), data
