"""chatframe protocol constants and enums."""

from enum import IntEnum

# ----------------------------------------------------------------------------
# Frame layout
# ----------------------------------------------------------------------------

HEADER_SIZE = 5  # 1-byte tag + 4-byte big-endian length
MAX_PAYLOAD_BYTES = 0xFFFF_FFFF

# ----------------------------------------------------------------------------
# Frame tags
# ----------------------------------------------------------------------------


class FrameTag(IntEnum):
    """Payload interpretation selected by the first byte of a frame."""

    PROTO = 0x00  # schema message
    PROTO_GZIP = 0x01  # gzip-compressed schema message
    JSON = 0x02  # JSON side channel
    JSON_GZIP = 0x03  # gzip-compressed JSON side channel

    @property
    def is_compressed(self) -> bool:
        return self in (FrameTag.PROTO_GZIP, FrameTag.JSON_GZIP)

    @property
    def is_json(self) -> bool:
        return self in (FrameTag.JSON, FrameTag.JSON_GZIP)


# ----------------------------------------------------------------------------
# Message roles
# ----------------------------------------------------------------------------


class Role(IntEnum):
    """Role numbers carried by request messages."""

    USER = 1
    ASSISTANT = 2


class ChatMode(IntEnum):
    """Chat mode enum carried by the request and user messages."""

    ASK = 1
    AGENT = 2


# ----------------------------------------------------------------------------
# Fixed protocol values
# ----------------------------------------------------------------------------

# Requests with this many non-system messages or more are gzip-compressed
COMPRESSION_THRESHOLD = 3

# Initial carry of the checksum byte obfuscation
OBFUSCATION_SEED = 165

# Wall-clock milliseconds per checksum timestamp unit
CHECKSUM_TIME_UNIT_MS = 1_000_000
CHECKSUM_TIMESTAMP_BYTES = 6

# Fallback image dimensions when sniffing fails
DEFAULT_IMAGE_WIDTH = 1024
DEFAULT_IMAGE_HEIGHT = 1024

# JPEG markers
JPEG_SOF_FIRST = 0xFFC0
JPEG_SOF_LAST = 0xFFC3
JPEG_EOI = 0xFFD9

# PNG signature halves
PNG_SIGNATURE_HEAD = 0x89504E47
PNG_SIGNATURE_TAIL = 0x0D0A1A0A
