# Copyright 2025 Maida.AI
# SPDX-License-Identifier: Apache-2.0
r"""chatframe - Binary framing codec for a streamed chat request/response protocol.

This package provides:
- Request encoding: chat turns to one length-prefixed, optionally gzip-compressed frame
- Response parsing: concatenated frames to reasoning text, content text or an error signal
- A streaming decoder for frame data delivered in arbitrary chunks
- Coarse JPEG/PNG dimension sniffing for image attachments
- The time-salted checksum token used to authenticate requests
"""

# Import public API from modules
from .checksum import generate_checksum, hashed_hex, obfuscate_bytes
from .codecs import (
    Codec,
    JSONCodec,
    JSONSignal,
    ProtobufCodec,
    get_codec,
    list_codecs,
    register_codec,
)
from .constants import (
    COMPRESSION_THRESHOLD,
    HEADER_SIZE,
    MAX_PAYLOAD_BYTES,
    OBFUSCATION_SEED,
    ChatMode,
    FrameTag,
    Role,
)
from .encoder import build_request, encode_request
from .errors import (
    ChatFrameError,
    DecompressionError,
    FrameBoundsError,
    FrameError,
    JsonParseError,
    SchemaDecodeError,
    SchemaValidationError,
)
from .frames import (
    Frame,
    iter_frames,
    pack_frame,
    unpack_header,
)
from .images import (
    DEFAULT_IMAGE_SIZE,
    ImageSize,
    sniff_dimensions,
    sniff_jpeg,
    sniff_png,
)
from .messages import ChatTurn, ImagePart, ImageURL, TextPart
from .parser import DecoderState, ParseResult, StreamDecoder, parse_response
from .profile import DEFAULT_PROFILE, ClientProfile
from .schema import ChatRequest, ChatResponse

# Public API exports
__all__ = [
    # Core classes
    "Frame",
    "ChatTurn",
    "TextPart",
    "ImagePart",
    "ImageURL",
    "ClientProfile",
    "ParseResult",
    "StreamDecoder",
    "DecoderState",
    "ImageSize",
    "ChatRequest",
    "ChatResponse",
    "Codec",
    "JSONCodec",
    "JSONSignal",
    "ProtobufCodec",
    # Constants and enums
    "FrameTag",
    "Role",
    "ChatMode",
    "HEADER_SIZE",
    "MAX_PAYLOAD_BYTES",
    "COMPRESSION_THRESHOLD",
    "OBFUSCATION_SEED",
    "DEFAULT_IMAGE_SIZE",
    "DEFAULT_PROFILE",
    # Errors
    "ChatFrameError",
    "SchemaValidationError",
    "FrameError",
    "FrameBoundsError",
    "DecompressionError",
    "SchemaDecodeError",
    "JsonParseError",
    # Codec
    "encode_request",
    "build_request",
    "parse_response",
    "pack_frame",
    "unpack_header",
    "iter_frames",
    # Images
    "sniff_jpeg",
    "sniff_png",
    "sniff_dimensions",
    # Checksum
    "generate_checksum",
    "hashed_hex",
    "obfuscate_bytes",
    # Codec utilities
    "get_codec",
    "list_codecs",
    "register_codec",
]
