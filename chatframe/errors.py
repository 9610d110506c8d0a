"""Exception types raised by the chatframe codec."""


class ChatFrameError(Exception):
    """Base exception for chatframe."""


class SchemaValidationError(ChatFrameError, ValueError):
    """Raised when a request envelope does not conform to the message schema."""


class FrameError(ChatFrameError, ValueError):
    """Base exception for malformed inbound frames."""


class FrameBoundsError(FrameError):
    """Raised when a frame header or payload runs past the end of the buffer."""


class DecompressionError(FrameError):
    """Raised when a gzip-compressed payload is corrupt or truncated."""


class SchemaDecodeError(FrameError):
    """Raised when a payload does not decode as the response schema."""


class JsonParseError(FrameError):
    """Raised when a side-channel payload is not valid UTF-8 JSON."""
