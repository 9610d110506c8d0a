"""Base codec interface for frame payloads."""

from abc import ABC, abstractmethod
from typing import Any

from ..frames import decompress


class Codec(ABC):
    """Base interface for frame payload codecs.

    Subclasses work on uncompressed payloads; gzip handling is shared.
    """

    @abstractmethod
    def encode(self, data: Any) -> bytes:
        """Encode data to an uncompressed payload."""
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Decode an uncompressed payload."""
        pass

    def decode_payload(self, payload: bytes, compressed: bool = False) -> Any:
        """Decode a frame payload, gunzipping it first if ``compressed``.

        Raises:
            DecompressionError: If a compressed payload is not valid gzip
        """
        return self.decode(decompress(payload) if compressed else payload)
