"""JSON codec for side-channel frames."""

import json
from dataclasses import dataclass
from typing import Any

from ..errors import JsonParseError
from .base import Codec


@dataclass
class JSONSignal:
    """Decoded side-channel payload together with its raw text."""

    text: str
    value: Any

    @property
    def is_empty(self) -> bool:
        """True for null, ``{}`` and ``[]``."""
        if self.value is None:
            return True
        if isinstance(self.value, dict | list):
            return len(self.value) == 0
        return False

    @property
    def error(self) -> str | None:
        """Raw text of the signal if it carries an ``error`` field."""
        if isinstance(self.value, dict) and self.value.get("error"):
            return self.text
        return None


class JSONCodec(Codec):
    """JSON codec for error and diagnostic signals."""

    def encode(self, data: Any) -> bytes:
        """Encode data to JSON bytes.

        Args:
            data: Data to encode (JSONSignal or any JSON-serializable value)

        Returns:
            UTF-8 encoded JSON bytes
        """
        if isinstance(data, JSONSignal):
            return data.text.encode("utf-8")
        return json.dumps(data, separators=(",", ":")).encode("utf-8")

    def decode(self, data: bytes) -> JSONSignal:
        """Decode JSON bytes to a signal.

        Args:
            data: UTF-8 encoded JSON bytes

        Returns:
            Signal holding the raw text and the parsed value

        Raises:
            JsonParseError: If the payload is not UTF-8 or not JSON
        """
        try:
            text = data.decode("utf-8")
            return JSONSignal(text=text, value=json.loads(text))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise JsonParseError(f"Invalid JSON side-channel payload: {exc}") from exc
