"""Protobuf codec for schema message frames."""

from typing import Any

from google.protobuf.message import DecodeError, Message

from ..errors import SchemaDecodeError
from ..schema import ChatResponse
from .base import Codec


class ProtobufCodec(Codec):
    """Protobuf codec bound to one schema message class."""

    def __init__(self, message_class: type = ChatResponse):
        """Initialize codec.

        Args:
            message_class: Schema message class payloads decode into
        """
        self.message_class = message_class

    def encode(self, data: Any) -> bytes:
        """Encode a protobuf message to bytes.

        Args:
            data: Message instance (any schema message class)

        Returns:
            Serialized Protobuf bytes
        """
        if not isinstance(data, Message):
            raise TypeError(f"Expected a protobuf message, got {type(data).__name__}")
        return data.SerializeToString()

    def decode(self, data: bytes) -> Any:
        """Decode Protobuf bytes to a message.

        Args:
            data: Serialized Protobuf bytes

        Returns:
            Instance of ``message_class``

        Raises:
            SchemaDecodeError: If the bytes do not parse as ``message_class``
        """
        message = self.message_class()
        try:
            message.ParseFromString(data)
        except DecodeError as exc:
            raise SchemaDecodeError(f"Invalid {message.DESCRIPTOR.name} payload: {exc}") from exc
        return message
