"""Tests for payload codecs and the codec registry."""

import pytest

from chatframe import ChatResponse, FrameTag, JsonParseError, SchemaDecodeError, get_codec, list_codecs
from chatframe.codecs import Codec, JSONCodec, JSONSignal, ProtobufCodec, register_codec


def test_codec_registry() -> None:
    """Every known frame tag has a codec."""
    tags = list_codecs()
    for tag in FrameTag:
        assert tag in tags

    assert isinstance(get_codec(FrameTag.PROTO), ProtobufCodec)
    assert isinstance(get_codec(FrameTag.PROTO_GZIP), ProtobufCodec)
    assert isinstance(get_codec(FrameTag.JSON), JSONCodec)
    assert isinstance(get_codec(FrameTag.JSON_GZIP), JSONCodec)

    with pytest.raises(ValueError):
        get_codec(0x99)


def test_register_codec() -> None:
    """Custom codecs can be registered for new tags."""

    class RawCodec(Codec):
        def encode(self, data):
            return bytes(data)

        def decode(self, data):
            return data

    register_codec(0x42, RawCodec)
    try:
        assert get_codec(0x42).decode(b"raw") == b"raw"
    finally:
        from chatframe.codecs import _CODECS

        del _CODECS[0x42]


def test_protobuf_codec_roundtrip() -> None:
    """Response messages survive encode/decode."""
    codec = ProtobufCodec()
    message = ChatResponse()
    message.message.content = "hello"
    message.message.thinking.content = "hmm"

    decoded = codec.decode(codec.encode(message))

    assert decoded.message.content == "hello"
    assert decoded.message.thinking.content == "hmm"


def test_protobuf_codec_errors() -> None:
    """Non-messages are rejected; malformed bytes raise SchemaDecodeError."""
    codec = ProtobufCodec()
    with pytest.raises(TypeError):
        codec.encode({"message": {}})
    with pytest.raises(SchemaDecodeError):
        codec.decode(b"\x0a\x05ab")


def test_json_codec_signal() -> None:
    """JSON payloads decode to a signal with raw text and value."""
    codec = JSONCodec()
    signal = codec.decode(b'{"error":{"code":"unauthenticated"}}')

    assert signal.text == '{"error":{"code":"unauthenticated"}}'
    assert signal.value == {"error": {"code": "unauthenticated"}}
    assert signal.error == signal.text
    assert not signal.is_empty
    assert codec.encode(signal) == signal.text.encode()
    assert codec.encode({"a": 1}) == b'{"a":1}'


def test_json_signal_emptiness() -> None:
    """Null, empty objects and empty arrays are empty signals."""
    assert JSONSignal("null", None).is_empty
    assert JSONSignal("{}", {}).is_empty
    assert JSONSignal("[]", []).is_empty
    assert not JSONSignal("0", 0).is_empty
    assert not JSONSignal('["error"]', ["error"]).is_empty
    assert JSONSignal('["error"]', ["error"]).error is None
    assert JSONSignal('{"error":""}', {"error": ""}).error is None
    assert JSONSignal('{"info":1}', {"info": 1}).error is None


def test_json_codec_invalid() -> None:
    """Invalid UTF-8 or JSON raises JsonParseError."""
    codec = JSONCodec()
    with pytest.raises(JsonParseError):
        codec.decode(b"{not json")
    with pytest.raises(JsonParseError):
        codec.decode(b"\xff\xfe")


def test_decode_payload_gunzips() -> None:
    """Compressed payloads are gunzipped before decoding."""
    import gzip

    from chatframe import DecompressionError

    codec = JSONCodec()
    assert codec.decode_payload(gzip.compress(b'{"a":1}'), compressed=True).value == {"a": 1}
    assert codec.decode_payload(b'{"a":1}').value == {"a": 1}
    with pytest.raises(DecompressionError):
        codec.decode_payload(b'{"a":1}', compressed=True)


def test_json_codec_limits() -> None:
    """Integer-size and nesting limits of the JSON parser raise JsonParseError."""
    codec = JSONCodec()
    with pytest.raises(JsonParseError):
        codec.decode(b"9" * 5000)
    with pytest.raises(JsonParseError):
        codec.decode(b"[" * 200_000 + b"]" * 200_000)
