"""Tests for the response frame parser and streaming decoder."""

import gzip
import json

import pytest

from chatframe import (
    ChatResponse,
    DecoderState,
    DecompressionError,
    Frame,
    FrameBoundsError,
    FrameTag,
    JsonParseError,
    ParseResult,
    SchemaDecodeError,
    StreamDecoder,
    pack_frame,
    parse_response,
)


def content_frame(content: str = "", thinking: str = "", compressed: bool = False) -> bytes:
    """Build a response message frame."""
    message = ChatResponse()
    if content:
        message.message.content = content
    if thinking:
        message.message.thinking.content = thinking
    payload = message.SerializeToString()
    if compressed:
        return pack_frame(Frame(tag=FrameTag.PROTO_GZIP, payload=gzip.compress(payload)))
    return pack_frame(Frame(tag=FrameTag.PROTO, payload=payload))


def json_frame(value, compressed: bool = False) -> bytes:
    """Build a JSON side-channel frame."""
    payload = json.dumps(value).encode()
    if compressed:
        return pack_frame(Frame(tag=FrameTag.JSON_GZIP, payload=gzip.compress(payload)))
    return pack_frame(Frame(tag=FrameTag.JSON, payload=payload))


def test_empty_buffer() -> None:
    """No frames decode to empty text."""
    result = parse_response(b"")

    assert result == ParseResult()
    assert result.to_dict() == {"reasoning_content": "", "content": ""}


def test_accumulates_reasoning_and_content() -> None:
    """Text is concatenated across frames in order, compressed or not."""
    buffer = (
        content_frame(thinking="Let me ")
        + content_frame(thinking="think.", compressed=True)
        + content_frame(content="Hello")
        + content_frame(content=", world", compressed=True)
        + content_frame(content="!", thinking="")
    )

    result = parse_response(buffer)

    assert result.reasoning == "Let me think."
    assert result.content == "Hello, world!"
    assert result.error is None
    assert result.failure is None
    assert result.frames == 5
    assert result.to_dict() == {"reasoning_content": "Let me think.", "content": "Hello, world!"}


def test_frame_with_both_fields() -> None:
    """One frame may carry thinking and content."""
    result = parse_response(content_frame(content="answer", thinking="why"))
    assert (result.reasoning, result.content) == ("why", "answer")


def test_error_overrides_content() -> None:
    """An error signal wins over accumulated text."""
    error = {"error": {"code": "resource_exhausted", "message": "Too many requests"}}
    buffer = content_frame(content="partial") + json_frame(error)

    result = parse_response(buffer)

    assert result.has_error
    assert result.error == json.dumps(error)
    assert result.content == ""
    assert result.to_dict() == {"error": json.dumps(error)}


def test_first_error_wins() -> None:
    """Later error signals do not replace the first one."""
    buffer = json_frame({"error": "first"}, compressed=True) + json_frame({"error": "second"})

    assert parse_response(buffer).error == '{"error": "first"}'


def test_non_error_signals_ignored() -> None:
    """Empty and non-error JSON signals leave the text untouched."""
    buffer = (
        content_frame(content="a")
        + json_frame({})
        + json_frame([])
        + json_frame(None)
        + json_frame({"usage": {"tokens": 3}})
        + json_frame(["error"])
        + content_frame(content="b")
    )

    result = parse_response(buffer)

    assert result.error is None
    assert result.content == "ab"
    assert result.frames == 7


def test_unknown_tags_skipped() -> None:
    """Frames with unknown tags are consumed without effect."""
    buffer = (
        pack_frame(Frame(tag=0x07, payload=b"\xde\xad\xbe\xef"))
        + content_frame(content="kept")
        + pack_frame(Frame(tag=0xFF, payload=b""))
    )

    result = parse_response(buffer)

    assert result.content == "kept"
    assert result.frames == 3
    assert result.failure is None


def test_declared_length_past_end() -> None:
    """A length running past the buffer aborts cleanly, keeping prior text."""
    buffer = content_frame(content="before") + b"\x00\x00\x00\x01\x00" + b"short" + content_frame(content="after")

    result = parse_response(buffer)

    assert result.content == "before"
    assert isinstance(result.failure, FrameBoundsError)


def test_truncated_header() -> None:
    """A trailing partial header aborts cleanly."""
    result = parse_response(content_frame(content="x") + b"\x00\x00")

    assert result.content == "x"
    assert isinstance(result.failure, FrameBoundsError)


@pytest.mark.parametrize(
    "bad_frame, error_type",
    [
        (pack_frame(Frame(tag=FrameTag.PROTO_GZIP, payload=b"not gzip")), DecompressionError),
        (pack_frame(Frame(tag=FrameTag.JSON_GZIP, payload=b"\x1f\x8b\x08\x00")), DecompressionError),
        (pack_frame(Frame(tag=FrameTag.PROTO, payload=b"\x0a\x05ab")), SchemaDecodeError),
        (pack_frame(Frame(tag=FrameTag.JSON, payload=b"{oops")), JsonParseError),
        (pack_frame(Frame(tag=FrameTag.JSON, payload=b"\xc3\x28")), JsonParseError),
    ],
)
def test_decode_failure_aborts(bad_frame: bytes, error_type: type) -> None:
    """A payload that fails to decode stops parsing and is reported."""
    buffer = content_frame(content="kept") + bad_frame + content_frame(content="dropped")

    result = parse_response(buffer)

    assert result.content == "kept"
    assert isinstance(result.failure, error_type)


def test_error_survives_later_failure() -> None:
    """An error signal seen before a malformed frame is still returned."""
    buffer = json_frame({"error": "boom"}) + b"\x02\x00\x00\x00\x09{"

    result = parse_response(buffer)

    assert result.error == '{"error": "boom"}'
    assert isinstance(result.failure, FrameBoundsError)


# ----------------------------------------------------------------------------
# StreamDecoder
# ----------------------------------------------------------------------------


def test_stream_decoder_byte_by_byte() -> None:
    """Frames split at every byte decode to the same text as one buffer."""
    buffer = (
        content_frame(thinking="hmm")
        + content_frame(content="Hello", compressed=True)
        + json_frame({"usage": 1})
        + content_frame(content=" there")
    )
    decoder = StreamDecoder()

    results = [decoder.feed(buffer[i : i + 1]) for i in range(len(buffer))]

    assert "".join(r.reasoning for r in results) == "hmm"
    assert "".join(r.content for r in results) == "Hello there"
    assert sum(r.frames for r in results) == 4
    assert decoder.pending == 0
    assert decoder.state is DecoderState.AWAITING_HEADER
    decoder.close()


def test_stream_decoder_states() -> None:
    """State follows the position within the current frame."""
    frame = content_frame(content="abc")
    decoder = StreamDecoder()

    assert decoder.feed(frame[:3]).frames == 0
    assert decoder.state is DecoderState.AWAITING_HEADER
    assert decoder.pending == 3

    assert decoder.feed(frame[3:6]).frames == 0
    assert decoder.state is DecoderState.AWAITING_PAYLOAD
    assert decoder.pending == 6

    result = decoder.feed(frame[6:] + frame)
    assert result.content == "abcabc"
    assert result.frames == 2
    assert decoder.pending == 0


def test_stream_decoder_close_with_partial_frame() -> None:
    """Closing inside a frame raises a bounds error."""
    frame = content_frame(content="abc")

    decoder = StreamDecoder()
    decoder.feed(frame[:-1])
    with pytest.raises(FrameBoundsError):
        decoder.close()

    decoder = StreamDecoder()
    decoder.feed(frame[:2])
    with pytest.raises(FrameBoundsError):
        decoder.close()


def test_stream_decoder_skips_bad_frame() -> None:
    """A frame that fails to decode is skipped; later frames still decode."""
    buffer = (
        content_frame(content="a")
        + pack_frame(Frame(tag=FrameTag.PROTO_GZIP, payload=b"garbage"))
        + content_frame(content="b")
    )
    decoder = StreamDecoder()

    result = decoder.feed(buffer)

    assert result.content == "ab"
    assert isinstance(result.failure, DecompressionError)
    assert result.frames == 3


def test_stream_decoder_error_signal() -> None:
    """Error signals are reported per feed call."""
    decoder = StreamDecoder()

    first = decoder.feed(content_frame(content="text"))
    second = decoder.feed(json_frame({"error": "denied"}))

    assert first.content == "text"
    assert second.to_dict() == {"error": '{"error": "denied"}'}


def test_custom_codec_output_ignored() -> None:
    """Frames decoded by a custom codec do not affect text or errors."""
    from chatframe.codecs import _CODECS, Codec, register_codec

    class RawCodec(Codec):
        def encode(self, data):
            return bytes(data)

        def decode(self, data):
            return data

    register_codec(0x42, RawCodec)
    try:
        buffer = pack_frame(Frame(tag=0x42, payload=b'{"error":"x"}')) + content_frame(content="ok")
        result = parse_response(buffer)
    finally:
        del _CODECS[0x42]

    assert result.content == "ok"
    assert result.frames == 2


@pytest.mark.parametrize(
    "payload",
    [
        b'{"n": ' + b"9" * 5000 + b"}",
        b"[" * 200_000 + b"]" * 200_000,
    ],
)
def test_oversized_json_signal_aborts(payload: bytes) -> None:
    """Huge integers and deep nesting are reported, not raised."""
    buffer = content_frame(content="kept") + pack_frame(Frame(tag=FrameTag.JSON, payload=payload))

    result = parse_response(buffer)
    assert result.content == "kept"
    assert isinstance(result.failure, JsonParseError)

    streamed = StreamDecoder().feed(buffer)
    assert streamed.content == "kept"
    assert isinstance(streamed.failure, JsonParseError)
