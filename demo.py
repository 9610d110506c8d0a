#!/usr/bin/env python3
"""Demo script showing a chatframe request/response exchange without a network."""

import gzip
import json
import logging

from chatframe import (
    ChatResponse,
    ChatTurn,
    Frame,
    FrameTag,
    StreamDecoder,
    encode_request,
    generate_checksum,
    iter_frames,
    pack_frame,
    parse_response,
)


def demo_request():
    """Encode a short and a long conversation and show the frame headers."""
    turns = [
        ChatTurn.create_text("system", "You are a terse assistant."),
        ChatTurn.create_text("user", "What is a frame?"),
    ]
    for label, conversation in [("short", turns), ("long", turns + turns[1:] * 3)]:
        data = encode_request(conversation, "demo-model")
        frame = next(iter_frames(data))
        print(f"{label:5} request: tag={frame.tag} ({FrameTag(frame.tag).name}), {len(frame.payload)} payload bytes")


def fake_response() -> bytes:
    """Build the byte stream a server would send back."""
    chunks = []
    for thinking, content in [("The user asks ", ""), ("about frames.", ""), ("", "A frame is "), ("", "a tagged unit.")]:
        message = ChatResponse()
        if thinking:
            message.message.thinking.content = thinking
        if content:
            message.message.content = content
        chunks.append(pack_frame(Frame(tag=FrameTag.PROTO_GZIP, payload=gzip.compress(message.SerializeToString()))))
    chunks.append(pack_frame(Frame(tag=FrameTag.JSON, payload=json.dumps({"usage": {"output_tokens": 9}}).encode())))
    return b"".join(chunks)


def demo_response():
    """Decode the fake response in one pass and in network-sized chunks."""
    stream = fake_response()

    result = parse_response(stream)
    print(f"reasoning: {result.reasoning!r}")
    print(f"content:   {result.content!r}")

    decoder = StreamDecoder()
    for i in range(0, len(stream), 7):
        partial = decoder.feed(stream[i : i + 7])
        if partial.content:
            print(f"chunk {i // 7:2}: {partial.content!r}")
    decoder.close()

    error = pack_frame(Frame(tag=FrameTag.JSON, payload=b'{"error":{"code":"unauthenticated"}}'))
    print(f"with error: {parse_response(stream + error).to_dict()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(f"checksum: {generate_checksum('demo-secret')}")
    demo_request()
    demo_response()
