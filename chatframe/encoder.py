"""Request encoder: chat turns to one outbound frame."""

import base64
import logging
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter

from .constants import COMPRESSION_THRESHOLD, ChatMode, FrameTag, Role
from .frames import Frame, compress, pack_frame
from .images import parse_data_uri, sniff_dimensions
from .messages import ChatTurn
from .profile import DEFAULT_PROFILE, ClientProfile
from .schema import load_request

_TURNS = TypeAdapter(list[ChatTurn])


def _coerce_turns(turns: Iterable[ChatTurn | Mapping[str, Any]]) -> list[ChatTurn]:
    turns = list(turns)
    if all(isinstance(turn, ChatTurn) for turn in turns):
        return turns  # type: ignore[return-value]
    return _TURNS.validate_python(
        [turn.model_dump() if isinstance(turn, ChatTurn) else turn for turn in turns]
    )


def _image_attachment(urls: list[str]) -> dict[str, Any] | None:
    """Build the schema image block from the last decodable data URI."""
    attachment = None
    for url in urls:
        parsed = parse_data_uri(url)
        if parsed is None:
            continue
        mime, data = parsed
        size = sniff_dimensions(mime, data)
        attachment = {
            "data": base64.b64encode(data).decode("ascii"),
            "metadata": {"width": size.width, "height": size.height},
        }
    return attachment


def normalize_turn(turn: ChatTurn) -> dict[str, Any]:
    """Map a non-system turn to a schema request message."""
    message: dict[str, Any] = {
        "role": Role.USER if turn.role == "user" else Role.ASSISTANT,
        "messageId": str(uuid.uuid4()),
        "content": "".join(turn.text_parts()),
    }
    if turn.role == "user":
        message["chatModeEnum"] = ChatMode.ASK

    image = _image_attachment(turn.image_urls())
    if image is not None:
        message["image"] = image
    return message


def build_instruction(turns: list[ChatTurn]) -> str:
    """Join the text of all system turns with newlines."""
    return "\n".join("\n".join(turn.text_parts()) for turn in turns if turn.is_system)


def build_request(
    turns: Iterable[ChatTurn | Mapping[str, Any]],
    model_name: str,
    profile: ClientProfile | None = None,
) -> Any:
    """Build and validate the request envelope.

    Args:
        turns: Chat turns, as models or OpenAI-style mappings
        model_name: Model the request is addressed to
        profile: Client identity (defaults to ``DEFAULT_PROFILE``)

    Returns:
        Populated ``ChatRequest`` message

    Raises:
        pydantic.ValidationError: If a turn is malformed
        SchemaValidationError: If the envelope violates the message schema
    """
    profile = profile or DEFAULT_PROFILE
    turns = _coerce_turns(turns)

    messages = [normalize_turn(turn) for turn in turns if not turn.is_system]
    message_ids = [{"role": m["role"], "messageId": m["messageId"]} for m in messages]

    body = {
        "request": {
            "messages": messages,
            "unknown2": 1,
            "instruction": {"instruction": build_instruction(turns)},
            "unknown4": 1,
            "model": {"name": model_name, "empty": ""},
            "webTool": "",
            "unknown13": 1,
            "cursorSetting": profile.settings(),
            "unknown19": 1,
            "conversationId": str(uuid.uuid4()),
            "metadata": profile.metadata(),
            "unknown27": 0,
            "messageIds": message_ids,
            "largeContext": 0,
            "unknown38": 0,
            "chatModeEnum": profile.chat_mode_enum,
            "unknown47": "",
            "unknown48": 0,
            "unknown49": 0,
            "unknown51": 0,
            "unknown53": 1,
            "chatMode": profile.chat_mode,
        }
    }
    return load_request(body)


def encode_request(
    turns: Iterable[ChatTurn | Mapping[str, Any]],
    model_name: str,
    profile: ClientProfile | None = None,
) -> bytes:
    """Encode chat turns into one outbound frame.

    Requests carrying ``COMPRESSION_THRESHOLD`` or more non-system messages
    are gzip-compressed and tagged ``PROTO_GZIP``.

    Args:
        turns: Chat turns, as models or OpenAI-style mappings
        model_name: Model the request is addressed to
        profile: Client identity (defaults to ``DEFAULT_PROFILE``)

    Returns:
        The framed request bytes
    """
    request = build_request(turns, model_name, profile)
    payload = request.SerializeToString()

    tag = FrameTag.PROTO
    if len(request.request.messages) >= COMPRESSION_THRESHOLD:
        payload = compress(payload)
        tag = FrameTag.PROTO_GZIP
    logging.debug("Encoded request: %d messages, tag=%d, %d bytes", len(request.request.messages), tag, len(payload))

    return pack_frame(Frame(tag=tag, payload=payload))
