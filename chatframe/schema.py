"""Protobuf message schema for chat requests and responses.

The descriptors are assembled with ``descriptor_pb2`` instead of being
generated by ``protoc``; field numbers follow the service's wire schema. The
codec only relies on the operations exposed here (load/validate, serialize,
parse) and on the field names used by the encoder and parser.
"""

from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory

from .errors import SchemaValidationError

PACKAGE = "chatframe"

_FDP = descriptor_pb2.FieldDescriptorProto

_SCALARS = {
    "string": _FDP.TYPE_STRING,
    "bytes": _FDP.TYPE_BYTES,
    "int32": _FDP.TYPE_INT32,
}

# message name -> [(number, field name, type, repeated)]
_MESSAGES: dict[str, list[tuple[int, str, str, bool]]] = {
    # ---- request side -------------------------------------------------------
    "ChatRequest": [
        (1, "request", "RequestBody", False),
    ],
    "RequestBody": [
        (1, "messages", "RequestMessage", True),
        (2, "unknown2", "int32", False),
        (3, "instruction", "Instruction", False),
        (4, "unknown4", "int32", False),
        (5, "model", "Model", False),
        (8, "web_tool", "string", False),
        (13, "unknown13", "int32", False),
        (15, "cursor_setting", "Settings", False),
        (19, "unknown19", "int32", False),
        (23, "conversation_id", "string", False),
        (26, "metadata", "ClientMetadata", False),
        (27, "unknown27", "int32", False),
        (30, "message_ids", "MessageRef", True),
        (35, "large_context", "int32", False),
        (38, "unknown38", "int32", False),
        (46, "chat_mode_enum", "int32", False),
        (47, "unknown47", "string", False),
        (48, "unknown48", "int32", False),
        (49, "unknown49", "int32", False),
        (51, "unknown51", "int32", False),
        (53, "unknown53", "int32", False),
        (54, "chat_mode", "string", False),
    ],
    "RequestMessage": [
        (1, "content", "string", False),
        (2, "role", "int32", False),
        (10, "image", "Image", False),
        (13, "message_id", "string", False),
        (47, "chat_mode_enum", "int32", False),
    ],
    "Image": [
        (1, "data", "bytes", False),
        (2, "metadata", "ImageMetadata", False),
    ],
    "ImageMetadata": [
        (1, "width", "int32", False),
        (2, "height", "int32", False),
    ],
    "Instruction": [
        (1, "instruction", "string", False),
    ],
    "Model": [
        (1, "name", "string", False),
        (4, "empty", "string", False),
    ],
    "Settings": [
        (1, "name", "string", False),
        (3, "unknown3", "string", False),
        (6, "unknown6", "SettingsExtra", False),
        (8, "unknown8", "int32", False),
        (9, "unknown9", "int32", False),
    ],
    "SettingsExtra": [
        (1, "unknown1", "string", False),
        (2, "unknown2", "string", False),
    ],
    "ClientMetadata": [
        (1, "os", "string", False),
        (2, "arch", "string", False),
        (3, "version", "string", False),
        (4, "path", "string", False),
        (5, "timestamp", "string", False),
    ],
    "MessageRef": [
        (1, "message_id", "string", False),
        (2, "summary_id", "string", False),
        (3, "role", "int32", False),
    ],
    # ---- response side ------------------------------------------------------
    "ChatResponse": [
        (1, "message", "ResponseMessage", False),
    ],
    "ResponseMessage": [
        (1, "content", "string", False),
        (25, "thinking", "Thinking", False),
    ],
    "Thinking": [
        (1, "content", "string", False),
    ],
}


def _json_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _field(number: int, name: str, type_: str, repeated: bool) -> descriptor_pb2.FieldDescriptorProto:
    field = _FDP(
        name=name,
        number=number,
        json_name=_json_name(name),
        label=_FDP.LABEL_REPEATED if repeated else _FDP.LABEL_OPTIONAL,
    )
    if type_ in _SCALARS:
        field.type = _SCALARS[type_]
    else:
        field.type = _FDP.TYPE_MESSAGE
        field.type_name = f".{PACKAGE}.{type_}"
    return field


def build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Return the schema as a ``FileDescriptorProto``."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=f"{PACKAGE}/chat.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        message.field.extend(_field(*entry) for entry in fields)
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(build_file_descriptor().SerializeToString())


def message_class(name: str) -> type:
    """Return the generated message class for a schema message name."""
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PACKAGE}.{name}"))


ChatRequest = message_class("ChatRequest")
ChatResponse = message_class("ChatResponse")


def load_request(body: dict[str, Any]) -> Any:
    """Validate a JSON-shaped request body and build a ``ChatRequest``.

    Args:
        body: Mapping in the schema's JSON form (camelCase names, bytes as base64)

    Returns:
        Populated ``ChatRequest`` message

    Raises:
        SchemaValidationError: If the body does not conform to the schema
    """
    try:
        return json_format.ParseDict(body, ChatRequest())
    except json_format.ParseError as exc:
        raise SchemaValidationError(str(exc)) from exc
