"""Response frame parser: inbound bytes to reasoning/content text or an error."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .codecs import JSONSignal, get_codec, list_codecs
from .constants import HEADER_SIZE, FrameTag
from .errors import FrameBoundsError, FrameError
from .frames import Frame, iter_frames, unpack_header
from .schema import ChatResponse

_COMPRESSED_TAGS = frozenset(tag for tag in FrameTag if tag.is_compressed)


@dataclass
class ParseResult:
    """Text and error signals decoded from one parse call."""

    reasoning: str = ""
    content: str = ""
    error: str | None = None
    failure: FrameError | None = None
    frames: int = 0

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, str]:
        """Return ``{"error": ...}`` or ``{"reasoning_content": ..., "content": ...}``."""
        if self.error is not None:
            return {"error": self.error}
        return {"reasoning_content": self.reasoning, "content": self.content}


@dataclass
class _Accumulator:
    reasoning: list[str] = field(default_factory=list)
    content: list[str] = field(default_factory=list)
    error: str | None = None
    failure: FrameError | None = None
    frames: int = 0

    def apply(self, frame: Frame) -> None:
        """Decode one frame into the accumulators.

        Raises:
            FrameError: If the frame payload cannot be decoded
        """
        self.frames += 1
        if frame.tag not in list_codecs():
            logging.debug("Skipping frame with unknown tag %d", frame.tag)
            return

        decoded = get_codec(frame.tag).decode_payload(frame.payload, frame.tag in _COMPRESSED_TAGS)

        if isinstance(decoded, JSONSignal):
            self._apply_signal(decoded)
        elif isinstance(decoded, ChatResponse):
            message = decoded.message
            if message.thinking.content:
                self.reasoning.append(message.thinking.content)
            if message.content:
                self.content.append(message.content)
        else:
            logging.debug("Ignoring %s decoded from tag %d", type(decoded).__name__, frame.tag)

    def _apply_signal(self, signal: JSONSignal) -> None:
        if signal.is_empty:
            return
        logging.info("Side-channel message: %s", signal.text)
        if signal.error is not None and self.error is None:
            self.error = signal.error

    def fail(self, exc: FrameError) -> None:
        logging.warning("Error parsing chunk response: %s", exc)
        if self.failure is None:
            self.failure = exc

    def result(self) -> ParseResult:
        if self.error is not None:
            return ParseResult(error=self.error, failure=self.failure, frames=self.frames)
        return ParseResult(
            reasoning="".join(self.reasoning),
            content="".join(self.content),
            failure=self.failure,
            frames=self.frames,
        )


def parse_response(buffer: bytes) -> ParseResult:
    """Parse a frame-aligned response buffer.

    The buffer must hold complete frames only; a frame split across calls is
    reported as a bounds failure. Use ``StreamDecoder`` for chunked input.

    Args:
        buffer: Concatenation of zero or more frames

    Returns:
        Accumulated reasoning/content text, or the first error signal. A
        malformed frame stops parsing; the result then holds what was decoded
        before it and the exception in ``failure``.
    """
    acc = _Accumulator()
    try:
        for frame in iter_frames(buffer):
            acc.apply(frame)
    except FrameError as exc:
        acc.fail(exc)
    return acc.result()


class DecoderState(Enum):
    """Position of a StreamDecoder within the current frame."""

    AWAITING_HEADER = "awaiting_header"
    AWAITING_PAYLOAD = "awaiting_payload"


class StreamDecoder:
    """Incremental decoder for a chunk-delivered response stream.

    Chunks may split frame headers and payloads anywhere; bytes of an
    incomplete frame are kept until the rest arrives. Not thread-safe: use one
    decoder per stream.
    """

    def __init__(self) -> None:
        self._pending = bytearray()
        self.state = DecoderState.AWAITING_HEADER
        self._tag = 0
        self._length = 0

    @property
    def pending(self) -> int:
        """Number of buffered bytes belonging to an incomplete frame, header included."""
        if self.state is DecoderState.AWAITING_PAYLOAD:
            return HEADER_SIZE + len(self._pending)
        return len(self._pending)

    def feed(self, chunk: bytes) -> ParseResult:
        """Append ``chunk`` and decode every frame it completes.

        A frame whose payload fails to decode is skipped and recorded in the
        result's ``failure``; decoding continues with the next frame.

        Args:
            chunk: Next bytes of the stream

        Returns:
            Text and error signals of the frames completed by this chunk
        """
        self._pending.extend(chunk)
        acc = _Accumulator()

        while True:
            if self.state is DecoderState.AWAITING_HEADER:
                if len(self._pending) < HEADER_SIZE:
                    break
                self._tag, self._length = unpack_header(self._pending)
                del self._pending[:HEADER_SIZE]
                self.state = DecoderState.AWAITING_PAYLOAD

            if len(self._pending) < self._length:
                break
            payload = bytes(self._pending[: self._length])
            del self._pending[: self._length]
            self.state = DecoderState.AWAITING_HEADER

            try:
                acc.apply(Frame(tag=self._tag, payload=payload))
            except FrameError as exc:
                acc.fail(exc)

        return acc.result()

    def close(self) -> None:
        """Finish the stream.

        Raises:
            FrameBoundsError: If a partial frame is still buffered
        """
        if self.state is DecoderState.AWAITING_PAYLOAD:
            missing = self._length - len(self._pending)
            raise FrameBoundsError(f"Stream ended {missing} bytes short of a tag {self._tag} frame payload")
        if self._pending:
            raise FrameBoundsError(f"Stream ended inside a frame header ({len(self._pending)} bytes)")
