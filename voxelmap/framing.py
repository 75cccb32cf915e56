"""Length-prefixed message framing with base-128 varints.

A file holds a message count followed by messages, each preceded by its
size in bytes. Readers take a byte offset and return the offset just past
what they read, so successive calls walk through the file.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)

MAX_VARINT_BYTES = 10
UINT32_MAX = 0xFFFFFFFF


class FramingError(Exception):
    """Raised when a framed stream cannot be read."""


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a base-128 varint."""
    if value < 0:
        raise ValueError(f"varint value must not be negative, got {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(stream: BinaryIO) -> tuple[int, int]:
    """Read a varint at the stream's position; return ``(value, bytes read)``."""
    value = 0
    for position in range(MAX_VARINT_BYTES):
        chunk = stream.read(1)
        if not chunk:
            raise FramingError("stream ended inside a varint")
        byte = chunk[0]
        value |= (byte & 0x7F) << (7 * position)
        if not byte & 0x80:
            return value, position + 1
    raise FramingError(f"varint longer than {MAX_VARINT_BYTES} bytes")


def _read_varint32_at(stream: BinaryIO, byte_offset: int) -> tuple[int, int]:
    stream.seek(byte_offset)
    value, length = decode_varint(stream)
    return value & UINT32_MAX, length


def _check_uint32(value: int, what: str) -> None:
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"{what} must fit in 32 bits, got {value}")


def write_message_count(stream: BinaryIO, message_count: int) -> None:
    """Write the number of messages that follow."""
    _check_uint32(message_count, "message count")
    stream.write(encode_varint(message_count))


def read_message_count(stream: BinaryIO, byte_offset: int = 0) -> tuple[int, int]:
    """Read a message count at ``byte_offset``; return ``(count, next offset)``."""
    try:
        count, length = _read_varint32_at(stream, byte_offset)
    except FramingError as exc:
        raise FramingError(f"could not read message count: {exc}") from exc
    return count, byte_offset + length


def write_message(stream: BinaryIO, payload: bytes) -> None:
    """Write ``payload`` preceded by its size."""
    data = bytes(payload)
    _check_uint32(len(data), "message size")
    stream.write(encode_varint(len(data)))
    stream.write(data)


def read_message(stream: BinaryIO, byte_offset: int = 0) -> tuple[bytes, int]:
    """Read one message at ``byte_offset``; return ``(payload, next offset)``.

    Raises :class:`FramingError` if the size cannot be read, the message is
    empty, or the stream ends before the whole message.
    """
    try:
        size, length = _read_varint32_at(stream, byte_offset)
    except FramingError as exc:
        raise FramingError(f"could not read message size: {exc}") from exc
    if size == 0:
        raise FramingError("empty message")
    payload = stream.read(size)
    if len(payload) != size:
        raise FramingError(
            f"message truncated: expected {size} bytes, got {len(payload)}"
        )
    return payload, byte_offset + length + size