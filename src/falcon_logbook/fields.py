"""Fixed-width text and numeric field codecs."""
from __future__ import annotations

import struct

from .errors import FieldTooLongError, LayoutError, TextEncodingError
from .protocol import TEXT_ENCODING


def decode_text(buf: bytes, field: str = "text") -> str:
    """Decode a padded text field, truncating at the first zero byte.

    Bytes after the first zero are never part of the value, even if nonzero.
    """
    end = buf.find(b"\x00")
    if end != -1:
        buf = buf[:end]
    try:
        return buf.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise TextEncodingError(f"{field} is not valid {TEXT_ENCODING}: {buf!r} ({e.reason})") from e


def encode_text(value: str, width: int, field: str = "text", terminated: bool = True) -> bytes:
    """Encode ``value`` zero-padded to exactly ``width`` bytes.

    Terminated fields need content strictly shorter than ``width``; an
    unterminated field may fill all ``width`` bytes.
    """
    try:
        raw = value.encode(TEXT_ENCODING)
    except UnicodeEncodeError as e:
        raise TextEncodingError(f"{field} {value!r} cannot be encoded as {TEXT_ENCODING}") from e
    limit = width - 1 if terminated else width
    if len(raw) > limit:
        raise FieldTooLongError(field, value, limit)
    return raw.ljust(width, b"\x00")


def decode_number(fmt: str, buf: bytes):
    (value,) = struct.unpack(fmt, buf)
    return value


def encode_number(fmt: str, value, field: str = "number") -> bytes:
    try:
        return struct.pack(fmt, value)
    except (struct.error, OverflowError) as e:
        raise LayoutError(f"{field} value {value!r} does not fit {fmt!r}: {e}") from e
