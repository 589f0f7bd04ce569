"""Password scramble, independent of the stream cipher.

The stored password field is 11 bytes: 10 content positions and a
terminator. Each content byte is XORed with both repeating masks. The
transform is its own inverse.
"""
from __future__ import annotations

from .errors import PasswordIntegrityError
from .fields import decode_text, encode_text
from .protocol import PASSWORD_LEN, PASSWORD_MASK_1, PASSWORD_MASK_2

PASSWORD_FIELD_LEN = PASSWORD_LEN + 1


def _check_terminator(buf: bytes) -> None:
    if buf[PASSWORD_LEN] != 0:
        raise PasswordIntegrityError(
            f"password terminator is {buf[PASSWORD_LEN]:#04x}, expected 0 "
            "(corrupt logbook or mismatched password masks)"
        )


def scramble(buf: bytes, mask1: bytes = PASSWORD_MASK_1, mask2: bytes = PASSWORD_MASK_2) -> bytes:
    if len(buf) != PASSWORD_FIELD_LEN:
        raise ValueError(f"password field must be {PASSWORD_FIELD_LEN} bytes, got {len(buf)}")
    # Only content positions are masked; the terminator passes through untouched.
    _check_terminator(buf)
    out = bytearray(buf)
    for j in range(PASSWORD_LEN):
        out[j] ^= mask1[j % len(mask1)] ^ mask2[j % len(mask2)]
    return bytes(out)


def decode_password(buf: bytes) -> str:
    return decode_text(scramble(buf), "password")


def encode_password(password: str) -> bytes:
    return scramble(encode_text(password, PASSWORD_FIELD_LEN, "password"))
