"""Self-synchronizing XOR obfuscation wrapped around the whole logbook stream.

At stream position i the byte is XORed with the master key byte at
``i % len(key)`` and with a one-byte feedback register. The register always
takes the ciphertext byte of position i, in both directions, so encode and
decode are exact inverses for the same key and initial state.
"""
from __future__ import annotations

import logging
from typing import BinaryIO

from .errors import LayoutError, TruncatedLogbookError
from .protocol import ALIGNMENT, INITIAL_STATE, MASTER_KEY

log = logging.getLogger(__name__)


class StreamCipher:
    """Owns the feedback register and stream position for one pass."""

    def __init__(self, key: bytes = MASTER_KEY, state: int = INITIAL_STATE):
        if not key:
            raise ValueError("master key must not be empty")
        self.key = bytes(key)
        self.state = state & 0xFF
        self.position = 0

    def _key_byte(self) -> int:
        return self.key[self.position % len(self.key)]

    def decode_byte(self, c: int) -> int:
        p = c ^ self.state ^ self._key_byte()
        self.state = c
        self.position += 1
        return p

    def encode_byte(self, p: int) -> int:
        c = p ^ self._key_byte() ^ self.state
        self.state = c
        self.position += 1
        return c

    def decode(self, data: bytes) -> bytes:
        return bytes(self.decode_byte(c) for c in data)

    def encode(self, data: bytes) -> bytes:
        return bytes(self.encode_byte(p) for p in data)


def decode_bytes(data: bytes, key: bytes = MASTER_KEY, state: int = INITIAL_STATE) -> bytes:
    return StreamCipher(key, state).decode(data)


def encode_bytes(data: bytes, key: bytes = MASTER_KEY, state: int = INITIAL_STATE) -> bytes:
    return StreamCipher(key, state).encode(data)


class _CipherStream:
    def __init__(self, cipher: StreamCipher | None):
        self.cipher = cipher or StreamCipher()

    @property
    def position(self) -> int:
        return self.cipher.position

    def checkpoint(self, label: str) -> None:
        """Assert the running offset sits on the alignment boundary."""
        if self.position % ALIGNMENT != 0:
            raise LayoutError(
                f"alignment checkpoint after {label} missed: offset {self.position} "
                f"is not a multiple of {ALIGNMENT}"
            )
        log.debug("checkpoint after %s at offset %d", label, self.position)


class DecryptReader(_CipherStream):
    """Reads exact byte counts from a binary stream, de-obfuscating as it goes."""

    def __init__(self, inner: BinaryIO, cipher: StreamCipher | None = None):
        super().__init__(cipher)
        self.inner = inner

    def read_exact(self, n: int) -> bytes:
        start = self.position
        raw = self.inner.read(n)
        if len(raw) != n:
            raise TruncatedLogbookError(start + len(raw), n, len(raw))
        return self.cipher.decode(raw)

    def at_eof(self) -> bool:
        return not self.inner.read(1)


class EncryptWriter(_CipherStream):
    """Obfuscates bytes and writes them to a binary stream."""

    def __init__(self, inner: BinaryIO, cipher: StreamCipher | None = None):
        super().__init__(cipher)
        self.inner = inner

    def write(self, data: bytes) -> None:
        self.inner.write(self.cipher.encode(data))
