"""Logbook record layout: one ordered descriptor table, walked both ways.

Every byte crosses the stream cipher exactly once. The running offset is
checked against the 4-byte alignment quantum at fixed checkpoints so any
drift in field widths fails immediately instead of shifting later fields.
"""
from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO, Callable

from .cipher import DecryptReader, EncryptWriter
from .errors import ChecksumError, InvalidRankError, InvalidVoiceError, LayoutError
from .fields import decode_number, decode_text, encode_number, encode_text
from .password import PASSWORD_FIELD_LEN, decode_password, encode_password
from .protocol import (
    CALLSIGN_LEN,
    CAMPAIGN_FMT,
    COMM_LEN,
    DOGFIGHT_FMT,
    F32_FMT,
    FILENAME_LEN,
    I16_FMT,
    I32_FMT,
    MEDAL_COUNT,
    NAME_LEN,
    PERSONAL_TEXT_LEN,
    RECORD_LEN,
    RESOURCE_ID_LEN,
    SENTINEL,
    SQUADRON_LEN,
    U32_FMT,
    VOICE_MAX,
    VOICE_MIN,
)
from .record import MEDAL_ORDER, CampaignStats, DogfightStats, LogbookRecord, Rank

log = logging.getLogger(__name__)

TEXT = "text"
PASSWORD = "password"
NUMBER = "number"
BLOCK = "block"
MEDALS = "medals"
RESERVED = "reserved"
CHECKPOINT = "checkpoint"
SENTINEL_KIND = "sentinel"


@dataclass(frozen=True)
class Field:
    kind: str
    name: str = ""
    width: int = 0
    fmt: str = ""
    # Numeric validators map the raw value to the record value on read and
    # check the record value on write.
    validate: Callable | None = None
    block: type | None = None
    # Text fields reserve their last byte for a terminator unless unset.
    terminated: bool = True


def _rank(value) -> Rank:
    if isinstance(value, Rank):
        return value
    try:
        return Rank(value)
    except ValueError:
        raise InvalidRankError(value) from None


def _voice(value: int) -> int:
    if not VOICE_MIN <= value <= VOICE_MAX:
        raise InvalidVoiceError(value, VOICE_MIN, VOICE_MAX)
    return value


def _text(name: str, width: int, terminated: bool = True) -> Field:
    return Field(TEXT, name, width, terminated=terminated)


def _number(name: str, fmt: str, validate: Callable | None = None) -> Field:
    return Field(NUMBER, name, struct.calcsize(fmt), fmt, validate)


def _reserved(width: int, name: str = "reserved") -> Field:
    return Field(RESERVED, name, width)


def _checkpoint(after: str) -> Field:
    return Field(CHECKPOINT, after)


LAYOUT: tuple[Field, ...] = (
    _text("name", NAME_LEN + 1),
    _text("callsign", CALLSIGN_LEN + 1),
    Field(PASSWORD, "password", PASSWORD_FIELD_LEN),
    _text("commissioned", COMM_LEN + 1),
    _text("options_file", CALLSIGN_LEN + 1),
    _reserved(1),
    _number("flight_hours", F32_FMT),
    _number("ace_factor", F32_FMT),
    _number("rank", I32_FMT, _rank),
    _checkpoint("rank"),
    Field(BLOCK, "dogfight_stats", struct.calcsize(DOGFIGHT_FMT), DOGFIGHT_FMT, block=DogfightStats),
    _checkpoint("dogfight_stats"),
    Field(BLOCK, "campaign_stats", struct.calcsize(CAMPAIGN_FMT), CAMPAIGN_FMT, block=CampaignStats),
    _reserved(2),
    _checkpoint("campaign_stats"),
    Field(MEDALS, "medals", MEDAL_COUNT),
    _reserved(2),
    _checkpoint("medals"),
    _reserved(RESOURCE_ID_LEN, "picture resource id"),
    _checkpoint("picture resource id"),
    _text("picture_file", FILENAME_LEN + 1),
    _reserved(3),
    _checkpoint("picture_file"),
    _reserved(RESOURCE_ID_LEN, "patch resource id"),
    _checkpoint("patch resource id"),
    _text("patch_file", FILENAME_LEN + 1),
    _text("personal_text", PERSONAL_TEXT_LEN + 1),
    _text("squadron", SQUADRON_LEN, terminated=False),
    _number("voice", I16_FMT, _voice),
    Field(SENTINEL_KIND, "sentinel", struct.calcsize(U32_FMT), U32_FMT),
)

if sum(f.width for f in LAYOUT) != RECORD_LEN:
    raise LayoutError(f"layout covers {sum(f.width for f in LAYOUT)} bytes, expected {RECORD_LEN}")


def read_logbook(stream: BinaryIO) -> LogbookRecord:
    """Decode one logbook from an obfuscated binary stream."""
    r = DecryptReader(stream)
    values: dict = {}
    for f in LAYOUT:
        if f.kind == CHECKPOINT:
            r.checkpoint(f.name)
            continue

        offset = r.position
        buf = r.read_exact(f.width)

        if f.kind == TEXT:
            values[f.name] = decode_text(buf, f.name)
        elif f.kind == PASSWORD:
            values[f.name] = decode_password(buf)
        elif f.kind == NUMBER:
            value = decode_number(f.fmt, buf)
            values[f.name] = f.validate(value) if f.validate else value
        elif f.kind == BLOCK:
            values[f.name] = f.block.from_values(struct.unpack(f.fmt, buf))
        elif f.kind == MEDALS:
            values[f.name] = frozenset(m for m, flag in zip(MEDAL_ORDER, buf) if flag)
        elif f.kind == SENTINEL_KIND:
            checksum = decode_number(f.fmt, buf)
            if checksum != SENTINEL:
                raise ChecksumError(checksum)
        elif f.kind != RESERVED:
            raise LayoutError(f"unknown field kind {f.kind!r}")

        log.debug("read %s (%d bytes) at offset %d", f.name, f.width, offset)

    if not r.at_eof():
        log.warning("Ignoring trailing data after logbook sentinel at offset %d", r.position)
    return LogbookRecord(**values)


def write_logbook(record: LogbookRecord, stream: BinaryIO) -> None:
    """Encode one logbook to ``stream``, mirroring read_logbook field for field."""
    w = EncryptWriter(stream)
    for f in LAYOUT:
        if f.kind == CHECKPOINT:
            w.checkpoint(f.name)
            continue

        offset = w.position
        if f.kind == TEXT:
            buf = encode_text(getattr(record, f.name), f.width, f.name, f.terminated)
        elif f.kind == PASSWORD:
            buf = encode_password(record.password)
        elif f.kind == NUMBER:
            value = getattr(record, f.name)
            if f.validate:
                value = f.validate(value)
            buf = encode_number(f.fmt, value, f.name)
        elif f.kind == BLOCK:
            buf = _pack_block(f, getattr(record, f.name))
        elif f.kind == MEDALS:
            buf = bytes(1 if m in record.medals else 0 for m in MEDAL_ORDER)
        elif f.kind == SENTINEL_KIND:
            buf = encode_number(f.fmt, SENTINEL, f.name)
        elif f.kind == RESERVED:
            buf = bytes(f.width)
        else:
            raise LayoutError(f"unknown field kind {f.kind!r}")

        if len(buf) != f.width:
            raise LayoutError(f"{f.name} encoded to {len(buf)} bytes, expected {f.width}")
        w.write(buf)
        log.debug("wrote %s (%d bytes) at offset %d", f.name, f.width, offset)


def _pack_block(f: Field, block) -> bytes:
    try:
        return struct.pack(f.fmt, *block.values())
    except (struct.error, OverflowError) as e:
        raise LayoutError(f"{f.name} does not fit {f.fmt!r}: {e}") from e


def decode(data: bytes) -> LogbookRecord:
    return read_logbook(io.BytesIO(data))


def encode(record: LogbookRecord) -> bytes:
    """Encode to a new byte string; ``record`` is not modified."""
    buf = io.BytesIO()
    write_logbook(record, buf)
    return buf.getvalue()
