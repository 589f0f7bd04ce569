import copy
import logging
import struct
from datetime import date

import pytest

from falcon_logbook.cipher import decode_bytes, encode_bytes
from falcon_logbook.errors import (
    ChecksumError,
    FieldTooLongError,
    InvalidRankError,
    InvalidVoiceError,
    LayoutError,
    LogbookError,
    TruncatedLogbookError,
)
from falcon_logbook.layout import LAYOUT, decode, encode
from falcon_logbook.protocol import RECORD_LEN
from falcon_logbook.record import CampaignStats, DogfightStats, LogbookRecord, Medal, Rank

NAME_OFFSET = 0
RANK_OFFSET = 80
MEDALS_OFFSET = 140
SQUADRON_OFFSET = 346
VOICE_OFFSET = 366
SENTINEL_OFFSET = 368


def _patch(data: bytes, offset: int, raw: bytes) -> bytes:
    plain = bytearray(decode_bytes(data))
    plain[offset:offset + len(raw)] = raw
    return encode_bytes(bytes(plain))


def _full_record() -> LogbookRecord:
    return LogbookRecord(
        name="Robin Olds",
        callsign="WOLFPACK",
        password="bolo66",
        commissioned="06/06/1943",
        options_file="WOLFPACK",
        flight_hours=1234.5,
        ace_factor=0.75,
        rank=Rank.Colonel,
        dogfight_stats=DogfightStats(*range(1, 9)),
        campaign_stats=CampaignStats(
            1, 2, 3, 40, 123456, -98765, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17
        ),
        medals=frozenset({Medal.AirForceCross, Medal.Longevity}),
        picture_file="pictures/olds.jpg",
        patch_file="patches/8tfw.tga",
        personal_text="Fly, fight and win.",
        squadron="8th TFW",
        voice=11,
    )


def test_layout_covers_whole_record():
    assert sum(f.width for f in LAYOUT) == RECORD_LEN == 372


def test_round_trip_full_record():
    record = _full_record()
    data = encode(record)
    assert len(data) == RECORD_LEN
    assert decode(data) == record
    assert encode(decode(data)) == data


def test_encode_does_not_modify_record():
    record = _full_record()
    before = copy.deepcopy(record)
    encode(record)
    assert record == before


def test_sentinel_is_zero():
    plain = decode_bytes(encode(_full_record()))
    assert struct.unpack("<I", plain[SENTINEL_OFFSET:])[0] == 0


def test_medal_flags_follow_enumeration_order():
    record = LogbookRecord("Ace", "VIPER1", medals={Medal.SilverStar, Medal.KoreaCampaign})
    data = encode(record)
    flags = decode_bytes(data)[MEDALS_OFFSET:MEDALS_OFFSET + 6]
    assert list(flags) == [0, 1, 0, 0, 1, 0]
    assert decode(data).medals == {Medal.SilverStar, Medal.KoreaCampaign}


def test_any_nonzero_medal_byte_counts_as_earned():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), MEDALS_OFFSET, b"\x00\x00\x00\x7f\x00\x00")
    assert decode(data).medals == {Medal.AirMedal}


def test_rank_ordinal_two_is_captain():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), RANK_OFFSET, struct.pack("<i", 2))
    assert decode(data).rank is Rank.Captain


def test_invalid_rank_ordinal():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), RANK_OFFSET, struct.pack("<i", 9))
    with pytest.raises(InvalidRankError, match="9 isn't a valid rank index"):
        decode(data)


def test_invalid_rank_on_encode():
    with pytest.raises(InvalidRankError):
        encode(LogbookRecord("Ace", "VIPER1", rank=7))


@pytest.mark.parametrize("voice", [-1, 12, 300])
def test_voice_out_of_range_on_encode(voice):
    with pytest.raises(InvalidVoiceError, match=str(voice)):
        encode(LogbookRecord("Ace", "VIPER1", voice=voice))


def test_voice_out_of_range_on_decode():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), VOICE_OFFSET, struct.pack("<h", 12))
    with pytest.raises(InvalidVoiceError, match="12"):
        decode(data)


def test_nonzero_sentinel_fails():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), SENTINEL_OFFSET, struct.pack("<I", 1))
    with pytest.raises(ChecksumError, match="bad checksum"):
        decode(data)


def test_wrong_key_fails_closed():
    data = encode(LogbookRecord("Ace", "VIPER1"))
    plain = decode_bytes(data)
    with pytest.raises(LogbookError):
        decode(encode_bytes(plain, key=b"not the master key!!!!"))


def test_truncated_stream():
    data = encode(LogbookRecord("Ace", "VIPER1"))
    with pytest.raises(TruncatedLogbookError):
        decode(data[:-1])
    with pytest.raises(TruncatedLogbookError):
        decode(b"")


def test_trailing_data_is_ignored_with_warning(caplog):
    data = encode(LogbookRecord("Ace", "VIPER1")) + b"\x00"
    with caplog.at_level(logging.WARNING, logger="falcon_logbook.layout"):
        assert decode(data).name == "Ace"
    assert "trailing data" in caplog.text


def test_text_decode_stops_at_first_zero():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), NAME_OFFSET, b"Ace\x00junk")
    assert decode(data).name == "Ace"


@pytest.mark.parametrize(
    "field,value",
    [
        ("name", "N" * 21),
        ("callsign", "C" * 13),
        ("commissioned", "D" * 13),
        ("options_file", "O" * 13),
        ("picture_file", "P" * 33),
        ("patch_file", "P" * 33),
        ("personal_text", "T" * 121),
        ("squadron", "S" * 21),
        ("password", "p" * 11),
    ],
)
def test_field_too_long(field, value):
    record = LogbookRecord("Ace", "VIPER1")
    setattr(record, field, value)
    with pytest.raises(FieldTooLongError) as ei:
        encode(record)
    assert ei.value.field == field


def test_longest_values_fit():
    record = LogbookRecord("N" * 20, "C" * 12, password="p" * 10, squadron="S" * 20,
                           personal_text="T" * 120, picture_file="P" * 32)
    assert decode(encode(record)) == record


def test_stats_out_of_type_range():
    record = LogbookRecord("Ace", "VIPER1", dogfight_stats=DogfightStats(kills=40000))
    with pytest.raises(LayoutError, match="dogfight_stats"):
        encode(record)


def test_default_record_round_trip():
    record = LogbookRecord.create_default("Ace", "VIPER1", "hunter2")
    out = decode(encode(record))
    assert out.name == "Ace"
    assert out.callsign == "VIPER1"
    assert out.password == "hunter2"
    assert out.commissioned == date.today().strftime("%m/%d/%Y")
    assert out.dogfight_stats == DogfightStats()
    assert out.campaign_stats == CampaignStats()
    assert set(out.dogfight_stats.values()) == {0}
    assert set(out.campaign_stats.values()) == {0}
    assert out.rank is Rank.SecondLt
    assert out.medals == frozenset()
    assert out == record


def test_full_width_squadron_survives_reencode():
    data = _patch(encode(LogbookRecord("Ace", "VIPER1")), SQUADRON_OFFSET, b"S" * 20)
    record = decode(data)
    assert record.squadron == "S" * 20
    assert encode(record) == data


def test_float_out_of_f32_range():
    with pytest.raises(LayoutError, match="flight_hours"):
        encode(LogbookRecord("Ace", "VIPER1", flight_hours=1e39))
