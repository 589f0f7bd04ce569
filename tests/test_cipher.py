import io
import random

import pytest

from falcon_logbook.cipher import DecryptReader, EncryptWriter, StreamCipher, decode_bytes, encode_bytes
from falcon_logbook.errors import LayoutError, TruncatedLogbookError
from falcon_logbook.protocol import INITIAL_STATE, MASTER_KEY


def test_master_key_shape():
    assert len(MASTER_KEY) == 22
    assert INITIAL_STATE == 0x58


@pytest.mark.parametrize("state", [0x00, INITIAL_STATE, 0xFF])
@pytest.mark.parametrize("length", [0, 1, 21, 22, 23, 372, 1000])
def test_encode_decode_are_inverses(state, length):
    rng = random.Random(length * 256 + state)
    data = bytes(rng.randrange(256) for _ in range(length))
    assert decode_bytes(encode_bytes(data, state=state), state=state) == data
    assert encode_bytes(decode_bytes(data, state=state), state=state) == data


def test_first_bytes_use_initial_state_then_ciphertext_feedback():
    # 0x00 ^ 'F' ^ 0x58 = 0x1e; then 0x00 ^ 'a' ^ 0x1e = 0x7f
    assert encode_bytes(b"\x00\x00") == b"\x1e\x7f"
    assert decode_bytes(b"\x1e\x7f") == b"\x00\x00"


def test_single_flip_only_disturbs_two_positions():
    plain = bytes(range(64))
    cipher = bytearray(encode_bytes(plain))
    cipher[10] ^= 0x01
    out = decode_bytes(bytes(cipher))
    diff = [i for i, (a, b) in enumerate(zip(plain, out)) if a != b]
    assert diff == [10, 11]


def test_cipher_instances_do_not_share_state():
    a = StreamCipher()
    b = StreamCipher()
    first = a.encode(b"logbook")
    assert b.encode(b"logbook") == first
    assert a.position == 7 and a.state == first[-1]


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        StreamCipher(key=b"")


def test_reader_reports_truncation_offset():
    r = DecryptReader(io.BytesIO(encode_bytes(b"abc")))
    assert r.read_exact(2) == b"ab"
    with pytest.raises(TruncatedLogbookError) as ei:
        r.read_exact(4)
    assert ei.value.offset == 3


def test_writer_tracks_position_and_checkpoints():
    out = io.BytesIO()
    w = EncryptWriter(out)
    w.write(b"abcd")
    w.checkpoint("first word")
    w.write(b"e")
    with pytest.raises(LayoutError, match="offset 5"):
        w.checkpoint("odd byte")
    assert decode_bytes(out.getvalue()) == b"abcde"
