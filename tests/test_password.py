import pytest

from falcon_logbook.errors import FieldTooLongError, PasswordIntegrityError
from falcon_logbook.password import PASSWORD_FIELD_LEN, decode_password, encode_password, scramble
from falcon_logbook.protocol import PASSWORD_MASK_1, PASSWORD_MASK_2


def test_mask_shapes():
    assert len(PASSWORD_MASK_1) == 22
    assert len(PASSWORD_MASK_2) == 25
    assert PASSWORD_FIELD_LEN == 11


def test_scramble_is_self_inverse():
    buf = b"hunter2".ljust(PASSWORD_FIELD_LEN, b"\x00")
    masked = scramble(buf)
    assert masked != buf
    assert masked[-1] == 0
    assert scramble(masked) == buf


@pytest.mark.parametrize("password", ["", "a", "hunter2", "0123456789"])
def test_password_round_trip(password):
    raw = encode_password(password)
    assert len(raw) == PASSWORD_FIELD_LEN
    assert decode_password(raw) == password


def test_password_too_long():
    with pytest.raises(FieldTooLongError) as ei:
        encode_password("01234567890")
    assert ei.value.limit == 10
    assert "01234567890" in str(ei.value)


def test_terminator_must_be_zero():
    raw = bytearray(encode_password("hunter2"))
    raw[10] = 0x41
    with pytest.raises(PasswordIntegrityError, match="terminator"):
        decode_password(bytes(raw))


def test_scramble_checks_terminator_before_masking():
    buf = b"0123456789\x01"
    with pytest.raises(PasswordIntegrityError):
        scramble(buf)
    # The terminator is never masked, whatever the masks hold there.
    plain = b"hunter2".ljust(PASSWORD_FIELD_LEN, b"\x00")
    assert scramble(plain, mask1=b"\xff", mask2=b"\x0f")[-1] == 0
