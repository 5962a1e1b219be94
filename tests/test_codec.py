import pytest

from sysfs_pwm import codec
from sysfs_pwm.codec import Polarity
from sysfs_pwm.errors import DecodeError, EncodeError


def test_encode_int_plain_decimal():
    assert codec.encode_int(0) == "0"
    assert codec.encode_int(20000) == "20000"
    assert codec.encode_int(codec.U32_MAX) == "4294967295"


@pytest.mark.parametrize("value", [-1, codec.U32_MAX + 1, 1.5, "10", True])
def test_encode_int_rejects_out_of_domain(value):
    with pytest.raises(EncodeError):
        codec.encode_int(value, attribute="period")


def test_decode_int_trims_whitespace():
    assert codec.decode_int("  20000\n") == 20000
    assert codec.decode_int("007") == 7


def test_decode_int_accepts_plus_sign():
    assert codec.decode_int("+5\n") == 5
    assert codec.decode_int_list("+1 2") == [1, 2]


@pytest.mark.parametrize("text", ["", "\n", "12a", "-5", "+", "++5", "1 2", "4294967296", "1_000"])
def test_decode_int_rejects_invalid(text):
    with pytest.raises(DecodeError) as info:
        codec.decode_int(text, attribute="period")
    assert info.value.attribute == "period"
    assert info.value.content == text


def test_decode_int_list_drops_bad_tokens_in_order():
    assert codec.decode_int_list(" 3  x 1\t2 -4\n") == [3, 1, 2]
    assert codec.decode_int_list("") == []


def test_bool_codec():
    assert codec.encode_bool(True) == "1"
    assert codec.encode_bool(False) == "0"
    assert codec.decode_bool("1\n") is True
    assert codec.decode_bool("0") is False
    with pytest.raises(DecodeError):
        codec.decode_bool("2")


def test_polarity_codec():
    assert Polarity.NORMAL.encode() == "normal"
    assert Polarity.INVERSE.encode() == "inversed"
    assert Polarity.decode("normal\n") is Polarity.NORMAL
    assert Polarity.decode("inversed") is Polarity.INVERSE
    with pytest.raises(DecodeError):
        Polarity.decode("foo")
    with pytest.raises(DecodeError):
        Polarity.decode("inverse")


def test_decode_capture():
    assert codec.decode_capture("1000000 250000") == (1000000, 250000)
    assert codec.decode_capture("1000000   250000\n") == (1000000, 250000)


@pytest.mark.parametrize("text", ["1000000", "1000000 250000 1", "", "1000000 abc"])
def test_decode_capture_requires_two_values(text):
    with pytest.raises(DecodeError) as info:
        codec.decode_capture(text)
    assert info.value.attribute == "capture"
    assert info.value.content == text
