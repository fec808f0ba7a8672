import pytest

from silicarw.core.felica.codec import (
    bytes_to_hex,
    bytes_to_spaced_hex,
    hex_to_bytes,
    pad_to_block,
    swap_pairs,
)
from silicarw.core.felica.errors import InvalidPairLength, MalformedHex, ValidationError


@pytest.mark.parametrize("text", ["", "00", "DEADBEEF01010101", "0123456789ABCDEF", "FF" * 16])
def test_hex_round_trip(text):
    assert bytes_to_hex(hex_to_bytes(text)) == text


def test_hex_to_bytes_most_significant_nibble_first():
    assert hex_to_bytes("A1") == bytes([0xA1])


def test_hex_to_bytes_accepts_lower_case():
    assert hex_to_bytes("deadBEEF") == bytes([0xDE, 0xAD, 0xBE, 0xEF])


@pytest.mark.parametrize("text", ["0", "ABC", "0G", "12 34", "0x12", "\ufb00", "\ufb00\ufb00"])
def test_hex_to_bytes_rejects_malformed(text):
    with pytest.raises(MalformedHex):
        hex_to_bytes(text)


def test_malformed_hex_is_a_validation_error():
    with pytest.raises(ValueError):
        hex_to_bytes("Z0")
    assert issubclass(MalformedHex, ValidationError)


def test_bytes_to_hex_upper_no_separator():
    assert bytes_to_hex(bytes([0x0A, 0xBC])) == "0ABC"


def test_bytes_to_spaced_hex():
    assert bytes_to_spaced_hex(bytes([0xAA, 0xBB, 0xCC])) == "AA BB CC"


@pytest.mark.parametrize("length", [0, 1, 8, 15])
def test_pad_to_block_pads_short_input(length):
    data = bytes(range(1, length + 1))
    padded = pad_to_block(data)
    assert len(padded) == 16
    assert padded == data + bytes(16 - length)


@pytest.mark.parametrize("length", [16, 17, 40])
def test_pad_to_block_truncates_long_input(length):
    data = bytes(range(length))
    assert pad_to_block(data) == data[:16]


def test_swap_pairs():
    assert swap_pairs(bytes.fromhex("100B200B")) == bytes.fromhex("0B100B20")


@pytest.mark.parametrize("data", [b"", bytes.fromhex("0102"), bytes(range(16))])
def test_swap_pairs_is_an_involution(data):
    assert swap_pairs(swap_pairs(data)) == data


def test_swap_pairs_rejects_odd_length():
    with pytest.raises(InvalidPairLength):
        swap_pairs(b"\x01\x02\x03")
