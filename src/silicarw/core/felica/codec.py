"""Byte-level helpers for FeliCa blocks."""

from __future__ import annotations

import string

from silicarw.core.felica.errors import InvalidPairLength, MalformedHex

BLOCK_SIZE = 16

_HEX_DIGITS = frozenset(string.hexdigits)


def hex_to_bytes(text: str) -> bytes:
    """Parse an even-length hex string (either case) into bytes."""
    if len(text) % 2 != 0 or not set(text) <= _HEX_DIGITS:
        raise MalformedHex(text)
    upper = text.upper()
    return bytes(int(upper[i : i + 2], 16) for i in range(0, len(upper), 2))


def bytes_to_hex(data: bytes) -> str:
    return data.hex().upper()


def bytes_to_spaced_hex(data: bytes) -> str:
    return data.hex(" ").upper()


def pad_to_block(data: bytes) -> bytes:
    """Truncate or zero-pad *data* to exactly one block."""
    if len(data) >= BLOCK_SIZE:
        return bytes(data[:BLOCK_SIZE])
    return bytes(data) + bytes(BLOCK_SIZE - len(data))


def swap_pairs(data: bytes) -> bytes:
    """Swap the bytes of every 2-byte pair (service codes are little-endian on the card)."""
    if len(data) % 2 != 0:
        raise InvalidPairLength(len(data))
    out = bytearray(len(data))
    out[0::2] = data[1::2]
    out[1::2] = data[0::2]
    return bytes(out)
