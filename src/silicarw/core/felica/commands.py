"""Read/Write Without Encryption request frames.

Every frame is ``[length][command code][IDm (8)][command data]`` where
the length byte counts the whole frame, itself included.
"""

from __future__ import annotations

from silicarw.core.base.agent import IDM_LENGTH
from silicarw.core.felica.codec import BLOCK_SIZE
from silicarw.core.felica.errors import (
    InvalidBlockList,
    InvalidBlockNumber,
    InvalidIdentifier,
    InvalidPayloadLength,
)

READ_WITHOUT_ENCRYPTION = 0x06
WRITE_WITHOUT_ENCRYPTION = 0x08

# Wildcard service code FFFF, low byte first.
SERVICE_CODE = bytes([0xFF, 0xFF])

# Block list element flag: 2-byte element, access mode 0, service index 0.
TWO_BYTE_ELEMENT = 0x80


def block_list_element(block: int) -> bytes:
    """One 2-byte block list element ``[0x80, block]``."""
    if not isinstance(block, int) or not 0 <= block <= 0xFF:
        raise InvalidBlockNumber(block)
    return bytes([TWO_BYTE_ELEMENT, block])


def block_list(*blocks: int) -> bytes:
    return b"".join(block_list_element(b) for b in blocks)


def _frame(command_code: int, idm: bytes, command_data: bytes) -> bytes:
    if len(idm) != IDM_LENGTH:
        raise InvalidIdentifier(len(idm))
    length = 2 + IDM_LENGTH + len(command_data)
    return bytes([length, command_code]) + bytes(idm) + command_data


def build_read_command(idm: bytes, block_list: bytes) -> bytes:
    """Read Without Encryption (06) for the blocks in *block_list*."""
    if not block_list or len(block_list) % 2 != 0:
        raise InvalidBlockList(bytes(block_list))
    block_count = len(block_list) // 2
    command_data = bytes([1]) + SERVICE_CODE + bytes([block_count]) + bytes(block_list)
    return _frame(READ_WITHOUT_ENCRYPTION, idm, command_data)


def build_write_command(idm: bytes, block: int, data: bytes) -> bytes:
    """Write Without Encryption (08) of one 16-byte block."""
    element = block_list_element(block)
    if len(data) != BLOCK_SIZE:
        raise InvalidPayloadLength(len(data))
    command_data = bytes([1]) + SERVICE_CODE + bytes([1]) + element + bytes(data)
    return _frame(WRITE_WITHOUT_ENCRYPTION, idm, command_data)
