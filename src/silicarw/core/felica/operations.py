"""Block operations over a FeliCa channel.

Each call performs exactly one request/response exchange and returns a
result value. Validation, response and channel errors never escape:
they come back as ``success=False`` with a diagnostic message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from silicarw.core.base.agent import IDM_LENGTH, Channel
from silicarw.core.base.message import Result
from silicarw.core.felica.codec import BLOCK_SIZE, bytes_to_hex, bytes_to_spaced_hex
from silicarw.core.felica.commands import block_list, block_list_element
from silicarw.core.felica.errors import CommunicationError, StatusError, ValidationError
from silicarw.core.felica.protocol import FeliCa

lg = logging.getLogger(__name__)

IDM_PMM_BLOCK = 0x83
SERVICE_CODE_BLOCK = 0x84
SYSTEM_CODE_BLOCK = 0x85
# Last error command: blocks 80E0 and 80E1, read together.
LAST_ERROR_BLOCKS = (0xE0, 0xE1)

NONE = "none"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlockOperationResult(Result):
    success: bool
    error_message: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.error_message is not None:
            raise ValueError("a successful result carries no error message")

    @classmethod
    def failed(cls, message: str):
        return cls(success=False, error_message=message)


@dataclass(frozen=True)
class ReadResult(BlockOperationResult):
    data: bytes = b""


@dataclass(frozen=True)
class IdmPmmResult(BlockOperationResult):
    idm: bytes = b""
    pmm: bytes = b""


@dataclass(frozen=True)
class CodeListResult(BlockOperationResult):
    codes: tuple[str, ...] = ()


@dataclass(frozen=True)
class LastErrorResult(BlockOperationResult):
    diagnostic: str = ""


@dataclass(frozen=True)
class BlockReadResult(BlockOperationResult):
    block: int = 0
    data_hex: str = ""


def _diagnostic(action: str, exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        lg.error("%s rejected: %s", action, exc)
        return str(exc)
    if isinstance(exc, (StatusError, CommunicationError)):
        message = str(exc)
    else:
        message = str(CommunicationError(str(exc) or type(exc).__name__))
    lg.error("%s failed: %s", action, message)
    return message


# ---------------------------------------------------------------------------
# Exchanges
# ---------------------------------------------------------------------------


def read_blocks(channel: Channel, idm: bytes, blocks: bytes) -> ReadResult:
    """Read every block in the 2-byte element list *blocks* in one exchange."""
    try:
        data = FeliCa(channel.transceive).read(idm, blocks)
    except Exception as exc:
        return ReadResult.failed(_diagnostic("read", exc))
    return ReadResult(success=True, data=data)


def read_single_block(channel: Channel, idm: bytes, block: int) -> ReadResult:
    try:
        element = block_list_element(block)
    except ValidationError as exc:
        return ReadResult.failed(_diagnostic("read", exc))
    return read_blocks(channel, idm, element)


def write_block(channel: Channel, idm: bytes, block: int, data: bytes) -> BlockOperationResult:
    """Write one 16-byte block and check the card's status flags."""
    try:
        FeliCa(channel.transceive).write(idm, block, data)
    except Exception as exc:
        return BlockOperationResult.failed(_diagnostic(f"write block {block:02X}", exc))
    return BlockOperationResult(success=True)


# ---------------------------------------------------------------------------
# Derived reads
# ---------------------------------------------------------------------------


def read_idm_pmm(channel: Channel, idm: bytes) -> IdmPmmResult:
    """Read the IDm/PMm system block."""
    result = read_single_block(channel, idm, IDM_PMM_BLOCK)
    if not result.success:
        return IdmPmmResult.failed(result.error_message)
    if len(result.data) < 2 * IDM_LENGTH:
        return IdmPmmResult.failed(f"short IDm/PMm block: {len(result.data)} bytes")
    return IdmPmmResult(
        success=True, idm=result.data[:IDM_LENGTH], pmm=result.data[IDM_LENGTH : 2 * IDM_LENGTH]
    )


def decode_code_list(data: bytes, swap: bool) -> tuple[str, ...]:
    """Decode 2-byte codes up to the first 00 00 pair or the end of *data*."""
    codes = []
    for i in range(0, len(data) - 1, 2):
        first, second = data[i], data[i + 1]
        if first == 0x00 and second == 0x00:
            break
        pair = bytes([second, first]) if swap else bytes([first, second])
        codes.append(bytes_to_hex(pair))
    return tuple(codes)


def read_code_list(channel: Channel, idm: bytes, block: int, swap: bool) -> CodeListResult:
    result = read_single_block(channel, idm, block)
    if not result.success:
        return CodeListResult.failed(result.error_message)
    return CodeListResult(success=True, codes=decode_code_list(result.data, swap))


def read_system_codes(channel: Channel, idm: bytes) -> CodeListResult:
    """System codes are stored big-endian."""
    return read_code_list(channel, idm, SYSTEM_CODE_BLOCK, swap=False)


def read_service_codes(channel: Channel, idm: bytes) -> CodeListResult:
    """Service codes are stored little-endian, the same way they are written."""
    return read_code_list(channel, idm, SERVICE_CODE_BLOCK, swap=True)


def decode_last_error(data: bytes) -> str:
    """Decode the last-error-command blocks: a length byte, then the command bytes."""
    available = len(data) - 1
    if available <= 0:
        return NONE
    length = min(data[0], available)
    if length <= 0:
        return NONE
    return bytes_to_spaced_hex(data[1 : 1 + length])


def read_last_error_command(channel: Channel, idm: bytes) -> LastErrorResult:
    """Read the last command the card rejected."""
    result = read_blocks(channel, idm, block_list(*LAST_ERROR_BLOCKS))
    if not result.success:
        return LastErrorResult.failed(result.error_message)
    return LastErrorResult(success=True, diagnostic=decode_last_error(result.data))


def read_block_hex(channel: Channel, idm: bytes, block: int) -> BlockReadResult:
    """Read any block 0-255 and render its 16 bytes as hex."""
    result = read_single_block(channel, idm, block)
    if not result.success:
        return BlockReadResult.failed(result.error_message)
    return BlockReadResult(success=True, block=block, data_hex=bytes_to_hex(result.data[:BLOCK_SIZE]))
