"""Response frame validation and decoding.

Read response:  ``[len][07][IDm 8][status1][status2][n][16*n data]``,
status flags at offsets 10 and 11.

Write response: ``[len][09]...``, at least 11 bytes, status flags taken
from offsets 9 and 10.
"""

from __future__ import annotations

from dataclasses import dataclass

from silicarw.core.felica.codec import BLOCK_SIZE
from silicarw.core.felica.commands import READ_WITHOUT_ENCRYPTION, WRITE_WITHOUT_ENCRYPTION
from silicarw.core.felica.errors import MalformedResponse, StatusError, TruncatedResponse

READ_RESPONSE = READ_WITHOUT_ENCRYPTION + 1
WRITE_RESPONSE = WRITE_WITHOUT_ENCRYPTION + 1

READ_MIN_LENGTH = 13
READ_STATUS_OFFSET = 10
READ_COUNT_OFFSET = 12
READ_DATA_OFFSET = 13

WRITE_MIN_LENGTH = 11
WRITE_STATUS_OFFSET = 9

HEADER_LENGTH = 10


@dataclass(frozen=True)
class ResponseFrame:
    length: int
    response_code: int
    idm: bytes
    payload: bytes


def parse_frame(frame: bytes) -> ResponseFrame:
    """Split a response into its header fields and the remaining payload."""
    if len(frame) < HEADER_LENGTH:
        raise MalformedResponse(bytes(frame))
    return ResponseFrame(
        length=frame[0],
        response_code=frame[1],
        idm=bytes(frame[2:HEADER_LENGTH]),
        payload=bytes(frame[HEADER_LENGTH:]),
    )


def status_flags(frame: bytes, offset: int) -> tuple[int, int] | None:
    """Return the status flag pair at *offset*, or None if the frame is too short."""
    if len(frame) < offset + 2:
        return None
    return frame[offset], frame[offset + 1]


def _check_status(flag1: int, flag2: int) -> None:
    if flag1 != 0x00 or flag2 != 0x00:
        raise StatusError(flag1, flag2)


def _header(frame: bytes, min_length: int, response_code: int) -> ResponseFrame:
    if len(frame) < min_length:
        raise MalformedResponse(bytes(frame))
    header = parse_frame(frame)
    if header.response_code != response_code:
        raise MalformedResponse(bytes(frame))
    return header


def parse_read_response(frame: bytes) -> bytes:
    """Validate a Read Without Encryption response and return its block data."""
    header = _header(frame, READ_MIN_LENGTH, READ_RESPONSE)
    payload = header.payload
    status = READ_STATUS_OFFSET - HEADER_LENGTH
    _check_status(payload[status], payload[status + 1])
    count = payload[READ_COUNT_OFFSET - HEADER_LENGTH]
    start = READ_DATA_OFFSET - HEADER_LENGTH
    end = start + count * BLOCK_SIZE
    if len(payload) < end:
        raise TruncatedResponse(HEADER_LENGTH + end, len(frame))
    return payload[start:end]


def parse_write_response(frame: bytes) -> None:
    """Validate a Write Without Encryption response."""
    header = _header(frame, WRITE_MIN_LENGTH, WRITE_RESPONSE)
    # offsets 9 and 10: the last byte of the IDm field and the first payload byte
    _check_status(header.idm[WRITE_STATUS_OFFSET - 2], header.payload[0])
