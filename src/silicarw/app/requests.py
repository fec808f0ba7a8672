"""Build validated write requests from operator input.

Nothing here touches the tag. A request that cannot be built raises
:class:`RequestError` with a message meant for the operator.
"""

from __future__ import annotations

import string

from silicarw.core.felica.codec import hex_to_bytes, pad_to_block, swap_pairs
from silicarw.core.felica.errors import MalformedHex
from silicarw.core.felica.flow import WriteRequest
from silicarw.core.felica.operations import IDM_PMM_BLOCK, SERVICE_CODE_BLOCK, SYSTEM_CODE_BLOCK

DEFAULT_PMM = bytes([0x00, 0x01, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF])
MAX_SYSTEM = 4
MAX_SERVICE = 4
# User data blocks writable with a raw block write.
RAW_BLOCKS = range(0, 12)

_HEX_DIGITS = frozenset(string.hexdigits)


class RequestError(ValueError):
    """Operator input that cannot become a write request."""


def sanitize_hex(raw: str, allow_empty: bool = False) -> str | None:
    """Uppercase *raw* and drop spaces and commas.

    Returns None if the result is empty (unless *allow_empty*) or holds a
    non-hex character.
    """
    cleaned = raw.replace(" ", "").replace(",", "")
    if not cleaned:
        return "" if allow_empty else None
    if not set(cleaned) <= _HEX_DIGITS:
        return None
    return cleaned.upper()


def _exact_hex(raw: str, digits: int, message: str) -> bytes:
    clean = sanitize_hex(raw)
    if clean is None or len(clean) != digits:
        raise RequestError(message)
    return hex_to_bytes(clean)


def idm_request(idm_hex: str, pmm_hex: str = "") -> WriteRequest:
    """Rewrite IDm and PMm (block 83). Verified by reconnecting."""
    idm = _exact_hex(idm_hex, 16, "IDm must be 16 hex digits")
    pmm_clean = sanitize_hex(pmm_hex, allow_empty=True)
    if pmm_clean is None:
        raise RequestError("PMm must be 16 hex digits")
    if pmm_clean:
        if len(pmm_clean) != 16:
            raise RequestError("PMm must be 16 hex digits")
        pmm = hex_to_bytes(pmm_clean)
    else:
        pmm = DEFAULT_PMM
    return WriteRequest(
        block=IDM_PMM_BLOCK,
        data=idm + pmm,
        description="IDm/PMm write",
        verify_idm=idm,
    )


def _code_list(raw: str, kind: str, limit: int) -> bytes:
    clean = sanitize_hex(raw)
    if clean is None:
        raise RequestError(f"{kind} codes must be hex")
    if len(clean) % 4 != 0:
        raise RequestError(f"{kind} codes must be given in 2-byte (4 digit) units")
    count = len(clean) // 4
    if not 0 < count <= limit:
        raise RequestError(f"between 1 and {limit} {kind.lower()} codes can be set")
    try:
        return hex_to_bytes(clean)
    except MalformedHex as exc:
        raise RequestError(str(exc)) from exc


def system_codes_request(codes_hex: str) -> WriteRequest:
    """Set the system code list (block 85), big-endian."""
    codes = _code_list(codes_hex, "System", MAX_SYSTEM)
    return WriteRequest(
        block=SYSTEM_CODE_BLOCK,
        data=pad_to_block(codes),
        description="System Codes write",
    )


def service_codes_request(codes_hex: str) -> WriteRequest:
    """Set the service code list (block 84); each code is stored little-endian."""
    codes = _code_list(codes_hex, "Service", MAX_SERVICE)
    return WriteRequest(
        block=SERVICE_CODE_BLOCK,
        data=pad_to_block(swap_pairs(codes)),
        description="Service Codes write",
    )


def raw_block_request(block: int | str, data_hex: str) -> WriteRequest:
    """Write 16 raw bytes to one of the user blocks 0-11."""
    try:
        number = int(block)
    except (TypeError, ValueError) as exc:
        raise RequestError("block number must be a number") from exc
    if number not in RAW_BLOCKS:
        raise RequestError(f"block number must be between {RAW_BLOCKS[0]} and {RAW_BLOCKS[-1]}")
    data = _exact_hex(data_hex, 32, "data must be 32 hex digits (16 bytes)")
    return WriteRequest(
        block=number,
        data=data,
        description=f"Raw Block {number} write",
    )
