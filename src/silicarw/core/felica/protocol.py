from __future__ import annotations

import logging
from collections.abc import Callable

from silicarw.core.felica.codec import bytes_to_spaced_hex
from silicarw.core.felica.commands import build_read_command, build_write_command
from silicarw.core.felica.responses import (
    READ_STATUS_OFFSET,
    WRITE_STATUS_OFFSET,
    parse_read_response,
    parse_write_response,
    status_flags,
)
from silicarw.core.smartcard.logging import GREEN, PROTOCOL, RED, RESET, log_hex

lg = logging.getLogger(__name__)


class FeliCa:
    """FeliCa Read/Write Without Encryption operations.

    Receives the channel's ``transceive`` as a callable. Builder errors
    propagate before anything is sent; response errors propagate after
    the exchange.
    """

    def __init__(self, transceive: Callable[[bytes], bytes]) -> None:
        self._transceive = transceive

    def _send(self, label: str, frame: bytes, status_offset: int) -> bytes:
        log_hex(lg, ">> ", frame)
        resp = bytes(self._transceive(frame))
        log_hex(lg, "<< ", resp)
        flags = status_flags(resp, status_offset)
        if flags is None:
            lg.log(PROTOCOL, "%s %sshort response%s", label, RED, RESET)
        else:
            color = GREEN if flags == (0x00, 0x00) else RED
            lg.log(PROTOCOL, "%s %s%02X %02X%s", label, color, flags[0], flags[1], RESET)
        return resp

    # -- commands --

    def send_read(self, idm: bytes, block_list: bytes) -> bytes:
        """READ WITHOUT ENCRYPTION (06), service FFFF."""
        frame = build_read_command(idm, block_list)
        return self._send(f"READ {bytes_to_spaced_hex(block_list)}", frame, READ_STATUS_OFFSET)

    def send_write(self, idm: bytes, block: int, data: bytes) -> bytes:
        """WRITE WITHOUT ENCRYPTION (08), service FFFF, one block."""
        frame = build_write_command(idm, block, data)
        return self._send(f"WRITE block={block:02X}", frame, WRITE_STATUS_OFFSET)

    # -- operations --

    def read(self, idm: bytes, block_list: bytes) -> bytes:
        """Read the listed blocks and return their concatenated data."""
        return parse_read_response(self.send_read(idm, block_list))

    def write(self, idm: bytes, block: int, data: bytes) -> None:
        """Write one block, raising on any non-success response."""
        parse_write_response(self.send_write(idm, block, data))
