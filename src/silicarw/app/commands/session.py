"""Tag session management and raw frame exchange."""

from __future__ import annotations

import logging

from silicarw.core.felica import RawFrameMessage
from silicarw.core.felica.codec import bytes_to_hex, bytes_to_spaced_hex, hex_to_bytes

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no conversion).
_raw_commands: set[str] = {"raw"}


def cmd_connect(runner) -> bool:
    """Open a tag session (kept open across commands until 'disconnect')."""
    runner.terminal.connect()
    runner.info.idm = runner.terminal.idm
    lg.info("IDm: %s", bytes_to_hex(runner.terminal.idm))
    return True


def cmd_disconnect(runner) -> bool:
    """Close the tag session."""
    runner.terminal.disconnect()
    return True


def cmd_reconnect(runner) -> bool:
    """Close and reopen the tag session, re-reading the IDm."""
    runner.terminal.disconnect()
    return cmd_connect(runner)


def cmd_raw(runner, *, data: str = "") -> bool:
    """Send a raw FeliCa frame (data=HEX, length byte included)."""
    frame = hex_to_bytes(data.replace(" ", ""))
    if not frame:
        lg.error("raw: empty frame")
        return False
    with runner.tag_session() as terminal:
        result = terminal.send(RawFrameMessage(frame=frame))
    if not result.success:
        lg.error("raw exchange failed: %s", result.error_message)
        return False
    lg.info("<< %s", bytes_to_spaced_hex(result.response) or "(empty)")
    return True
