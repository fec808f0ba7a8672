"""Read commands: summary read and single derived reads."""

from __future__ import annotations

import logging

from silicarw.app.display import format_code_list
from silicarw.app.summary import ReadOptions, read_summary
from silicarw.core.felica import (
    ReadBlockMessage,
    ReadIdmPmmMessage,
    ReadLastErrorMessage,
    ReadServiceCodesMessage,
    ReadSystemCodesMessage,
)
from silicarw.core.felica.codec import bytes_to_hex

lg = logging.getLogger(__name__)


def cmd_read(
    runner,
    *,
    last_error: bool = False,
    system_codes: bool = False,
    service_codes: bool = False,
    block: int | None = None,
) -> bool:
    """Read IDm/PMm plus the selected extras and record the summary in history."""
    options = ReadOptions(
        last_error=last_error,
        system_codes=system_codes,
        service_codes=service_codes,
        block=block,
    )
    with runner.tag_session() as terminal:
        lines = read_summary(terminal, runner.info, options)
    summary = "\n".join(lines)
    lg.info("read result:\n%s", summary)
    runner.history.append(summary)
    return True


def cmd_idm(runner) -> bool:
    """Read the IDm/PMm block (83)."""
    with runner.tag_session() as terminal:
        result = terminal.send(ReadIdmPmmMessage())
    if not result.success:
        lg.error("IDm/PMm read failed: %s", result.error_message)
        return False
    runner.info.idm, runner.info.pmm = result.idm, result.pmm
    lg.info("IDm: %s", bytes_to_hex(result.idm))
    lg.info("PMm: %s", bytes_to_hex(result.pmm))
    return True


def cmd_last_error(runner) -> bool:
    """Read the last command the card rejected (blocks 80E0/80E1)."""
    with runner.tag_session() as terminal:
        result = terminal.send(ReadLastErrorMessage())
    if not result.success:
        lg.error("last error read failed: %s", result.error_message)
        return False
    runner.info.last_error = result.diagnostic
    lg.info("Last Error: %s", result.diagnostic)
    return True


def cmd_system_codes(runner) -> bool:
    """Read the system code list (block 85)."""
    with runner.tag_session() as terminal:
        result = terminal.send(ReadSystemCodesMessage())
    if not result.success:
        lg.error("system code read failed: %s", result.error_message)
        return False
    runner.info.system_codes = result.codes
    lg.info("System Codes: %s", format_code_list(result.codes))
    return True


def cmd_service_codes(runner) -> bool:
    """Read the service code list (block 84)."""
    with runner.tag_session() as terminal:
        result = terminal.send(ReadServiceCodesMessage())
    if not result.success:
        lg.error("service code read failed: %s", result.error_message)
        return False
    runner.info.service_codes = result.codes
    lg.info("Service Codes: %s", format_code_list(result.codes))
    return True


def cmd_block(runner, *, n: int) -> bool:
    """Read one block by number (n=0..255, decimal or 0x-hex)."""
    with runner.tag_session() as terminal:
        result = terminal.send(ReadBlockMessage(block=n))
    if not result.success:
        lg.error("block read failed: %s", result.error_message)
        return False
    runner.info.blocks[n] = result.data_hex
    lg.info("Block %02X: %s", n, result.data_hex)
    return True
