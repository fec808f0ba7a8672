"""Read summary: one tag session, identity first, then the selected extras."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from silicarw.app.cardinfo import CardInfo
from silicarw.app.display import READ_FAILED, format_code_list
from silicarw.core.felica import (
    ReadBlockMessage,
    ReadIdmPmmMessage,
    ReadLastErrorMessage,
    ReadServiceCodesMessage,
    ReadSystemCodesMessage,
)
from silicarw.core.felica.codec import bytes_to_hex
from silicarw.core.felica.terminal import FelicaTerminal

lg = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadOptions:
    last_error: bool = True
    system_codes: bool = False
    service_codes: bool = False
    block: int | None = None


def read_summary(terminal: FelicaTerminal, info: CardInfo, options: ReadOptions) -> list[str]:
    """Run the reads selected by *options* on the open session.

    Updates *info* and returns the summary lines.
    """
    lines: list[str] = []

    session_idm = terminal.idm
    ident = terminal.send(ReadIdmPmmMessage())
    if ident.success:
        info.idm, info.pmm = ident.idm, ident.pmm
        lines.append(f"IDm: {bytes_to_hex(ident.idm)}")
        lines.append(f"PMm: {bytes_to_hex(ident.pmm)}")
    else:
        info.idm, info.pmm = session_idm, None
        lines.append(f"IDm: {bytes_to_hex(session_idm)}")
        lines.append(f"PMm: {READ_FAILED}")

    if options.last_error:
        result = terminal.send(ReadLastErrorMessage())
        info.last_error = result.diagnostic if result.success else READ_FAILED
        lines.append(f"Last Error: {info.last_error}")

    if options.system_codes:
        result = terminal.send(ReadSystemCodesMessage())
        info.system_codes = result.codes if result.success else None
        lines.append(f"System Codes: {format_code_list(info.system_codes)}")

    if options.service_codes:
        result = terminal.send(ReadServiceCodesMessage())
        info.service_codes = result.codes if result.success else None
        lines.append(f"Service Codes: {format_code_list(info.service_codes)}")

    if options.block is not None:
        if not isinstance(options.block, int) or not 0 <= options.block <= 0xFF:
            lines.append("Block: invalid number")
        else:
            label = f"Block {options.block:02X}"
            result = terminal.send(ReadBlockMessage(block=options.block))
            if result.success:
                info.blocks[options.block] = result.data_hex
                lines.append(f"{label}: {result.data_hex}")
            else:
                lines.append(f"{label}: {READ_FAILED}")

    return lines
