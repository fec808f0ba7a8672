"""Human-readable formatting of tag data and write outcomes."""

from __future__ import annotations

from silicarw.app.cardinfo import CardInfo
from silicarw.app.history import HistoryEntry
from silicarw.core.felica.codec import bytes_to_hex
from silicarw.core.felica.flow import WriteOutcome

READ_FAILED = "read failed"
NONE = "none"
NOT_READ = "(not read)"


def format_code_list(codes: tuple[str, ...] | None) -> str:
    """None means the read failed; an empty list is shown as 'none'."""
    if codes is None:
        return READ_FAILED
    if not codes:
        return NONE
    return ", ".join(codes)


def format_outcome(outcome: WriteOutcome) -> str:
    return f"[{outcome.stage.value}] {outcome.message}"


def format_card_info(info: CardInfo) -> str:
    def _hex(data: bytes | None) -> str:
        return bytes_to_hex(data) if data is not None else NOT_READ

    lines = [
        f"IDm:           {_hex(info.idm)}",
        f"PMm:           {_hex(info.pmm)}",
        f"Last Error:    {info.last_error if info.last_error is not None else NOT_READ}",
        f"System Codes:  {format_code_list(info.system_codes) if info.system_codes is not None else NOT_READ}",
        f"Service Codes: {format_code_list(info.service_codes) if info.service_codes is not None else NOT_READ}",
    ]
    for block in sorted(info.blocks):
        lines.append(f"Block {block:02X}:      {info.blocks[block]}")
    return "\n".join(lines)


def format_history(entries: list[HistoryEntry]) -> str:
    if not entries:
        return "(no history)"
    blocks = []
    for entry in entries:
        body = "\n".join(f"    {line}" for line in entry.content.splitlines())
        blocks.append(f"  #{entry.id}  {entry.timestamp}\n{body}")
    return "\n".join(blocks)
