"""Tag information collected during the REPL session."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CardInfo:
    """Last values read from a tag. Presentation state only."""

    idm: bytes | None = None
    pmm: bytes | None = None
    last_error: str | None = None
    system_codes: tuple[str, ...] | None = None
    service_codes: tuple[str, ...] | None = None
    blocks: dict[int, str] = field(default_factory=dict)
