"""FeliCa terminal messages.

Results are the block-operation result types and :class:`WriteOutcome`;
only the raw frame exchange has its own result class.
"""

from __future__ import annotations

from dataclasses import dataclass

from silicarw.core.base import Message, Result
from silicarw.core.felica.flow import WriteRequest


@dataclass(frozen=True)
class ReadIdmPmmMessage(Message):
    """Read the IDm/PMm system block (83)."""


@dataclass(frozen=True)
class ReadLastErrorMessage(Message):
    """Read the last rejected command (blocks 80E0, 80E1)."""


@dataclass(frozen=True)
class ReadSystemCodesMessage(Message):
    """Read the system code list block (85)."""


@dataclass(frozen=True)
class ReadServiceCodesMessage(Message):
    """Read the service code list block (84)."""


@dataclass(frozen=True)
class ReadBlockMessage(Message):
    """Read one block by number (0-255)."""

    block: int


@dataclass(frozen=True)
class WriteBlockMessage(Message):
    """Write one block; identity writes are verified by reconnecting."""

    request: WriteRequest


@dataclass(frozen=True)
class RawFrameMessage(Message):
    """Send a raw FeliCa frame (length byte included) to the tag."""

    frame: bytes


@dataclass(frozen=True)
class RawFrameResult(Result):
    success: bool
    response: bytes = b""
    error_message: str | None = None
