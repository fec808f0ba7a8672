"""FeliCa terminal.

Translates app-layer messages into block operations on the agent's
current tag session. Every handler reads the IDm from the session that
is open when it runs.
"""

from __future__ import annotations

import logging

from silicarw.core.base import Agent, Terminal
from silicarw.core.base.terminal import handles
from silicarw.core.felica import operations
from silicarw.core.felica.flow import DEFAULT_VERIFY_DELAY, WriteOutcome, run_write
from silicarw.core.felica.messages import (
    RawFrameMessage,
    RawFrameResult,
    ReadBlockMessage,
    ReadIdmPmmMessage,
    ReadLastErrorMessage,
    ReadServiceCodesMessage,
    ReadSystemCodesMessage,
    WriteBlockMessage,
)
from silicarw.core.smartcard.logging import log_hex

lg = logging.getLogger(__name__)


class FelicaTerminal(Terminal):
    """Terminal for FeliCa tags that accept the wildcard service code."""

    def __init__(self, agent: Agent, verify_delay: float = DEFAULT_VERIFY_DELAY) -> None:
        super().__init__(agent)
        self.verify_delay = verify_delay

    @handles(ReadIdmPmmMessage)
    def _read_idm_pmm(self, message: ReadIdmPmmMessage) -> operations.IdmPmmResult:
        return operations.read_idm_pmm(self._agent, self.idm)

    @handles(ReadLastErrorMessage)
    def _read_last_error(self, message: ReadLastErrorMessage) -> operations.LastErrorResult:
        return operations.read_last_error_command(self._agent, self.idm)

    @handles(ReadSystemCodesMessage)
    def _read_system_codes(self, message: ReadSystemCodesMessage) -> operations.CodeListResult:
        return operations.read_system_codes(self._agent, self.idm)

    @handles(ReadServiceCodesMessage)
    def _read_service_codes(self, message: ReadServiceCodesMessage) -> operations.CodeListResult:
        return operations.read_service_codes(self._agent, self.idm)

    @handles(ReadBlockMessage)
    def _read_block(self, message: ReadBlockMessage) -> operations.BlockReadResult:
        return operations.read_block_hex(self._agent, self.idm, message.block)

    @handles(WriteBlockMessage)
    def _write_block(self, message: WriteBlockMessage) -> WriteOutcome:
        return run_write(message.request, self._agent, delay=self.verify_delay)

    @handles(RawFrameMessage)
    def _raw_frame(self, message: RawFrameMessage) -> RawFrameResult:
        log_hex(lg, ">> ", message.frame)
        try:
            response = self._agent.transceive(message.frame)
        except Exception as exc:
            lg.error("raw exchange failed: %s", exc)
            return RawFrameResult(success=False, error_message=str(exc) or type(exc).__name__)
        log_hex(lg, "<< ", response)
        return RawFrameResult(success=True, response=bytes(response))
