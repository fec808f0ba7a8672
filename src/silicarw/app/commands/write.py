"""Write commands.

Each command builds a write request from operator input first; invalid
input is reported without touching the tag.
"""

from __future__ import annotations

import logging

from silicarw.app.display import format_outcome
from silicarw.app.requests import (
    RequestError,
    idm_request,
    raw_block_request,
    service_codes_request,
    system_codes_request,
)
from silicarw.core.felica import Stage, WriteBlockMessage, WriteRequest

lg = logging.getLogger(__name__)

# Hex inputs stay strings; sanitizing happens in the request builders.
_raw_commands: set[str] = {"write_idm", "write_system_codes", "write_service_codes", "write_raw"}


def _write(runner, request: WriteRequest) -> bool:
    lg.info("prepared %s, block %02X", request.description, request.block)
    with runner.tag_session() as terminal:
        outcome = terminal.send(WriteBlockMessage(request=request))
    if outcome.stage is Stage.WRITE_DONE_UNVERIFIED:
        # the tag may carry the new IDm, or still the old one
        runner.info.idm = None
    elif outcome.current_idm is not None:
        runner.info.idm = outcome.current_idm
    if outcome.success:
        lg.info("%s", format_outcome(outcome))
    else:
        lg.error("%s", format_outcome(outcome))
    return outcome.success


def _build(factory, *args) -> WriteRequest | None:
    try:
        return factory(*args)
    except RequestError as exc:
        lg.error("error: %s", exc)
        return None


def cmd_write_idm(runner, *, idm: str = "", pmm: str = "") -> bool:
    """Rewrite IDm/PMm (idm=HEX16 [pmm=HEX16]) and verify by reconnecting."""
    request = _build(idm_request, idm, pmm)
    return request is not None and _write(runner, request)


def cmd_write_system_codes(runner, *, codes: str = "") -> bool:
    """Set 1-4 system codes (codes=HEX, 4 digits each)."""
    request = _build(system_codes_request, codes)
    return request is not None and _write(runner, request)


def cmd_write_service_codes(runner, *, codes: str = "") -> bool:
    """Set 1-4 service codes (codes=HEX, 4 digits each)."""
    request = _build(service_codes_request, codes)
    return request is not None and _write(runner, request)


def cmd_write_raw(runner, *, block: str = "", data: str = "") -> bool:
    """Write 16 bytes to user block 0-11 (block=N data=HEX32)."""
    request = _build(raw_block_request, block, data)
    return request is not None and _write(runner, request)
