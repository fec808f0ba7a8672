"""Write-then-verify flow.

The protocol state of one write lives in an immutable :class:`FlowState`.
:func:`step` is a pure transition ``(state, event) -> (state, outcome)``;
:func:`run_write` drives it against a channel. An outcome is returned
exactly once, when the flow reaches a terminal stage.

Stages::

    IDLE -> CONNECTED -> WRITING -> VERIFY_RECONNECT -> VERIFIED
              |            |              |          -> VERIFY_FAILED
              |            |              `----------> WRITE_DONE_UNVERIFIED
              |            |-> WRITE_SUCCEEDED
              |            `-> WRITE_FAILED
              `-> ALREADY_WRITTEN

Identity-changing writes (the request carries ``verify_idm``) are
verified by closing the channel, waiting once, reconnecting and
comparing the IDm the tag now reports. There is exactly one attempt.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from silicarw.core.base.agent import IDM_LENGTH, Channel
from silicarw.core.base.message import Result
from silicarw.core.felica.codec import BLOCK_SIZE, bytes_to_hex
from silicarw.core.felica.errors import (
    InvalidBlockNumber,
    InvalidIdentifier,
    InvalidPayloadLength,
    InvalidTransition,
)
from silicarw.core.felica.operations import BlockOperationResult, write_block

lg = logging.getLogger(__name__)

DEFAULT_VERIFY_DELAY = 0.1


class Stage(Enum):
    IDLE = "idle"
    CONNECTED = "connected"
    WRITING = "writing"
    VERIFY_RECONNECT = "verify reconnect"
    ALREADY_WRITTEN = "already written"
    WRITE_SUCCEEDED = "write succeeded"
    WRITE_FAILED = "write failed"
    VERIFIED = "verified"
    VERIFY_FAILED = "verify failed"
    WRITE_DONE_UNVERIFIED = "write done, unverified"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({
    Stage.ALREADY_WRITTEN,
    Stage.WRITE_SUCCEEDED,
    Stage.WRITE_FAILED,
    Stage.VERIFIED,
    Stage.VERIFY_FAILED,
    Stage.WRITE_DONE_UNVERIFIED,
})


@dataclass(frozen=True)
class WriteRequest:
    """One block write, built from validated operator input and used once."""

    block: int
    data: bytes
    description: str
    verify_idm: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.block, int) or not 0 <= self.block <= 0xFF:
            raise InvalidBlockNumber(self.block)
        if len(self.data) != BLOCK_SIZE:
            raise InvalidPayloadLength(len(self.data))
        if self.verify_idm is not None and len(self.verify_idm) != IDM_LENGTH:
            raise InvalidIdentifier(len(self.verify_idm))


# -- events --


@dataclass(frozen=True)
class Connected:
    idm: bytes


@dataclass(frozen=True)
class WriteIssued:
    pass


@dataclass(frozen=True)
class WriteCompleted:
    result: BlockOperationResult


@dataclass(frozen=True)
class Reconnected:
    idm: bytes


@dataclass(frozen=True)
class ReconnectFailed:
    message: str


Event = Connected | WriteIssued | WriteCompleted | Reconnected | ReconnectFailed


@dataclass(frozen=True)
class FlowState:
    stage: Stage
    request: WriteRequest
    previous_idm: bytes | None = None
    current_idm: bytes | None = None


@dataclass(frozen=True)
class WriteOutcome(Result):
    """Terminal result of a write, with a human-readable message."""

    stage: Stage
    message: str
    request: WriteRequest
    previous_idm: bytes | None = None
    current_idm: bytes | None = None
    expected_idm: bytes | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.stage in (Stage.ALREADY_WRITTEN, Stage.WRITE_SUCCEEDED, Stage.VERIFIED)


def start(request: WriteRequest) -> FlowState:
    return FlowState(stage=Stage.IDLE, request=request)


def same_idm(a: bytes | None, b: bytes | None) -> bool:
    """Compare identifiers as hex, ignoring case."""
    if a is None or b is None:
        return False
    return bytes_to_hex(a).upper() == bytes_to_hex(b).upper()


def _hex(idm: bytes | None) -> str:
    return bytes_to_hex(idm) if idm is not None else "?"


def _finish(state: FlowState, stage: Stage, message: str, **kwargs) -> tuple[FlowState, WriteOutcome]:
    final = replace(state, stage=stage)
    outcome = WriteOutcome(
        stage=stage,
        message=message,
        request=state.request,
        previous_idm=state.previous_idm,
        current_idm=state.current_idm,
        **kwargs,
    )
    return final, outcome


def step(state: FlowState, event: Event) -> tuple[FlowState, WriteOutcome | None]:
    """Apply one event. Returns the next state and, if terminal, the outcome."""
    request = state.request

    if state.stage is Stage.IDLE and isinstance(event, Connected):
        state = replace(state, stage=Stage.CONNECTED, previous_idm=event.idm, current_idm=event.idm)
        if request.verify_idm is not None and same_idm(event.idm, request.verify_idm):
            return _finish(
                state, Stage.ALREADY_WRITTEN,
                f"already written\ncurrent IDm: {_hex(event.idm)}",
                expected_idm=request.verify_idm,
            )
        return state, None

    if state.stage is Stage.CONNECTED and isinstance(event, WriteIssued):
        return replace(state, stage=Stage.WRITING), None

    if state.stage is Stage.WRITING and isinstance(event, WriteCompleted):
        result = event.result
        if not result.success:
            error = result.error_message or "no details"
            return _finish(
                state, Stage.WRITE_FAILED,
                f"write failed\n{request.description}\n{error}",
                error=error,
            )
        if request.verify_idm is None:
            return _finish(state, Stage.WRITE_SUCCEEDED, f"write succeeded\n{request.description}")
        return replace(state, stage=Stage.VERIFY_RECONNECT), None

    if state.stage is Stage.VERIFY_RECONNECT and isinstance(event, Reconnected):
        state = replace(state, current_idm=event.idm)
        expected = request.verify_idm
        if same_idm(event.idm, expected):
            return _finish(
                state, Stage.VERIFIED,
                f"write succeeded\nold IDm: {_hex(state.previous_idm)}\nnew IDm: {_hex(event.idm)}",
                expected_idm=expected,
            )
        return _finish(
            state, Stage.VERIFY_FAILED,
            f"write failed\nexpected: {_hex(expected)}\nactual: {_hex(event.idm)}",
            expected_idm=expected,
            error=f"IDm mismatch: expected {_hex(expected)}, got {_hex(event.idm)}",
        )

    if state.stage is Stage.VERIFY_RECONNECT and isinstance(event, ReconnectFailed):
        return _finish(
            state, Stage.WRITE_DONE_UNVERIFIED,
            f"write done\n(verification failed)\ntarget IDm: {_hex(request.verify_idm)}",
            expected_idm=request.verify_idm,
            error=event.message,
        )

    raise InvalidTransition(f"{type(event).__name__} not accepted in stage '{state.stage.value}'")


def run_write(
    request: WriteRequest,
    channel: Channel,
    delay: float = DEFAULT_VERIFY_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> WriteOutcome:
    """Write *request* to the tag on an open *channel* and verify it if asked.

    On a verified write the channel is left open on the new session. If
    the reconnect fails the channel is left closed.
    """
    state = start(request)
    state, outcome = step(state, Connected(channel.idm))
    if outcome is not None:
        lg.info("%s: IDm already %s, nothing written", request.description, _hex(state.current_idm))
        return outcome

    state, _ = step(state, WriteIssued())
    lg.info("%s: writing block %02X", request.description, request.block)
    result = write_block(channel, state.current_idm, request.block, request.data)
    state, outcome = step(state, WriteCompleted(result))
    if outcome is not None:
        return outcome

    try:
        channel.close()
        sleep(delay)
        channel.connect()
        idm = channel.idm
    except Exception as exc:
        lg.warning("could not verify write: %s", exc)
        state, outcome = step(state, ReconnectFailed(str(exc) or type(exc).__name__))
        return outcome
    lg.info("after write, IDm: %s", _hex(idm))
    state, outcome = step(state, Reconnected(idm))
    return outcome
