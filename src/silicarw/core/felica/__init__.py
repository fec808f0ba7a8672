from silicarw.core.felica.flow import Stage, WriteOutcome, WriteRequest, run_write
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
from silicarw.core.felica.operations import (
    BlockOperationResult,
    BlockReadResult,
    CodeListResult,
    IdmPmmResult,
    LastErrorResult,
    ReadResult,
)
from silicarw.core.felica.terminal import FelicaTerminal

__all__ = [
    "BlockOperationResult",
    "BlockReadResult",
    "CodeListResult",
    "FelicaTerminal",
    "IdmPmmResult",
    "LastErrorResult",
    "RawFrameMessage",
    "RawFrameResult",
    "ReadBlockMessage",
    "ReadIdmPmmMessage",
    "ReadLastErrorMessage",
    "ReadResult",
    "ReadServiceCodesMessage",
    "ReadSystemCodesMessage",
    "Stage",
    "WriteBlockMessage",
    "WriteOutcome",
    "WriteRequest",
    "run_write",
]
