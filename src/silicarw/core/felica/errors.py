"""FeliCa error taxonomy.

Validation errors are raised before any frame is sent. Response errors
are raised while decoding a frame the card returned. Both are turned
into result values by the block operations; nothing here reaches the
operator as an unhandled exception.
"""

from __future__ import annotations


class FelicaError(Exception):
    """Base class for all FeliCa codec and protocol errors."""


# -- validation (no I/O has happened) --


class ValidationError(FelicaError, ValueError):
    """Input rejected before a frame was built."""


class MalformedHex(ValidationError):
    def __init__(self, text: str) -> None:
        super().__init__(f"malformed hex: '{text}'")
        self.text = text


class InvalidPairLength(ValidationError):
    def __init__(self, length: int) -> None:
        super().__init__(f"byte pairs need an even length, got {length}")
        self.length = length


class InvalidIdentifier(ValidationError):
    def __init__(self, length: int) -> None:
        super().__init__(f"IDm must be 8 bytes, got {length}")
        self.length = length


class InvalidBlockNumber(ValidationError):
    def __init__(self, block: int) -> None:
        super().__init__(f"invalid block number: {block}")
        self.block = block


class InvalidBlockList(ValidationError):
    def __init__(self, block_list: bytes) -> None:
        super().__init__(
            f"invalid block list: '{block_list.hex().upper()}' "
            f"({len(block_list)} bytes, need a non-empty even length)"
        )
        self.block_list = block_list


class InvalidPayloadLength(ValidationError):
    def __init__(self, length: int) -> None:
        super().__init__(f"data must be exactly 16 bytes, got {length}")
        self.length = length


# -- response decoding --


class ResponseError(FelicaError):
    """The card answered, but the answer is not a successful response."""


class MalformedResponse(ResponseError):
    def __init__(self, frame: bytes) -> None:
        super().__init__(f"malformed response: {frame.hex().upper() or '(empty)'}")
        self.frame = frame


class TruncatedResponse(ResponseError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"truncated response: expected {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class StatusError(ResponseError):
    """Card-reported status flags other than 00 00, passed through verbatim."""

    def __init__(self, flag1: int, flag2: int) -> None:
        super().__init__(f"status flags: {flag1:02X} {flag2:02X}")
        self.flag1 = flag1
        self.flag2 = flag2


# -- transport --


class CommunicationError(FelicaError):
    """The exchange itself failed (no tag, timeout, reader error)."""

    def __init__(self, message: str) -> None:
        super().__init__(f"communication error: {message}")
        self.message = message


class InvalidTransition(FelicaError):
    """An event arrived that the write flow cannot accept in its current stage."""
