from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """Base class for requests dispatched to a terminal (one tag operation each)."""


@dataclass(frozen=True)
class Result:
    """Base class for typed results from a terminal operation.

    Results are values: failures are reported in the result, not raised.
    """
