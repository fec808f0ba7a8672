from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from silicarw.core.smartcard import Card

lg = logging.getLogger(__name__)

IDM_LENGTH = 8


class Channel(Protocol):
    """Synchronous half-duplex session with one FeliCa tag.

    ``idm`` is the identifier read when the session was opened. It is
    re-read on every ``connect``.
    """

    @property
    def idm(self) -> bytes: ...
    def connect(self) -> None: ...
    def close(self) -> None: ...
    def transceive(self, frame: bytes) -> bytes: ...


class Agent:
    """Agent that manages reader discovery, the tag session and frame exchange.

    Implements :class:`Channel` over a pyscard :class:`Card`. Protocol
    operations live in standalone functions and classes that receive the
    agent (or ``agent.transceive``) and have no other transport dependency.
    """

    def __init__(self, card: Card, reader: str | None = None) -> None:
        self._card = card
        self._reader = reader
        self._idm: bytes | None = None

    @property
    def connected(self) -> bool:
        return self._idm is not None and self._card.connected

    @property
    def idm(self) -> bytes:
        if self._idm is None:
            raise RuntimeError("not connected to a card")
        return self._idm

    def _candidates(self) -> list:
        available = self._card.list_readers()
        if not available:
            raise RuntimeError("no readers found")
        if self._reader is None:
            return available
        wanted = self._reader.lower()
        matching = [r for r in available if wanted in str(r).lower()]
        if not matching:
            raise RuntimeError(f"no reader matching '{self._reader}'")
        return matching

    def connect(self) -> None:
        """Discover a reader holding a FeliCa tag, connect and read its IDm."""
        if self._idm is not None:
            self.close()
        for reader in self._candidates():
            try:
                self._card.connect(reader)
                idm = self._card.get_idm()
            except Exception:
                lg.debug("no card on %s", reader)
                self._card.disconnect()
                continue
            if idm is None or len(idm) != IDM_LENGTH:
                lg.debug("card on %s did not report an IDm", reader)
                self._card.disconnect()
                continue
            self._idm = idm
            lg.info("connected, IDm %s", idm.hex().upper())
            return
        raise RuntimeError("no FeliCa card found on any reader")

    def close(self) -> None:
        """End the tag session. Safe to call when already closed."""
        self._idm = None
        self._card.disconnect()

    def transceive(self, frame: bytes) -> bytes:
        """Exchange one frame with the tag."""
        if self._idm is None:
            raise RuntimeError("not connected to a card")
        return self._card.transceive(frame)
