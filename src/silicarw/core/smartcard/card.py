from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartcard.CardConnection import CardConnection
from smartcard.System import readers

from silicarw.core.smartcard.observer import LoggingCardObserver

if TYPE_CHECKING:
    from smartcard.reader.Reader import Reader

lg = logging.getLogger(__name__)

# PC/SC pseudo-APDU headers (CLA INS P1 P2)
GET_DATA_UID = [0xFF, 0xCA, 0x00, 0x00]
TRANSPARENT = [0xFF, 0x00, 0x00, 0x00]


class TransceiveError(Exception):
    """The reader rejected a transparent exchange with a non-9000 status word."""

    def __init__(self, sw1: int, sw2: int) -> None:
        super().__init__(f"reader status {sw1:02X}{sw2:02X}")
        self.sw1 = sw1
        self.sw2 = sw2


class Card:
    """Wrapper around pyscard for FeliCa communication through a PC/SC reader.

    FeliCa frames are carried inside the transparent pseudo-APDU
    ``FF 00 00 00 Lc <frame>``; the reader answers with the raw FeliCa
    response followed by SW 90 00.
    """

    def __init__(self) -> None:
        self._connection: CardConnection | None = None
        self._observer = LoggingCardObserver()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @staticmethod
    def list_readers() -> list[Reader]:
        return readers()

    def connect(self, reader: Reader) -> None:
        connection = reader.createConnection()
        connection.addObserver(self._observer)
        connection.connect()
        self._connection = connection

    def disconnect(self) -> None:
        if self._connection is not None:
            connection, self._connection = self._connection, None
            try:
                connection.disconnect()
            finally:
                connection.deleteObserver(self._observer)

    def get_idm(self) -> bytes | None:
        """Get the IDm of a FeliCa card via PC/SC pseudo-APDU FF CA 00 00."""
        if self._connection is None:
            raise RuntimeError("not connected to a card")
        data, sw1, sw2 = self._connection.transmit(GET_DATA_UID + [0x00])
        if sw1 == 0x90 and sw2 == 0x00:
            return bytes(data)
        return None

    def transceive(self, frame: bytes) -> bytes:
        """Send one FeliCa frame and return the card's response frame."""
        if self._connection is None:
            raise RuntimeError("not connected to a card")
        if not 0 < len(frame) <= 0xFF:
            raise ValueError(f"frame length {len(frame)} does not fit a short APDU")
        data, sw1, sw2 = self._connection.transmit(TRANSPARENT + [len(frame)] + list(frame))
        if (sw1, sw2) != (0x90, 0x00):
            raise TransceiveError(sw1, sw2)
        return bytes(data)
