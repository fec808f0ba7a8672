import logging

import pytest

from silicarw.core.felica.commands import READ_WITHOUT_ENCRYPTION, WRITE_WITHOUT_ENCRYPTION

logging.basicConfig(level=logging.DEBUG)


def HEX(s):
    return bytes.fromhex(s)


IDM = HEX("01 02 03 04 05 06 07 08")
PMM = HEX("00 01 FF FF FF FF FF FF")


def read_response(idm, data=b"", flags=(0x00, 0x00), count=None):
    """Read Without Encryption response as the card lays it out."""
    if count is None:
        count = len(data) // 16
    body = bytes([0x07]) + bytes(idm) + bytes(flags) + bytes([count]) + bytes(data)
    return bytes([len(body) + 1]) + body


def write_response(idm, flags=(0x00, 0x00)):
    """Write Without Encryption response with the status flags at offsets 9 and 10."""
    body = bytes([0x09]) + bytes(idm[:7]) + bytes(flags)
    return bytes([len(body) + 1]) + body


class FakeChannel:
    """In-memory FeliCa tag behind a Channel.

    Serves reads from ``blocks``, stores writes, and applies a write to
    block 83 as the IDm reported on the next connect.
    """

    def __init__(self, idm=IDM, pmm=PMM, connected=True):
        self.blocks = {0x83: bytes(idm) + bytes(pmm)}
        self.status = {}
        self.frames = []
        self.transceive_error = None
        self.connect_error = None
        self.apply_idm_write = True
        self.connects = 0
        self.closes = 0
        self._idm = bytes(idm)
        self._next_idm = bytes(idm)
        self._connected = connected

    @property
    def connected(self):
        return self._connected

    @property
    def idm(self):
        if not self._connected:
            raise RuntimeError("not connected to a card")
        return self._idm

    def connect(self):
        self.connects += 1
        if self.connect_error is not None:
            raise self.connect_error
        self._idm = self._next_idm
        self._connected = True

    def close(self):
        self.closes += 1
        self._connected = False

    def transceive(self, frame):
        if not self._connected:
            raise RuntimeError("not connected to a card")
        self.frames.append(bytes(frame))
        if self.transceive_error is not None:
            raise self.transceive_error
        code, idm = frame[1], frame[2:10]
        if code == READ_WITHOUT_ENCRYPTION:
            count = frame[13]
            numbers = frame[14 : 14 + 2 * count][1::2]
            flags = next((self.status[n] for n in numbers if n in self.status), (0x00, 0x00))
            if flags != (0x00, 0x00):
                return read_response(idm, flags=flags, count=0)
            data = b"".join(self.blocks.get(n, bytes(16)) for n in numbers)
            return read_response(idm, data)
        if code == WRITE_WITHOUT_ENCRYPTION:
            block, data = frame[15], frame[16:32]
            flags = self.status.get(block, (0x00, 0x00))
            if flags == (0x00, 0x00):
                self.blocks[block] = bytes(data)
                if block == 0x83 and self.apply_idm_write:
                    self._next_idm = bytes(data[:8])
            return write_response(idm, flags)
        return bytes([2, code + 1])


@pytest.fixture()
def channel():
    return FakeChannel()
