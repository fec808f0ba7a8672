import pytest

from conftest import IDM
from silicarw.core.base import Agent


class FakeCard:
    """Card stand-in: one IDm per reader name, None for an empty slot."""

    def __init__(self, slots):
        self.slots = slots
        self.current = None
        self.sent = []
        self.disconnects = 0

    @property
    def connected(self):
        return self.current is not None

    def list_readers(self):
        return list(self.slots)

    def connect(self, reader):
        if self.slots[reader] is None:
            raise OSError("no card present")
        self.current = reader

    def disconnect(self):
        self.disconnects += 1
        self.current = None

    def get_idm(self):
        return self.slots[self.current]

    def transceive(self, frame):
        self.sent.append(frame)
        return b"\x02\x07"


def test_connect_picks_first_reader_with_a_tag():
    card = FakeCard({"Reader A": None, "Reader B": IDM})
    agent = Agent(card)
    agent.connect()
    assert agent.connected
    assert agent.idm == IDM
    assert card.current == "Reader B"


def test_connect_skips_card_without_eight_byte_idm():
    card = FakeCard({"ISO14443 reader": b"\x01\x02\x03\x04", "FeliCa reader": IDM})
    agent = Agent(card)
    agent.connect()
    assert card.current == "FeliCa reader"


def test_reader_filter():
    card = FakeCard({"ACS ACR122U": IDM, "Sony RC-S380": IDM})
    agent = Agent(card, reader="rc-s380")
    agent.connect()
    assert card.current == "Sony RC-S380"


def test_reader_filter_without_match():
    agent = Agent(FakeCard({"ACS ACR122U": IDM}), reader="pasori")
    with pytest.raises(RuntimeError, match="no reader matching"):
        agent.connect()


def test_no_readers():
    with pytest.raises(RuntimeError, match="no readers found"):
        Agent(FakeCard({})).connect()


def test_no_tag():
    agent = Agent(FakeCard({"Reader A": None}))
    with pytest.raises(RuntimeError, match="no FeliCa card found"):
        agent.connect()
    assert not agent.connected


def test_idm_requires_a_session():
    with pytest.raises(RuntimeError):
        Agent(FakeCard({})).idm


def test_close_and_reconnect():
    card = FakeCard({"Reader A": IDM})
    agent = Agent(card)
    agent.connect()
    agent.close()
    assert not agent.connected
    with pytest.raises(RuntimeError):
        agent.transceive(b"\x02\x00")
    agent.connect()
    assert agent.connected


def test_connect_twice_closes_the_previous_session():
    card = FakeCard({"Reader A": IDM})
    agent = Agent(card)
    agent.connect()
    agent.connect()
    assert card.disconnects == 1
    assert agent.connected


def test_transceive_passes_frames_through():
    card = FakeCard({"Reader A": IDM})
    agent = Agent(card)
    agent.connect()
    assert agent.transceive(b"\x02\x06") == b"\x02\x07"
    assert card.sent == [b"\x02\x06"]
