import pytest

from conftest import HEX, IDM
from silicarw.core.felica.commands import (
    block_list,
    block_list_element,
    build_read_command,
    build_write_command,
)
from silicarw.core.felica.errors import (
    InvalidBlockList,
    InvalidBlockNumber,
    InvalidIdentifier,
    InvalidPayloadLength,
)


def test_write_command_for_idm_block():
    idm = HEX("DEADBEEF01010101")
    pmm = HEX("00 01 FF FF FF FF FF FF")
    frame = build_write_command(idm, 0x83, idm + pmm)

    assert frame[0] == 0x20
    assert frame[1] == 0x08
    assert frame[2:10] == idm
    assert frame[10:16] == HEX("01 FF FF 01 80 83")
    assert frame[16:] == HEX("DE AD BE EF 01 01 01 01 00 01 FF FF FF FF FF FF")
    assert len(frame) == 32


def test_read_command_layout():
    frame = build_read_command(IDM, block_list(0x83))
    assert frame == HEX("10 06 0102030405060708 01 FF FF 01 80 83")


def test_read_command_two_blocks():
    frame = build_read_command(IDM, HEX("80E0 80E1"))
    assert frame[13] == 2
    assert frame[14:] == HEX("80 E0 80 E1")


@pytest.mark.parametrize("frame", [
    build_read_command(IDM, block_list(0)),
    build_read_command(IDM, block_list(1, 2, 3)),
    build_write_command(IDM, 0, bytes(16)),
    build_write_command(IDM, 0xFF, bytes(range(16))),
])
def test_length_byte_counts_the_whole_frame(frame):
    assert frame[0] == len(frame)
    assert frame[0] == 2 + 8 + len(frame[10:])


@pytest.mark.parametrize("blocks", [b"", HEX("80"), HEX("80 83 80")])
def test_read_command_rejects_bad_block_list(blocks):
    with pytest.raises(InvalidBlockList):
        build_read_command(IDM, blocks)


@pytest.mark.parametrize("block", [-1, 256, 0x80E0])
def test_write_command_rejects_block_out_of_range(block):
    with pytest.raises(InvalidBlockNumber):
        build_write_command(IDM, block, bytes(16))


@pytest.mark.parametrize("length", [0, 15, 17])
def test_write_command_rejects_payload_length(length):
    with pytest.raises(InvalidPayloadLength):
        build_write_command(IDM, 0, bytes(length))


def test_idm_must_be_eight_bytes():
    with pytest.raises(InvalidIdentifier):
        build_read_command(IDM[:7], block_list(0))


def test_block_list_element():
    assert block_list_element(0x85) == HEX("80 85")
    with pytest.raises(InvalidBlockNumber):
        block_list_element(0x100)


def test_identifier_length_matches_the_agent():
    from silicarw.core.base import agent
    from silicarw.core.felica import commands

    assert commands.IDM_LENGTH == agent.IDM_LENGTH == 8
    assert build_read_command(bytes(agent.IDM_LENGTH), block_list(0))[0] == 16
