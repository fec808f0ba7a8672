import pytest

from conftest import HEX, IDM, PMM, FakeChannel
from silicarw.core.felica import operations
from silicarw.core.felica.operations import (
    BlockOperationResult,
    decode_code_list,
    decode_last_error,
    read_block_hex,
    read_blocks,
    read_idm_pmm,
    read_last_error_command,
    read_service_codes,
    read_single_block,
    read_system_codes,
    write_block,
)


def test_result_never_carries_an_error_on_success():
    with pytest.raises(ValueError):
        BlockOperationResult(success=True, error_message="boom")


def test_read_single_block(channel):
    channel.blocks[3] = bytes(range(16))
    result = read_single_block(channel, IDM, 3)
    assert result.success
    assert result.error_message is None
    assert result.data == bytes(range(16))
    assert len(channel.frames) == 1


def test_read_blocks_multiple(channel):
    channel.blocks[1] = b"\x11" * 16
    channel.blocks[2] = b"\x22" * 16
    result = read_blocks(channel, IDM, HEX("8001 8002"))
    assert result.data == b"\x11" * 16 + b"\x22" * 16


def test_invalid_block_list_sends_nothing(channel):
    result = read_blocks(channel, IDM, HEX("80"))
    assert not result.success
    assert "invalid block list" in result.error_message
    assert channel.frames == []


def test_read_status_error_is_reported(channel):
    channel.status[0x05] = (0xA4, 0x01)
    result = read_single_block(channel, IDM, 0x05)
    assert not result.success
    assert result.error_message == "status flags: A4 01"


def test_channel_failure_becomes_communication_error(channel):
    channel.transceive_error = TimeoutError("tag lost")
    result = read_single_block(channel, IDM, 0)
    assert not result.success
    assert result.error_message == "communication error: tag lost"


def test_channel_failure_without_message(channel):
    channel.transceive_error = OSError()
    result = write_block(channel, IDM, 0, bytes(16))
    assert result.error_message == "communication error: OSError"


def test_garbage_response_is_reported(mocker, channel):
    mocker.patch.object(channel, "transceive", return_value=b"\x03\x07\x00")
    result = read_single_block(channel, IDM, 0)
    assert not result.success
    assert result.error_message.startswith("communication error: malformed response")


def test_read_idm_pmm(channel):
    result = read_idm_pmm(channel, IDM)
    assert result.success
    assert result.idm == IDM
    assert result.pmm == PMM
    assert channel.frames[0][14:16] == HEX("80 83")


def test_read_idm_pmm_short_block(mocker, channel):
    mocker.patch.object(operations, "read_single_block",
                        return_value=operations.ReadResult(success=True, data=IDM))
    result = read_idm_pmm(channel, IDM)
    assert not result.success


def test_service_codes_are_byte_swapped(channel):
    channel.blocks[0x84] = HEX("0B10 0B20 0000 0B30") + bytes(8)
    result = read_service_codes(channel, IDM)
    assert result.success
    assert result.codes == ("100B", "200B")


def test_system_codes_are_read_as_stored(channel):
    channel.blocks[0x85] = HEX("12FC 8000") + bytes(12)
    result = read_system_codes(channel, IDM)
    assert result.codes == ("12FC", "8000")
    assert channel.frames[0][15] == 0x85


def test_code_list_without_sentinel_runs_to_end():
    data = HEX("0001 0002 0003 0004 0005 0006 0007 0008")
    assert len(decode_code_list(data, swap=False)) == 8


def test_code_list_empty_block():
    assert decode_code_list(bytes(16), swap=True) == ()


def test_code_list_read_failure(channel):
    channel.status[0x85] = (0x01, 0xA8)
    result = read_system_codes(channel, IDM)
    assert not result.success
    assert result.codes == ()


@pytest.mark.parametrize("data, expected", [
    (bytes([0x03, 0xAA, 0xBB, 0xCC, 0x00]), "AA BB CC"),
    (bytes([0x00]), "none"),
    (b"", "none"),
    (bytes([0x00, 0xAA, 0xBB]), "none"),
    (bytes([0x05, 0xAA, 0xBB]), "AA BB"),
])
def test_decode_last_error(data, expected):
    assert decode_last_error(data) == expected


def test_read_last_error_command_reads_two_blocks(channel):
    channel.blocks[0xE0] = bytes([0x02, 0x06, 0x01]) + bytes(13)
    result = read_last_error_command(channel, IDM)
    assert result.success
    assert result.diagnostic == "06 01"
    frame = channel.frames[0]
    assert frame[13] == 2
    assert frame[14:18] == HEX("80 E0 80 E1")


def test_read_block_hex(channel):
    channel.blocks[7] = HEX("00112233445566778899AABBCCDDEEFF")
    result = read_block_hex(channel, IDM, 7)
    assert result.success
    assert result.block == 7
    assert result.data_hex == "00112233445566778899AABBCCDDEEFF"


@pytest.mark.parametrize("block", [-1, 256, "abc", 1.5, None])
def test_read_block_hex_invalid_number(channel, block):
    result = read_block_hex(channel, IDM, block)
    assert not result.success
    assert result.error_message == f"invalid block number: {block}"
    assert channel.frames == []


def test_write_block(channel):
    data = bytes(range(16))
    result = write_block(channel, IDM, 5, data)
    assert result == BlockOperationResult(success=True)
    assert channel.blocks[5] == data
    assert channel.frames[0][1] == 0x08


def test_write_block_status_error(channel):
    channel.status[5] = (0x01, 0xA5)
    result = write_block(channel, IDM, 5, bytes(16))
    assert not result.success
    assert result.error_message == "status flags: 01 A5"


@pytest.mark.parametrize("block, data, message", [
    (300, bytes(16), "invalid block number: 300"),
    (1, bytes(15), "data must be exactly 16 bytes, got 15"),
])
def test_write_block_validation_sends_nothing(block, data, message):
    channel = FakeChannel()
    result = write_block(channel, IDM, block, data)
    assert not result.success
    assert result.error_message == message
    assert channel.frames == []
