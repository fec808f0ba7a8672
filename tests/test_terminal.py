import pytest

from conftest import HEX, IDM, PMM
from silicarw.app.requests import idm_request
from silicarw.core.base import Message, UnsupportedMessage
from silicarw.core.felica import (
    FelicaTerminal,
    RawFrameMessage,
    ReadBlockMessage,
    ReadIdmPmmMessage,
    ReadLastErrorMessage,
    ReadServiceCodesMessage,
    ReadSystemCodesMessage,
    Stage,
    WriteBlockMessage,
)


@pytest.fixture()
def terminal(channel):
    return FelicaTerminal(channel, verify_delay=0)


def test_supported_messages(terminal):
    assert set(terminal.supported_messages) == {
        ReadIdmPmmMessage,
        ReadLastErrorMessage,
        ReadSystemCodesMessage,
        ReadServiceCodesMessage,
        ReadBlockMessage,
        WriteBlockMessage,
        RawFrameMessage,
    }


def test_unsupported_message(terminal):
    with pytest.raises(UnsupportedMessage):
        terminal.send(Message())


def test_read_idm_pmm(terminal):
    result = terminal.send(ReadIdmPmmMessage())
    assert (result.idm, result.pmm) == (IDM, PMM)


def test_read_block_uses_session_idm(terminal, channel):
    channel.blocks[2] = b"\xAB" * 16
    result = terminal.send(ReadBlockMessage(block=2))
    assert result.data_hex == "AB" * 16
    assert channel.frames[0][2:10] == IDM


def test_read_codes(terminal, channel):
    channel.blocks[0x85] = HEX("FE00") + bytes(14)
    assert terminal.send(ReadSystemCodesMessage()).codes == ("FE00",)
    assert terminal.send(ReadServiceCodesMessage()).codes == ()


def test_last_error(terminal):
    assert terminal.send(ReadLastErrorMessage()).diagnostic == "none"


def test_identity_write_is_verified(terminal, channel):
    outcome = terminal.send(WriteBlockMessage(request=idm_request("DEADBEEF01010101")))
    assert outcome.stage is Stage.VERIFIED
    assert terminal.idm == HEX("DEADBEEF01010101")


def test_verify_delay_is_passed_to_the_flow(channel, mocker):
    run_write = mocker.patch("silicarw.core.felica.terminal.run_write")
    terminal = FelicaTerminal(channel, verify_delay=0.5)
    request = idm_request("DEADBEEF01010101")
    terminal.send(WriteBlockMessage(request=request))
    run_write.assert_called_once_with(request, channel, delay=0.5)


def test_raw_frame(terminal, channel):
    frame = HEX("10 06") + IDM + HEX("01 FF FF 01 80 83")
    result = terminal.send(RawFrameMessage(frame=frame))
    assert result.success
    assert result.response[1] == 0x07
    assert result.response[13:29] == IDM + PMM


def test_raw_frame_failure(terminal, channel):
    channel.transceive_error = OSError("no response")
    result = terminal.send(RawFrameMessage(frame=HEX("02 00")))
    assert not result.success
    assert result.error_message == "no response"
