from __future__ import annotations

import logging

from smartcard.CardConnectionObserver import CardConnectionObserver

from silicarw.core.smartcard.logging import GREEN, PROTOCOL, RED, RESET, TRACE, log_hex

lg = logging.getLogger(__name__)


class LoggingCardObserver(CardConnectionObserver):
    """CardConnectionObserver that logs PC/SC pseudo-APDU traffic."""

    def update(self, observable, event):
        if event.type in ("connect", "reconnect", "disconnect"):
            lg.log(PROTOCOL, "reader %s", event.type)

        elif event.type == "command":
            log_hex(lg, "=> ", bytes(event.args[0]))

        elif event.type == "response":
            data, sw1, sw2 = event.args[0], event.args[1], event.args[2]
            color = GREEN if (sw1, sw2) == (0x90, 0x00) else RED
            if data:
                log_hex(lg, "<= ", bytes(data))
            lg.log(TRACE, "<= %s%02X %02X%s", color, sw1, sw2, RESET)
