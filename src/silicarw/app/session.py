"""Session orchestrator.

Constructs the full stack (Card -> Agent -> FelicaTerminal -> Runner),
runs a command file or the REPL, and closes any tag session left open.
Tag sessions are opened per command; the REPL starts without one.
"""

from __future__ import annotations

import logging
from pathlib import Path

from silicarw.app.commands import COMMAND_MODULES
from silicarw.app.history import HistoryStore
from silicarw.app.runner import Runner
from silicarw.core.base import Agent
from silicarw.core.felica import FelicaTerminal
from silicarw.core.felica.flow import DEFAULT_VERIFY_DELAY
from silicarw.core.smartcard import Card

lg = logging.getLogger(__name__)

DEFAULT_HISTORY = Path.home() / ".silicarw" / "read_history.json"


def session(
    file: str | None = None,
    reader: str | None = None,
    history: str | Path = DEFAULT_HISTORY,
    verify_delay: float = DEFAULT_VERIFY_DELAY,
) -> bool:
    """Open an operator session. Returns False if a command file stopped on error."""
    card = Card()
    agent = Agent(card, reader=reader)
    terminal = FelicaTerminal(agent, verify_delay=verify_delay)
    runner = Runner(terminal, HistoryStore(history), COMMAND_MODULES)

    ok = True
    try:
        if file:
            ok = runner.run_file(file)
        else:
            runner.run_interactive()
    except Exception as exc:
        terminal.on_error(exc)
        ok = False
    finally:
        terminal.disconnect()
    return ok
