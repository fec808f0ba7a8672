"""Read history commands."""

from __future__ import annotations

import logging

from silicarw.app.display import format_history

lg = logging.getLogger(__name__)


def cmd_history(runner) -> bool:
    """List saved read results, newest first."""
    lg.info("History (%s):\n%s", runner.history.path, format_history(runner.history.list()))
    return True


def cmd_history_delete(runner, *, id: int) -> bool:
    """Delete one history entry (id=N)."""
    if not runner.history.delete(id):
        lg.error("no history entry %s", id)
        return False
    lg.info("deleted history entry %s", id)
    return True


def cmd_history_clear(runner) -> bool:
    """Delete all history entries."""
    runner.history.clear()
    lg.info("history cleared")
    return True
