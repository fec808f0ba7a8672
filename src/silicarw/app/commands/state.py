"""State display and settings."""

from __future__ import annotations

import logging

from silicarw.app.display import format_card_info

lg = logging.getLogger(__name__)


def cmd_display(runner) -> bool:
    """Display the tag information collected so far."""
    lg.info("\n%s", format_card_info(runner.info))
    return True


def _set_verify_delay(runner, value: str) -> None:
    try:
        delay = float(value)
    except ValueError:
        lg.warning("verify_delay must be a number of seconds: %s", value)
        return
    if delay < 0:
        lg.warning("verify_delay must not be negative: %s", value)
        return
    runner.terminal.verify_delay = delay
    lg.info("verify_delay = %s", delay)


_settings: dict[str, callable] = {
    "verify_delay": _set_verify_delay,
}
