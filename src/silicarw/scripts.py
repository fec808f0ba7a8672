# filename : scripts.py


import logging

import click

from silicarw.core.smartcard.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw frames).")
@click.option(
    "-r",
    "--reader",
    default=None,
    envvar="SILICARW_READER",
    help="Use the first reader whose name contains this text.",
)
@click.option(
    "--history",
    "history",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="SILICARW_HISTORY",
    help="Read history file (default ~/.silicarw/read_history.json).",
)
@click.option(
    "--verify-delay",
    type=click.FloatRange(min=0),
    default=None,
    envvar="SILICARW_VERIFY_DELAY",
    help="Seconds to wait before reconnecting to verify an IDm write (default 0.1).",
)
@click.option(
    "-f",
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Run commands from a script file.",
)
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Interactive REPL (default when no file is given).",
)
def silicarw(verbose, reader, history, verify_delay, file, interactive):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    if file and interactive:
        raise click.UsageError("use either --file or --interactive, not both")

    from silicarw.app.main import main
    ok = main(file=file, reader=reader, history=history, verify_delay=verify_delay)
    if not ok:
        raise SystemExit(1)
