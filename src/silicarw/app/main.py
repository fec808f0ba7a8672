# filename : main.py


import logging

from silicarw import __version__
from silicarw.app.session import session

lg = logging.getLogger(__name__)


def main(
    file: str | None = None,
    reader: str | None = None,
    history: str | None = None,
    verify_delay: float | None = None,
) -> bool:
    lg.debug("silicarw v%s", __version__)
    kwargs = {}
    if history is not None:
        kwargs["history"] = history
    if verify_delay is not None:
        kwargs["verify_delay"] = verify_delay
    return session(file=file, reader=reader, **kwargs)
