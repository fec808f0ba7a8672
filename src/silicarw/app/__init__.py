from silicarw.app.runner import Runner
from silicarw.app.session import session

__all__ = ["Runner", "session"]
