from silicarw.app.commands import history, read, session, state, write

COMMAND_MODULES = [session, read, write, history, state]

__all__ = ["COMMAND_MODULES"]
