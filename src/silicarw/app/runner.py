"""Runner: holds REPL state, dispatches operator commands.

A command line is ``name key=value ...``; a bare ``key`` means
``key=true``. Commands come from ``cmd_*`` functions in the command
modules. A module may list in ``_raw_commands`` the commands whose
arguments stay strings, and in ``_settings`` extra handlers for ``set``.
"""

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from types import ModuleType

try:
    import readline
except ImportError:
    readline = None  # type: ignore[assignment]

from silicarw.app.cardinfo import CardInfo
from silicarw.app.history import HistoryStore
from silicarw.core.felica.terminal import FelicaTerminal

lg = logging.getLogger(__name__)

PROMPT = "silicarw> "
BREAK_PROMPT = "silicarw (break)> "
EXIT_COMMANDS = frozenset({"quit", "exit"})


class BreakRequested(Exception):
    """Raised when a 'break' command is encountered in a script."""


def _parse_value(s: str) -> int | str | bool:
    """Convert one argument value.

    true/yes and false/no become bools, ``0x``-prefixed hex and plain
    decimal become ints, anything else stays a string. Hex data never
    goes through here: the commands taking it are raw commands.
    """
    low = s.lower()
    if low in ("true", "yes"):
        return True
    if low in ("false", "no"):
        return False
    base = 16 if low.startswith("0x") else 10
    try:
        return int(s, base)
    except ValueError:
        return s


def parse_command(line: str) -> tuple[str, dict[str, str]] | None:
    """Split a line into ``(name, raw_kwargs)``; None for blank or comment lines."""
    code = line.split("#", 1)[0].strip()
    if not code:
        return None
    name, *args = shlex.split(code)
    kwargs = dict(arg.split("=", 1) if "=" in arg else (arg, "true") for arg in args)
    return name, kwargs


@dataclass(frozen=True)
class Command:
    name: str
    func: Callable[..., bool]
    description: str
    params: tuple[str, ...] = ()
    raw: bool = False


def _first_line(doc: str | None) -> str:
    return (doc or "").strip().split("\n")[0]


class Runner:
    """Holds session state and dispatches commands.

    Each command function receives the runner as its first argument and
    returns True on success.
    """

    def __init__(
        self,
        terminal: FelicaTerminal,
        history: HistoryStore,
        command_modules: list[ModuleType],
    ) -> None:
        self._terminal = terminal
        self._history = history
        self._info = CardInfo()
        self._stop_on_error = True
        self._matches: list[str] = []

        self._settings: dict[str, Callable[[Runner, str], None]] = {
            "log": Runner._set_log,
            "stop_on_error": Runner._set_stop_on_error,
        }
        raw_names: set[str] = {"set"}
        for mod in command_modules:
            raw_names |= getattr(mod, "_raw_commands", set())
            self._settings.update(getattr(mod, "_settings", {}))

        self._commands: dict[str, Command] = {}
        for mod in command_modules:
            for attr, func in vars(mod).items():
                if attr.startswith("cmd_") and callable(func):
                    name = attr[4:]
                    params = tuple(p for p in inspect.signature(func).parameters if p != "runner")
                    self._commands[name] = Command(
                        name, partial(func, self), _first_line(func.__doc__), params, name in raw_names
                    )
        for name, method in (("help", self.cmd_help), ("set", self.cmd_set)):
            self._commands[name] = Command(name, method, _first_line(method.__doc__), raw=name in raw_names)

    @property
    def terminal(self) -> FelicaTerminal:
        return self._terminal

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def info(self) -> CardInfo:
        return self._info

    @property
    def commands(self) -> list[str]:
        return sorted(self._commands)

    @contextmanager
    def tag_session(self) -> Iterator[FelicaTerminal]:
        """Make sure a tag session is open for one operation.

        A session opened here is closed again on exit. One the operator
        opened with ``connect`` stays open.
        """
        if self._terminal.connected:
            yield self._terminal
            return
        self._terminal.connect()
        try:
            yield self._terminal
        finally:
            if self._terminal.connected:
                self._terminal.disconnect()

    # --- Settings ---

    def _set_log(self, value: str) -> None:
        level = logging.getLevelName(value.upper())
        if not isinstance(level, int):
            lg.warning("unknown log level: %s", value)
            return
        logging.getLogger().setLevel(level)
        lg.info("log = %s", value.upper())

    def _set_stop_on_error(self, value: str) -> None:
        self._stop_on_error = value.lower() in ("true", "yes", "1")
        lg.info("stop_on_error = %s", self._stop_on_error)

    # --- Built-in commands ---

    def cmd_help(self) -> bool:
        """List available commands."""
        width = max(map(len, self._commands))
        lines = [f"  {c.name:<{width}}  {c.description}" for _, c in sorted(self._commands.items())]
        lg.info("Commands:\n%s", "\n".join(lines))
        return True

    def cmd_set(self, **kwargs: str) -> bool:
        """Change a setting (log, stop_on_error, verify_delay)."""
        unknown = [k for k in kwargs if k not in self._settings]
        for k in unknown:
            lg.warning("unknown setting: %s", k)
        for k, v in kwargs.items():
            if k in self._settings:
                self._settings[k](self, v)
        return not unknown

    # --- Execution ---

    def _arguments(self, command: Command, raw_kwargs: dict[str, str]) -> dict[str, object]:
        if command.raw:
            return dict(raw_kwargs)
        return {k: _parse_value(v) for k, v in raw_kwargs.items()}

    def execute(self, line: str) -> bool:
        """Run one command line and report whether it succeeded.

        Raises StopIteration for quit/exit and BreakRequested for break.
        Any other failure is logged and reported as False.
        """
        parsed = parse_command(line)
        if parsed is None:
            return True
        name, raw_kwargs = parsed
        if name in EXIT_COMMANDS:
            raise StopIteration
        if name == "break":
            raise BreakRequested
        command = self._commands.get(name)
        if command is None:
            lg.error("unknown command: %s", name)
            return False
        try:
            return bool(command.func(**self._arguments(command, raw_kwargs)))
        except TypeError as exc:
            lg.error("bad arguments for '%s': %s", name, exc)
        except Exception as exc:
            lg.error("command '%s' failed: %s", name, exc)
        return False

    # --- Interactive ---

    def completions(self, buffer: str, text: str) -> list[str]:
        """Candidates for *text* given the whole input *buffer*."""
        words = buffer.split()
        if not words or (len(words) == 1 and not buffer.endswith(" ")):
            return [n for n in sorted(self._commands.keys() | EXIT_COMMANDS) if n.startswith(text)]
        name = words[0]
        if name == "set":
            keys = list(self._settings)
        else:
            command = self._commands.get(name)
            keys = list(command.params) if command else []
        given = {w.split("=", 1)[0] for w in words[1:]}
        return [f"{k}=" for k in keys if k not in given and f"{k}=".startswith(text)]

    def _complete(self, text: str, state: int) -> str | None:
        if state == 0:
            self._matches = self.completions(readline.get_line_buffer().lstrip(), text)
        return self._matches[state] if state < len(self._matches) else None

    def _lines(self, prompt: str) -> Iterator[str]:
        if readline is not None:
            readline.set_completer(self._complete)
            readline.set_completer_delims(" ")
            readline.parse_and_bind("tab: complete")
        while True:
            try:
                yield input(prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return

    def _repl(self, prompt: str = PROMPT, exit_commands: frozenset[str] = EXIT_COMMANDS) -> str | None:
        """Read and run lines until an exit command; None on EOF or Ctrl-C."""
        for line in self._lines(prompt):
            parsed = parse_command(line)
            name = parsed[0] if parsed else None
            if name in exit_commands:
                return name
            if name == "break":
                lg.warning("already in a break")
                continue
            try:
                self.execute(line)
            except StopIteration:
                return "quit"
        return None

    def run_file(self, path: str) -> bool:
        """Run a command script. False if a command failed with stop_on_error set."""
        with open(path, encoding="utf-8") as f:
            script = f.read().splitlines()
        for number, line in enumerate(script, 1):
            try:
                ok = self.execute(line)
            except StopIteration:
                return True
            except BreakRequested:
                lg.info("break at line %d, type 'continue' to resume", number)
                if self._repl(BREAK_PROMPT, frozenset({"continue"}) | EXIT_COMMANDS) != "continue":
                    return False
                continue
            if not ok and self._stop_on_error:
                lg.error("stopped at line %d: %s", number, line.strip())
                return False
        return True

    def run_interactive(self) -> None:
        lg.info("interactive mode, type 'help' for commands, 'quit' to exit")
        self._repl()
