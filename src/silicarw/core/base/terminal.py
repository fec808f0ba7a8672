from __future__ import annotations

import logging
from typing import Callable

from silicarw.core.base.agent import Agent
from silicarw.core.base.message import Message, Result

lg = logging.getLogger(__name__)

_HANDLES_ATTR = "_handles_message"


def handles(message_cls: type[Message]) -> Callable:
    """Mark a terminal method as the handler for *message_cls*."""

    def decorator(method: Callable) -> Callable:
        setattr(method, _HANDLES_ATTR, message_cls)
        return method

    return decorator


class UnsupportedMessage(ValueError):
    def __init__(self, message: Message) -> None:
        super().__init__(f"unsupported message: {type(message).__name__}")
        self.message = message


class Terminal:
    """Runs tag operations through an Agent.

    The app layer hands Message objects to send() and gets Result
    objects back. Handlers are methods marked with @handles; a subclass
    inherits its bases' handlers and may override them per message type.
    """

    _handlers: dict[type[Message], str] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        handlers: dict[type[Message], str] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                message_cls = getattr(attr, _HANDLES_ATTR, None)
                if message_cls is not None:
                    handlers[message_cls] = name
        cls._handlers = handlers

    def __init__(self, agent: Agent) -> None:
        self._agent = agent

    @property
    def agent(self) -> Agent:
        return self._agent

    @property
    def connected(self) -> bool:
        return self._agent.connected

    @property
    def idm(self) -> bytes:
        """IDm read when the current tag session was opened."""
        return self._agent.idm

    def connect(self) -> None:
        self._agent.connect()

    def disconnect(self) -> None:
        self._agent.close()

    @property
    def supported_messages(self) -> list[type[Message]]:
        return list(self._handlers)

    def send(self, message: Message) -> Result:
        """Run the handler registered for the message's type."""
        name = self._handlers.get(type(message))
        if name is None:
            raise UnsupportedMessage(message)
        lg.debug("%s", type(message).__name__)
        return getattr(self, name)(message)

    def on_error(self, error: Exception) -> None:
        """Log an error raised outside a single tag operation."""
        lg.error("session error: %s", error)
