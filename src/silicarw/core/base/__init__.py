from silicarw.core.base.agent import Agent, Channel
from silicarw.core.base.message import Message, Result
from silicarw.core.base.terminal import Terminal, UnsupportedMessage

__all__ = ["Agent", "Channel", "Message", "Result", "Terminal", "UnsupportedMessage"]
