from silicarw.core.smartcard.card import Card, TransceiveError
from silicarw.core.smartcard.logging import PROTOCOL, TRACE

__all__ = ["Card", "PROTOCOL", "TRACE", "TransceiveError"]
