"""
protocol/__init__.py

Public API for the wire-protocol sub-package.
"""

from .builder import make_broadcast, make_reply
from .codec import decode, encode
from .models import ANONYMOUS_USER, PHOENIX_TOPIC, DecodeError, Envelope, Event, ReplyStatus

__all__ = [
    "Envelope",
    "Event",
    "ReplyStatus",
    "DecodeError",
    "PHOENIX_TOPIC",
    "ANONYMOUS_USER",
    "decode",
    "encode",
    "make_reply",
    "make_broadcast",
]
