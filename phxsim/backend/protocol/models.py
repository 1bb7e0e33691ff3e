"""
protocol/models.py

Data models for the Phoenix V2 JSON wire protocol.

Envelope     the 5-tuple [join_ref, ref, topic, event, payload]
Event        reserved event names
ReplyStatus  status field of a phx_reply payload
DecodeError  raised by the codec for frames that cannot become an Envelope
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

PHOENIX_TOPIC = "phoenix"
"""Topic reserved for channel-agnostic traffic (heartbeats)."""

ANONYMOUS_USER: dict[str, str] = {"user": "anonymous"}


# ---------------------------------------------------------------------------
# Reserved names
# ---------------------------------------------------------------------------

class Event(str, Enum):
    HEARTBEAT = "heartbeat"
    JOIN      = "phx_join"
    LEAVE     = "phx_leave"
    REPLY     = "phx_reply"     # server → client only

    # Server-initiated presence notifications
    USER_JOINED = "user_joined"
    USER_LEFT   = "user_left"


class ReplyStatus(str, Enum):
    OK    = "ok"
    ERROR = "error"


class DecodeError(ValueError):
    """Inbound frame is not valid JSON or not a well-formed 5-element envelope."""


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Envelope:
    """
    One protocol message, in either direction.

    join_ref and ref are opaque correlation values (usually strings, may be
    None). payload is never interpreted by the server, only forwarded.
    """

    join_ref: Any
    ref: Any
    topic: str
    event: str
    payload: Any

    def to_list(self) -> list[Any]:
        return [self.join_ref, self.ref, self.topic, self.event, self.payload]

    @property
    def is_heartbeat(self) -> bool:
        return self.topic == PHOENIX_TOPIC and self.event == Event.HEARTBEAT.value

    def __repr__(self) -> str:
        return (
            f"Envelope(join_ref={self.join_ref!r} ref={self.ref!r} "
            f"topic={self.topic!r} event={self.event!r})"
        )
