"""
protocol/builder.py

Constructors for outbound envelopes.

Replies echo join_ref/ref from the request that triggered them.
Broadcasts are server-initiated and always carry join_ref=None, ref=None.
"""

from __future__ import annotations

from typing import Any

from .models import Envelope, Event, ReplyStatus


def make_reply(
    request: Envelope,
    status: ReplyStatus,
    response: Any,
    topic: str | None = None,
) -> Envelope:
    return Envelope(
        join_ref=request.join_ref,
        ref=request.ref,
        topic=request.topic if topic is None else topic,
        event=Event.REPLY.value,
        payload={"status": ReplyStatus(status).value, "response": response},
    )


def make_broadcast(topic: str, event: str | Event, payload: Any) -> Envelope:
    if isinstance(event, Event):
        event = event.value
    return Envelope(join_ref=None, ref=None, topic=topic, event=event, payload=payload)
