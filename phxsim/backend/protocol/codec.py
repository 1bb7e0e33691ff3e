"""
protocol/codec.py

Encode/decode Phoenix V2 JSON frames.

    decode(raw) -> Envelope    raises DecodeError on anything malformed
    encode(env) -> str         total for any Envelope with JSON-able payload

Callers must treat DecodeError as "drop the frame": untrusted peers must not
be able to crash the server or desynchronise its state.
"""

from __future__ import annotations

import json
import logging

from .models import DecodeError, Envelope

logger = logging.getLogger(__name__)

ENVELOPE_ARITY = 5


def decode(raw: str | bytes | bytearray) -> Envelope:
    """Parse one inbound frame into an Envelope."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"frame is not valid UTF-8: {exc}") from exc

    try:
        msg = json.loads(raw)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise DecodeError(f"malformed JSON: {exc}") from exc

    if not isinstance(msg, list) or len(msg) != ENVELOPE_ARITY:
        raise DecodeError(
            f"expected a {ENVELOPE_ARITY}-element array, got {type(msg).__name__}"
            + (f" of length {len(msg)}" if isinstance(msg, list) else "")
        )

    join_ref, ref, topic, event, payload = msg
    if not isinstance(topic, str) or not isinstance(event, str):
        raise DecodeError("topic and event must be strings")

    return Envelope(join_ref=join_ref, ref=ref, topic=topic, event=event, payload=payload)


def encode(envelope: Envelope) -> str:
    """Serialise an Envelope to compact JSON text."""
    return json.dumps(envelope.to_list(), separators=(",", ":"), ensure_ascii=False)
