"""
handlers/heartbeat.py

Keep-alive on the "phoenix" topic. Client-initiated; the server never
enforces liveness. No membership required and no state touched.
"""

from __future__ import annotations

from ..protocol.models import PHOENIX_TOPIC, ReplyStatus
from .base import BaseHandler


class HeartbeatHandler(BaseHandler):
    name = "heartbeat"

    async def handle(self, server, conn, envelope) -> None:
        await server.reply(conn, envelope, ReplyStatus.OK, {}, topic=PHOENIX_TOPIC)
