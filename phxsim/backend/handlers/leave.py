"""
handlers/leave.py

phx_leave: drop the connection from the topic, ack, and notify whoever is
left. Leaving a topic that was never joined is still acknowledged.
"""

from __future__ import annotations

import logging

from ..protocol.models import ANONYMOUS_USER, Event, ReplyStatus
from .base import BaseHandler

logger = logging.getLogger(__name__)


class LeaveHandler(BaseHandler):
    name = "leave"

    async def handle(self, server, conn, envelope) -> None:
        topic = envelope.topic
        remaining = server.membership.leave(topic, conn)
        logger.info("LEAVE topic=%r conn=%s members=%d", topic, conn.conn_id, remaining)

        await server.reply(conn, envelope, ReplyStatus.OK, {})
        # Removal happened first, so the leaver is not in the recipient set.
        await server.broadcast(topic, Event.USER_LEFT, dict(ANONYMOUS_USER))
