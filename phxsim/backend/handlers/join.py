"""
handlers/join.py

phx_join: register the connection on the topic, ack it, then tell every
other member that someone arrived.

A second join of an already-joined topic is not suppressed: the set add is
a no-op, but the ack and the user_joined broadcast are sent again.
"""

from __future__ import annotations

import logging

from ..protocol.models import ANONYMOUS_USER, Event, ReplyStatus
from .base import BaseHandler

logger = logging.getLogger(__name__)


class JoinHandler(BaseHandler):
    name = "join"

    async def handle(self, server, conn, envelope) -> None:
        topic = envelope.topic
        count = server.membership.join(topic, conn)
        logger.info("JOIN  topic=%r conn=%s members=%d", topic, conn.conn_id, count)

        await server.reply(conn, envelope, ReplyStatus.OK, {})
        await server.broadcast(topic, Event.USER_JOINED, dict(ANONYMOUS_USER), exclude=conn)
