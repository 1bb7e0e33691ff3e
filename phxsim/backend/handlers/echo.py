"""
handlers/echo.py

Custom events on echo:* topics. The payload comes back twice: once as the
phx_reply response to the sender, once as a broadcast to every member
(sender included).
"""

from __future__ import annotations

import logging

from ..protocol.models import ReplyStatus
from .base import BaseHandler

logger = logging.getLogger(__name__)


class EchoHandler(BaseHandler):
    name = "echo"

    async def handle(self, server, conn, envelope) -> None:
        logger.debug("ECHO  topic=%r event=%r", envelope.topic, envelope.event)
        await server.reply(conn, envelope, ReplyStatus.OK, envelope.payload)
        await server.broadcast_all(envelope.topic, envelope.event, envelope.payload)
