"""
handlers/generic.py

Custom events on any other joined topic (test:*, room:*, ...).

Currently behaves exactly like EchoHandler; kept separate so either can be
swapped on the router without touching the other.
"""

from __future__ import annotations

import logging

from ..protocol.models import ReplyStatus
from .base import BaseHandler

logger = logging.getLogger(__name__)


class GenericHandler(BaseHandler):
    name = "generic"

    async def handle(self, server, conn, envelope) -> None:
        logger.debug("MSG   topic=%r event=%r", envelope.topic, envelope.event)
        await server.reply(conn, envelope, ReplyStatus.OK, envelope.payload)
        await server.broadcast_all(envelope.topic, envelope.event, envelope.payload)
