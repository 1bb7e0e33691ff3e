"""
backend/router.py

MessageRouter: classifies a decoded Envelope and hands it to one handler.

Guards, first match wins:
    1. topic == "phoenix" and event == "heartbeat"   → heartbeat
    2. event == "phx_join"                           → join
    3. event == "phx_leave"                          → leave
    4. sender not a member of topic                  → error reply, no broadcast
    5. topic starts with the echo prefix             → echo
    6. anything else                                 → generic

Heartbeat, join and leave never consult membership: join is how membership
is acquired and heartbeats belong to no channel.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .config import settings
from .connection import Connection
from .handlers import (
    BaseHandler,
    EchoHandler,
    GenericHandler,
    HeartbeatHandler,
    JoinHandler,
    LeaveHandler,
)
from .protocol.models import Envelope, Event, ReplyStatus

if TYPE_CHECKING:
    from .server import ProtocolServer

logger = logging.getLogger(__name__)

NOT_A_MEMBER_REASON = "not a member of this channel"


class Route(str, Enum):
    HEARTBEAT  = "heartbeat"
    JOIN       = "join"
    LEAVE      = "leave"
    NOT_MEMBER = "not_member"
    ECHO       = "echo"
    GENERIC    = "generic"


def classify(envelope: Envelope, is_member: bool, echo_prefix: str = "echo:") -> Route:
    """Pure routing decision for one envelope."""
    if envelope.is_heartbeat:
        return Route.HEARTBEAT
    if envelope.event == Event.JOIN.value:
        return Route.JOIN
    if envelope.event == Event.LEAVE.value:
        return Route.LEAVE
    if not is_member:
        return Route.NOT_MEMBER
    if envelope.topic.startswith(echo_prefix):
        return Route.ECHO
    return Route.GENERIC


class MessageRouter:
    def __init__(
        self,
        heartbeat: BaseHandler | None = None,
        join: BaseHandler | None = None,
        leave: BaseHandler | None = None,
        echo: BaseHandler | None = None,
        generic: BaseHandler | None = None,
        echo_prefix: str | None = None,
    ) -> None:
        self.echo_prefix = echo_prefix if echo_prefix is not None else settings.ECHO_TOPIC_PREFIX
        self.handlers: dict[Route, BaseHandler] = {
            Route.HEARTBEAT: heartbeat or HeartbeatHandler(),
            Route.JOIN:      join or JoinHandler(),
            Route.LEAVE:     leave or LeaveHandler(),
            Route.ECHO:      echo or EchoHandler(),
            Route.GENERIC:   generic or GenericHandler(),
        }

    async def route(self, server: ProtocolServer, conn: Connection, envelope: Envelope) -> Route:
        """Dispatch one envelope. Returns the route taken."""
        is_member = server.membership.is_member(envelope.topic, conn)
        route = classify(envelope, is_member, self.echo_prefix)

        if route is Route.NOT_MEMBER:
            logger.warning(
                "Event %r on un-joined topic %r from conn=%s",
                envelope.event, envelope.topic, conn.conn_id,
            )
            server.metrics.unauthorized_events.inc()
            await server.reply(conn, envelope, ReplyStatus.ERROR, {"reason": NOT_A_MEMBER_REASON})
            return route

        await self.handlers[route].handle(server, conn, envelope)
        return route
