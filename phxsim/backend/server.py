"""
backend/server.py

ProtocolServer: connection lifecycle manager and owner of all protocol state.

One instance per process (or per test). It owns:
    membership   ChannelRegistry + MemberIndex, always mutated together
    metrics      per-instance counters
    router       MessageRouter with replaceable handlers

Concurrency: everything runs on one asyncio loop. An asyncio.Lock serialises
handle_message() and disconnect(): each inbound message finishes its registry
mutation and builds all of its outbound frames before the next message or
cleanup starts. The frames are sent after the lock is released, in the order
the handler produced them.

Entry points, called by the transport layer (api/main.py):
    connect(conn)               once, after the socket is accepted
    handle_message(conn, raw)   per inbound frame
    connection_error(conn, exc) on transport errors (log only)
    disconnect(conn)            on close; safe to call more than once
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from .channels import Membership
from .connection import Connection, ConnectionState
from .metrics import Counter, ServerMetrics
from .protocol import (
    ANONYMOUS_USER,
    DecodeError,
    Envelope,
    Event,
    ReplyStatus,
    decode,
    encode,
    make_broadcast,
    make_reply,
)
from .router import MessageRouter, Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServerSnapshot:
    """Read-only view of the aggregate counters for health checks."""

    open_connections: int
    active_topics: int

    def as_dict(self) -> dict[str, int]:
        return {
            "openConnections": self.open_connections,
            "activeTopics": self.active_topics,
        }


@dataclass(slots=True)
class Outbound:
    """One queued frame and the counter to bump once it is delivered."""

    conn: Connection
    envelope: Envelope
    counter: Counter


class ProtocolServer:
    def __init__(self, router: MessageRouter | None = None) -> None:
        self.membership = Membership()
        self.metrics = ServerMetrics()
        self.router = router or MessageRouter()
        self._lock = asyncio.Lock()
        # Outbound frames collected while the lock is held; None outside it.
        self._outbox: list[Outbound] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, conn: Connection) -> None:
        if conn.state is not ConnectionState.CONNECTING:
            logger.warning("connect() called twice for conn=%s, ignoring", conn.conn_id)
            return
        conn.state = ConnectionState.OPEN
        self.metrics.connections_total.inc()
        self.metrics.connections_open.inc()
        logger.info(
            "CONN  conn=%s connections=%d", conn.conn_id, self.metrics.connections_open.value
        )

    async def handle_message(self, conn: Connection, raw: str | bytes) -> Route | None:
        """Decode and route one frame. Returns the route taken, or None if dropped."""
        self.metrics.messages_received.inc()
        try:
            envelope = decode(raw)
        except DecodeError as exc:
            self.metrics.messages_malformed.inc()
            logger.warning("Dropping malformed frame from conn=%s: %s", conn.conn_id, exc)
            return None

        async with self._lock:
            if conn.state is ConnectionState.CLOSED:
                logger.debug("Frame from closed conn=%s ignored", conn.conn_id)
                return None
            self._outbox = []
            try:
                route = await self.router.route(self, conn, envelope)
            finally:
                outbound, self._outbox = self._outbox, None

        await self._flush(outbound)
        return route

    def connection_error(self, conn: Connection, exc: BaseException) -> None:
        # Cleanup is left to disconnect(), which the transport always calls next.
        logger.error("ERR   conn=%s %s: %s", conn.conn_id, type(exc).__name__, exc)

    async def disconnect(self, conn: Connection) -> list[str]:
        """
        Remove conn from every topic it joined and notify the remaining members.

        Runs at most once per connection; later calls return [].
        Returns the topics the connection was removed from.
        """
        async with self._lock:
            if conn.state is ConnectionState.CLOSED:
                return []
            was_open = conn.state is ConnectionState.OPEN
            conn.state = ConnectionState.CLOSED
            if was_open:
                self.metrics.connections_open.dec()

            self._outbox = []
            try:
                topics = self.membership.drop_connection(conn)
                for topic in topics:
                    await self.broadcast(topic, Event.USER_LEFT, dict(ANONYMOUS_USER))
            finally:
                outbound, self._outbox = self._outbox, None

        await self._flush(outbound)
        logger.info(
            "DISC  conn=%s connections=%d left_topics=%s",
            conn.conn_id, self.metrics.connections_open.value, topics,
        )
        return topics

    # ------------------------------------------------------------------
    # Send primitives
    #
    # Inside handle_message()/disconnect() these only queue frames; the
    # queue is flushed in order once the lock is released, so a peer that
    # stops reading stalls its own sender's loop and nobody else's.
    # ------------------------------------------------------------------

    async def send(self, conn: Connection, envelope: Envelope) -> bool:
        """Send one envelope now. Never raises; returns False if nothing was sent."""
        if not conn.is_open:
            return False
        try:
            await conn.send(encode(envelope))
        except Exception as exc:
            self.metrics.send_failures.inc()
            logger.debug("Send to conn=%s failed: %s", conn.conn_id, exc)
            return False
        return True

    async def _emit(self, conn: Connection, envelope: Envelope, counter: Counter) -> bool:
        if not conn.is_open:
            return False
        if self._outbox is not None:
            self._outbox.append(Outbound(conn, envelope, counter))
            return True
        return await self._deliver(Outbound(conn, envelope, counter))

    async def _deliver(self, item: Outbound) -> bool:
        if await self.send(item.conn, item.envelope):
            item.counter.inc()
            return True
        return False

    async def _flush(self, outbound: list[Outbound]) -> None:
        for item in outbound:
            await self._deliver(item)

    async def reply(
        self,
        conn: Connection,
        request: Envelope,
        status: ReplyStatus,
        response: Any,
        topic: str | None = None,
    ) -> None:
        envelope = make_reply(request, status, response, topic=topic)
        await self._emit(conn, envelope, self.metrics.replies_sent)

    async def broadcast(
        self,
        topic: str,
        event: str | Event,
        payload: Any,
        exclude: Connection | None = None,
    ) -> int:
        """
        Send a server-initiated event to every member of topic except `exclude`.

        Returns the number of recipients (queued or sent).
        """
        envelope = make_broadcast(topic, event, payload)
        sent = 0
        for member in self.membership.members(topic):
            if member is exclude:
                continue
            if await self._emit(member, envelope, self.metrics.broadcasts_sent):
                sent += 1
        return sent

    async def broadcast_all(self, topic: str, event: str | Event, payload: Any) -> int:
        return await self.broadcast(topic, event, payload)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def snapshot(self) -> ServerSnapshot:
        return ServerSnapshot(
            open_connections=self.metrics.connections_open.value,
            active_topics=self.membership.topic_count,
        )
