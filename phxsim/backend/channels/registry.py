"""
channels/registry.py

Topic membership, kept as two mirror-image maps:

    ChannelRegistry   topic      → {Connection, ...}
    MemberIndex       Connection → {topic, ...}

The member index makes disconnect cleanup O(joined topics) instead of a scan
over every topic. Neither map ever holds an empty entry.

Membership is the only writer. Every mutation goes through join / leave /
drop_connection, which update both maps in the same call, so for every
(topic, conn) pair in one map the inverse pair is in the other.

Thread safety: none of its own. ProtocolServer serialises all callers.
"""

from __future__ import annotations

import logging
from typing import Iterator

from ..connection import Connection

logger = logging.getLogger(__name__)


class ChannelRegistry:
    """topic → set of member connections."""

    def __init__(self) -> None:
        self._channels: dict[str, set[Connection]] = {}

    def add(self, topic: str, conn: Connection) -> int:
        members = self._channels.setdefault(topic, set())
        members.add(conn)
        return len(members)

    def discard(self, topic: str, conn: Connection) -> int:
        """Remove conn from topic; delete the topic when it empties. Returns remaining size."""
        members = self._channels.get(topic)
        if members is None:
            return 0
        members.discard(conn)
        if not members:
            del self._channels[topic]
            return 0
        return len(members)

    def members(self, topic: str) -> frozenset[Connection]:
        """Snapshot of the current members (empty for unknown topics)."""
        return frozenset(self._channels.get(topic, ()))

    def has_topic(self, topic: str) -> bool:
        return topic in self._channels

    def is_member(self, topic: str, conn: Connection) -> bool:
        members = self._channels.get(topic)
        return members is not None and conn in members

    def items(self) -> Iterator[tuple[str, frozenset[Connection]]]:
        for topic, members in self._channels.items():
            yield topic, frozenset(members)

    def __len__(self) -> int:
        return len(self._channels)


class MemberIndex:
    """Connection → set of joined topics."""

    def __init__(self) -> None:
        self._topics: dict[Connection, set[str]] = {}

    def add(self, conn: Connection, topic: str) -> None:
        self._topics.setdefault(conn, set()).add(topic)

    def discard(self, conn: Connection, topic: str) -> None:
        topics = self._topics.get(conn)
        if topics is None:
            return
        topics.discard(topic)
        if not topics:
            del self._topics[conn]

    def topics_of(self, conn: Connection) -> frozenset[str]:
        return frozenset(self._topics.get(conn, ()))

    def pop(self, conn: Connection) -> set[str]:
        return self._topics.pop(conn, set())

    def items(self) -> Iterator[tuple[Connection, frozenset[str]]]:
        for conn, topics in self._topics.items():
            yield conn, frozenset(topics)

    def __contains__(self, conn: object) -> bool:
        return conn in self._topics

    def __len__(self) -> int:
        return len(self._topics)


class Membership:
    """Owns a ChannelRegistry and a MemberIndex and keeps them in step."""

    def __init__(self) -> None:
        self._channels = ChannelRegistry()
        self._index = MemberIndex()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def join(self, topic: str, conn: Connection) -> int:
        """Add conn to topic (idempotent at the set level). Returns member count."""
        count = self._channels.add(topic, conn)
        self._index.add(conn, topic)
        return count

    def leave(self, topic: str, conn: Connection) -> int:
        """Remove conn from topic. Leaving a topic never joined is a no-op. Returns remaining count."""
        remaining = self._channels.discard(topic, conn)
        self._index.discard(conn, topic)
        return remaining

    def drop_connection(self, conn: Connection) -> list[str]:
        """Remove every trace of conn. Returns the topics it was a member of."""
        topics = self._index.pop(conn)
        for topic in topics:
            self._channels.discard(topic, conn)
        return sorted(topics)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def members(self, topic: str) -> frozenset[Connection]:
        return self._channels.members(topic)

    def is_member(self, topic: str, conn: Connection) -> bool:
        return self._channels.is_member(topic, conn)

    def has_topic(self, topic: str) -> bool:
        return self._channels.has_topic(topic)

    def topics_of(self, conn: Connection) -> frozenset[str]:
        return self._index.topics_of(conn)

    @property
    def topic_count(self) -> int:
        return len(self._channels)

    @property
    def channels(self) -> ChannelRegistry:
        return self._channels

    @property
    def index(self) -> MemberIndex:
        return self._index

    def is_consistent(self) -> bool:
        """True when both maps mirror each other and no empty topic exists."""
        forward = {(t, c) for t, members in self._channels.items() for c in members}
        backward = {(t, c) for c, topics in self._index.items() for t in topics}
        no_empty = all(members for _, members in self._channels.items())
        if forward != backward:
            logger.error(
                "Membership out of sync: %d registry pairs vs %d index pairs",
                len(forward), len(backward),
            )
        return forward == backward and no_empty
