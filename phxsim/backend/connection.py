"""
backend/connection.py

Connection abstraction for one logical client session.

The core only needs "is it open?" and "send this text"; everything else about
the transport (accept, receive loop, close codes) stays in api/main.py.

States:  CONNECTING → OPEN → CLOSED   (transport errors fold into CLOSED)
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from enum import Enum

from fastapi import WebSocket
from fastapi.websockets import WebSocketState


class ConnectionState(str, Enum):
    CONNECTING = "CONNECTING"
    OPEN       = "OPEN"
    CLOSED     = "CLOSED"


class Connection(ABC):
    """
    Opaque handle shared by the channel registry and the member index.

    Hashing is by identity, so a Connection can be a set member and a dict key.
    Only ProtocolServer changes `state`.
    """

    def __init__(self) -> None:
        self.conn_id: str = uuid.uuid4().hex[:8]
        self.state: ConnectionState = ConnectionState.CONNECTING

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True while the underlying transport can still accept sends."""
        ...

    @abstractmethod
    async def send(self, text: str) -> None:
        """Send one encoded frame. May raise if the peer has gone away."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.conn_id} {self.state.value}>"


class WebSocketConnection(Connection):
    """Connection backed by an accepted FastAPI/Starlette WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        super().__init__()
        self._ws = websocket

    @property
    def is_open(self) -> bool:
        return (
            self._ws.client_state == WebSocketState.CONNECTED
            and self._ws.application_state == WebSocketState.CONNECTED
        )

    async def send(self, text: str) -> None:
        await self._ws.send_text(text)
