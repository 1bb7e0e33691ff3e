"""
handlers/base.py

Abstract base class that every message handler implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..connection import Connection
from ..protocol.models import Envelope

if TYPE_CHECKING:
    from ..server import ProtocolServer


class BaseHandler(ABC):
    """
    Contract that every handler must satisfy.

    Class-level attributes:
        name  short identifier used in logs and returned by the router

    handle() runs with the server's message lock held: it may mutate
    membership through server.membership and emit frames through
    server.reply / server.broadcast*. Those frames are queued and only sent
    once the lock is released. handle() must not call back into
    handle_message().
    """

    name: str = ""

    @abstractmethod
    async def handle(self, server: ProtocolServer, conn: Connection, envelope: Envelope) -> None:
        ...

    def __repr__(self) -> str:
        return f"<Handler:{self.name}>"
