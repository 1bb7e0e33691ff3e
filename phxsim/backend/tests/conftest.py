"""
tests/conftest.py

Shared fixtures: a fresh ProtocolServer per test and a recording fake
Connection that keeps every outbound frame.
"""

from __future__ import annotations

import asyncio
import json

import pytest

from phxsim.backend.connection import Connection
from phxsim.backend.server import ProtocolServer


class RecordingConnection(Connection):
    """In-memory Connection; `received` holds decoded outbound envelopes."""

    def __init__(self, open_: bool = True, fail_send: bool = False, stall: bool = False) -> None:
        super().__init__()
        self.open = open_
        self.fail_send = fail_send
        self.stall = stall
        self.frames: list[str] = []

    @property
    def is_open(self) -> bool:
        return self.open

    async def send(self, text: str) -> None:
        if self.fail_send:
            raise RuntimeError("connection reset")
        if self.stall:
            # A peer that stopped reading: the send never completes.
            await asyncio.Event().wait()
        self.frames.append(text)

    @property
    def received(self) -> list[list]:
        return [json.loads(f) for f in self.frames]

    def clear(self) -> None:
        self.frames.clear()


def frame(join_ref, ref, topic, event, payload) -> str:
    return json.dumps([join_ref, ref, topic, event, payload])


@pytest.fixture
def server():
    return ProtocolServer()


@pytest.fixture
def open_conn(server):
    """Factory: `conn = await open_conn()` returns a connected RecordingConnection."""
    async def _open(**kwargs) -> RecordingConnection:
        conn = RecordingConnection(**kwargs)
        await server.connect(conn)
        return conn
    return _open


@pytest.fixture
def make_frame():
    return frame


@pytest.fixture
def conn_cls():
    """The RecordingConnection class, for tests that build connections without a server."""
    return RecordingConnection
