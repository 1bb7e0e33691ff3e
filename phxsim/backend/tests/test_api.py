"""
tests/test_api.py

FastAPI route tests using TestClient (synchronous): WebSocket transport on
the allowed paths, path rejection, /health and /api/stats.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient
from fastapi.websockets import WebSocketDisconnect

from phxsim.backend.api.main import create_app
from phxsim.backend.server import ProtocolServer

OK_EMPTY = {"status": "ok", "response": {}}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def server():
    return ProtocolServer()


@pytest.fixture
def client(server):
    app = create_app(server, allowed_paths=["/socket", "/socket/websocket"])
    with TestClient(app) as c:
        yield c


def send(ws, *parts) -> None:
    ws.send_text(json.dumps(list(parts)))


# ---------------------------------------------------------------------------
# Health / stats
# ---------------------------------------------------------------------------

def test_health_idle(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "connections": 0, "channels": 0}


def test_health_counts_live_connection_and_topic(client):
    with client.websocket_connect("/socket/websocket") as ws:
        send(ws, "1", "1", "room:1", "phx_join", {})
        assert ws.receive_json() == ["1", "1", "room:1", "phx_reply", OK_EMPTY]

        body = client.get("/health").json()
        assert body["connections"] == 1
        assert body["channels"] == 1


def test_stats_shape(client):
    with client.websocket_connect("/socket") as ws:
        send(ws, "1", "1", "room:1", "phx_join", {})
        ws.receive_json()

        body = client.get("/api/stats").json()
        assert body["openConnections"] == 1
        assert body["activeTopics"] == 1
        assert body["topics"] == {"room:1": 1}
        assert body["counters"]["messages_received"] >= 1


# ---------------------------------------------------------------------------
# WebSocket transport
# ---------------------------------------------------------------------------

class TestSocket:

    def test_heartbeat_round_trip(self, client):
        with client.websocket_connect("/socket/websocket?vsn=2.0.0") as ws:
            send(ws, None, "1", "phoenix", "heartbeat", {})
            assert ws.receive_json() == [None, "1", "phoenix", "phx_reply", OK_EMPTY]

    def test_malformed_frame_gets_no_reply(self, client):
        with client.websocket_connect("/socket/websocket") as ws:
            ws.send_text("this is not json")
            ws.send_text('["too","short"]')
            send(ws, None, "2", "phoenix", "heartbeat", {})
            # The first thing back is the heartbeat reply
            assert ws.receive_json()[1] == "2"

    def test_not_member_error(self, client):
        with client.websocket_connect("/socket/websocket") as ws:
            send(ws, None, "3", "echo:test", "ping", {"n": 1})
            assert ws.receive_json() == [
                None, "3", "echo:test", "phx_reply",
                {"status": "error", "response": {"reason": "not a member of this channel"}},
            ]

    def test_echo_between_two_clients(self, client):
        with client.websocket_connect("/socket/websocket") as a, \
                client.websocket_connect("/socket/websocket") as b:
            send(a, "1", "1", "echo:test", "phx_join", {})
            assert a.receive_json() == ["1", "1", "echo:test", "phx_reply", OK_EMPTY]

            send(b, "1", "1", "echo:test", "phx_join", {})
            assert b.receive_json() == ["1", "1", "echo:test", "phx_reply", OK_EMPTY]
            assert a.receive_json() == [None, None, "echo:test", "user_joined", {"user": "anonymous"}]

            send(a, "1", "2", "echo:test", "ping", {"n": 1})
            assert a.receive_json() == [
                "1", "2", "echo:test", "phx_reply", {"status": "ok", "response": {"n": 1}},
            ]
            assert a.receive_json() == [None, None, "echo:test", "ping", {"n": 1}]
            assert b.receive_json() == [None, None, "echo:test", "ping", {"n": 1}]

    def test_leave_notifies_other_client(self, client):
        with client.websocket_connect("/socket") as a, \
                client.websocket_connect("/socket") as b:
            send(a, "1", "1", "test:room", "phx_join", {})
            a.receive_json()
            send(b, "1", "1", "test:room", "phx_join", {})
            b.receive_json()
            a.receive_json()  # user_joined

            send(b, "1", "2", "test:room", "phx_leave", {})
            assert b.receive_json() == ["1", "2", "test:room", "phx_reply", OK_EMPTY]
            assert a.receive_json() == [None, None, "test:room", "user_left", {"user": "anonymous"}]

    def test_binary_frame_accepted(self, client):
        with client.websocket_connect("/socket/websocket") as ws:
            ws.send_bytes(json.dumps([None, "9", "phoenix", "heartbeat", {}]).encode())
            assert ws.receive_json()[1] == "9"

    def test_unknown_path_rejected(self, client, server):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/not-a-socket"):
                pass
        assert exc_info.value.code == 1008
        assert server.metrics.connections_total.value == 0
