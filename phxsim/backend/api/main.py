"""
api/main.py

FastAPI application: the transport boundary in front of ProtocolServer.

  - one WebSocket route per allowed upgrade path (query strings such as
    ?vsn=2.0.0 are ignored by the router)
  - any other WebSocket path is refused before accept and never reaches
    the protocol core
  - GET /health and GET /api/stats read the server's counters
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, status
from fastapi.websockets import WebSocketDisconnect

from ..config import settings
from ..connection import WebSocketConnection
from ..server import ProtocolServer
from .routes import stats as stats_router
from .serializers import HealthResponse

logger = logging.getLogger(__name__)


def create_app(
    server: ProtocolServer | None = None,
    allowed_paths: list[str] | None = None,
) -> FastAPI:
    server = server or ProtocolServer()
    paths = list(allowed_paths if allowed_paths is not None else settings.ALLOWED_PATHS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI startup, WebSocket paths: %s", ", ".join(paths))
        yield
        snap = server.snapshot()
        logger.info(
            "FastAPI shutdown: connections=%d channels=%d",
            snap.open_connections, snap.active_topics,
        )

    app = FastAPI(
        title="phxsim: Phoenix socket test server",
        version="1.0.0",
        description="In-memory Phoenix V2 channel server for exercising socket clients",
        lifespan=lifespan,
    )
    app.state.server = server

    # REST routers
    app.include_router(stats_router.router, prefix="/api")

    # WebSockets
    async def ws_socket(websocket: WebSocket):
        await websocket.accept()
        conn = WebSocketConnection(websocket)
        await server.connect(conn)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes")
                await server.handle_message(conn, raw)
        except WebSocketDisconnect:
            pass
        except Exception as exc:
            server.connection_error(conn, exc)
        finally:
            await server.disconnect(conn)

    for path in paths:
        app.add_api_websocket_route(path, ws_socket)

    @app.websocket("/{path:path}")
    async def ws_rejected(websocket: WebSocket, path: str):
        logger.warning("Rejected upgrade on path: /%s", path)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request) -> HealthResponse:
        snap = request.app.state.server.snapshot()
        return HealthResponse(
            status="ok",
            connections=snap.open_connections,
            channels=snap.active_topics,
        )

    return app
