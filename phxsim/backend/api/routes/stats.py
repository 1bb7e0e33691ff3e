"""
api/routes/stats.py

GET /api/stats  live snapshot, per-topic member counts and server counters
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...server import ProtocolServer
from ..serializers import StatsResponse

router = APIRouter(prefix="/stats", tags=["stats"])


def _get_server(request: Request) -> ProtocolServer:
    return request.app.state.server


@router.get("", response_model=StatsResponse, response_model_by_alias=True)
async def get_stats(
    server: ProtocolServer = Depends(_get_server),
) -> StatsResponse:
    """Return the aggregate snapshot plus every counter the server keeps."""
    snap = server.snapshot()
    return StatsResponse(
        **snap.as_dict(),
        topics={topic: len(members) for topic, members in server.membership.channels.items()},
        counters=server.metrics.as_dict(),
    )
