"""
api/serializers.py

Response models for the HTTP surface.
"""

from __future__ import annotations
from pydantic import BaseModel, Field

class HealthResponse(BaseModel):
    status: str = "ok"
    connections: int
    channels: int

class StatsResponse(BaseModel):
    open_connections: int = Field(alias="openConnections")
    active_topics: int = Field(alias="activeTopics")
    topics: dict[str, int] = {}
    counters: dict[str, int] = {}

