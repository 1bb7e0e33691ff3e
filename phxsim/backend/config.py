"""
backend/config.py

Application configuration via Pydantic Settings.
All values can be overridden with environment variables or a .env file.

Quick start: create a .env file in your project root:
    PORT=4000
    ALLOWED_PATHS=/socket,/socket/websocket
    LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API
    API_HOST: str = "0.0.0.0"
    PORT: int = 4000

    # WebSocket upgrade paths accepted by the transport layer
    ALLOWED_PATHS: Annotated[list[str], NoDecode] = ["/socket", "/socket/websocket"]

    # Topics with this prefix are routed to the echo handler
    ECHO_TOPIC_PREFIX: str = "echo:"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_PATHS", mode="before")
    @classmethod
    def parse_allowed_paths(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                try:
                    return json.loads(v)
                except ValueError:
                    pass
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


settings = Settings()
