from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

import uvicorn

from .api.main import create_app
from .config import settings
from .server import ProtocolServer

logger = logging.getLogger("phxsim.main")


def _log_banner(host: str, port: int, paths: list[str]) -> None:
    rule = "=" * 56
    logger.info(rule)
    logger.info("  phxsim test server (Phoenix V2 protocol)")
    logger.info("  Listening on %s:%d", host, port)
    logger.info("  WebSocket paths: %s", ", ".join(paths))
    logger.info("  Health check:    http://localhost:%d/health", port)
    logger.info(rule)


def run(host: str, port: int) -> None:
    server = ProtocolServer()
    app = create_app(server)
    _log_banner(host, port, settings.ALLOWED_PATHS)
    uvicorn.run(app, host=host, port=port, log_level="warning")
    snap = server.snapshot()
    logger.info(
        "phxsim stopped cleanly (connections=%d channels=%d counters=%s)",
        snap.open_connections, snap.active_topics, server.metrics.as_dict(),
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Phoenix V2 socket test server")
    parser.add_argument("--host", default=settings.API_HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument(
        "--log-level", default=settings.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main() -> NoReturn:
    args = _parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if not 0 < args.port < 65536:
        print(f"ERROR: invalid --port: {args.port}", file=sys.stderr)
        sys.exit(1)

    run(host=args.host, port=args.port)
    sys.exit(0)


if __name__ == "__main__":
    main()
