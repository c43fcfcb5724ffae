"""
Run the API with uvicorn.

Run with:
    uv run python -m src.portal.scripts.serve --reload
    uv run python -m src.portal.scripts.serve --migrate   # alembic upgrade head first
"""

import argparse
from collections.abc import Sequence

import uvicorn

from src.portal.core.config import get_settings
from src.portal.core.db import run_migrations_sync


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the portal API")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--migrate", action="store_true", help="Upgrade the database to head before serving"
    )
    args = parser.parse_args(argv)

    if args.migrate:
        run_migrations_sync()

    uvicorn.run(
        "src.portal.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
        # structlog handles access logging through the request middleware
        access_log=False,
    )


if __name__ == "__main__":
    main()
