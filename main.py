#!/usr/bin/env python3
"""
Catalog API -- product catalog with user registration and bearer tokens.

Usage:
  python main.py
  python main.py --host 0.0.0.0 --port 8080
  python main.py --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY            Token signing key, at least 32 characters. Required
                        unless DEBUG=true.
  DEBUG                 Set to true to auto-generate a development key.
  TOKEN_EXPIRE_SECONDS  Lifetime of issued tokens. Default 3600.
  DATABASE_URL          SQLAlchemy URL. Default: SQLite file beside the code.
"""

import argparse

import uvicorn

from core.config import get_settings


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the catalog API server.")
    parser.add_argument("--host", default=settings.web_server_host, help="Bind address.")
    parser.add_argument("--port", type=int, default=settings.web_server_port, help="Bind port.")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only).")
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
