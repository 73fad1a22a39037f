#!/usr/bin/env python3
"""
DevConnector API server.

Usage:
  python main.py
  python main.py --port 8000
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY            Token signing secret, at least 32 characters. Required
                        unless DEBUG=true.
  DEBUG                 true to auto-generate a throwaway SECRET_KEY.
  PORT                  Listen port (default 5000).
  DATABASE_URL          SQLAlchemy URL (default: sqlite file next to the code).
  GITHUB_CLIENT_ID      Optional GitHub OAuth app credentials for the
  GITHUB_CLIENT_SECRET  profile repo lookup.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="devconnector",
        description="Run the DevConnector REST API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on (default: {settings.port}, from PORT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    args = parser.parse_args()

    print(f"Server starting on port {args.port}")
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
