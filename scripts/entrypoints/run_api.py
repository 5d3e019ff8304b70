#!/usr/bin/env python3
"""
Inquiry Intake Server

Serve the static site and the inquiry API.

Usage:
    python scripts/entrypoints/run_api.py
    python scripts/entrypoints/run_api.py --host 127.0.0.1 --port 8080
    python scripts/entrypoints/run_api.py --reload  # Development mode with auto-reload
"""

import argparse
import sys
from pathlib import Path

import uvicorn

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from core.config import InquirySettings  # noqa: E402
from core.logging_config import setup_json_logging  # noqa: E402


def main():
    settings = InquirySettings.from_env()

    parser = argparse.ArgumentParser(
        description="Inquiry Intake Server"
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: PORT or {settings.port})"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    args = parser.parse_args()

    setup_json_logging(
        log_level=settings.log_level,
        environment=settings.environment,
    )

    print(f"Local dev server listening on http://localhost:{args.port}")

    uvicorn.run(
        "api.inquiry_app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
