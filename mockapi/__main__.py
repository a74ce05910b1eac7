"""
Run the mock API server.

Usage:
  python -m mockapi [--host localhost] [--port 3001] [--data-dir ./data]
                    [--storage file|memory|sql] [--collections todos,users,items]
"""
from __future__ import annotations

import argparse
import dataclasses
import sys

import uvicorn

from mockapi.app import create_app
from mockapi.core.config import STORAGE_BACKENDS, get_settings, parse_collections
from mockapi.core.logging import get_logger


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="File-backed mock REST API")
    ap.add_argument("--host", help="Listen host (default: MOCK_API_HOST or localhost)")
    ap.add_argument("--port", type=int, help="Listen port (default: MOCK_API_PORT or 3001)")
    ap.add_argument("--data-dir", help="Directory for mock_<collection>.json files")
    ap.add_argument("--storage", choices=STORAGE_BACKENDS, help="Storage backend")
    ap.add_argument("--collections", help="Comma separated list, e.g. todos,users:list|get")
    args = ap.parse_args(argv)

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.storage:
        overrides["storage_backend"] = args.storage
    if args.collections:
        overrides["collections"] = parse_collections(args.collections)
    settings = dataclasses.replace(get_settings(), **overrides)

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        get_logger(__name__).exception("mock_api_failed_to_start", error=str(exc))
        sys.exit(1)
