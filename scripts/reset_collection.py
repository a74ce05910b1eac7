#!/usr/bin/env python3
"""
Reset a collection to an empty record list using the configured backend.

Usage:
  python scripts/reset_collection.py --collection todos [--data-dir ./data] [--storage file|sql]
"""
from __future__ import annotations

import argparse
import dataclasses
import sys

from mockapi.app import build_backend
from mockapi.core.config import get_settings
from mockapi.services.collection_store import CollectionStore
from mockapi.services.record_service import RecordService


# The memory backend would reset a throwaway in-process store.
PERSISTENT_BACKENDS = ("file", "sql")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Reset a mock API collection")
    ap.add_argument("--collection", required=True, help="Collection name (ex.: todos)")
    ap.add_argument("--data-dir", help="Directory for mock_<collection>.json files")
    ap.add_argument("--storage", choices=PERSISTENT_BACKENDS, help="Storage backend")
    args = ap.parse_args(argv)

    settings = get_settings()
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.storage:
        overrides["storage_backend"] = args.storage
    settings = dataclasses.replace(settings, **overrides)
    if settings.storage_backend not in PERSISTENT_BACKENDS:
        raise SystemExit(f"Storage '{settings.storage_backend}' keeps no data between processes; nothing to reset")

    name = (args.collection or "").strip()
    known = {c.name for c in settings.collections}
    if name not in known:
        raise SystemExit(f"Collection '{name}' is not configured (known: {', '.join(sorted(known))})")

    service = RecordService(CollectionStore(build_backend(settings)))
    dropped = service.reset(name)
    print(f"OK: collection '{name}' reset")
    print(f"  Records removed: {dropped}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
