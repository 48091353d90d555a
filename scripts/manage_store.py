#!/usr/bin/env python3
"""
Manage a jsondb document from the command line.

Uso:
  python scripts/manage_store.py [--db data.json] init
  python scripts/manage_store.py create-user ana@example.com secret "Ana" 30
  python scripts/manage_store.py posts ana@example.com
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

# Garantir que o pacote jsondb seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jsondb.core.config import get_settings  # noqa: E402
from jsondb.core.logging_setup import setup_logging  # noqa: E402
from jsondb.repositories.json_storage import StorageError  # noqa: E402
from jsondb.services.store import Store, StoreError  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage users and posts in a jsondb document")
    ap.add_argument("--db", help="Document path (default: JSONDB_PATH or ./database.json)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create an empty document if the file cannot be read")

    for name in ("create-user", "update-user"):
        p = sub.add_parser(name)
        p.add_argument("email")
        p.add_argument("password")
        p.add_argument("name")
        p.add_argument("age", type=int)

    sub.add_parser("get-user").add_argument("email")
    sub.add_parser("delete-user").add_argument("email")

    p = sub.add_parser("create-post")
    p.add_argument("email")
    p.add_argument("text")

    sub.add_parser("posts", help="List the posts of a user").add_argument("email")
    sub.add_parser("delete-post").add_argument("id")
    return ap


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def run(store: Store, args: argparse.Namespace) -> None:
    cmd = args.command
    if cmd == "init":
        store.ensure_initialized()
        print(f"OK: {store.path}")
    elif cmd == "create-user":
        _print(store.create_user(args.email, args.password, args.name, args.age).model_dump(mode="json", by_alias=True))
    elif cmd == "update-user":
        _print(store.update_user(args.email, args.password, args.name, args.age).model_dump(mode="json", by_alias=True))
    elif cmd == "get-user":
        _print(store.get_user(args.email).model_dump(mode="json", by_alias=True))
    elif cmd == "delete-user":
        store.delete_user(args.email)
        print("OK")
    elif cmd == "create-post":
        _print(store.create_post(args.email, args.text).model_dump(mode="json", by_alias=True))
    elif cmd == "posts":
        _print([post.model_dump(mode="json", by_alias=True) for post in store.get_posts(args.email)])
    elif cmd == "delete-post":
        store.delete_post(args.id)
        print("OK")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    path = Path(args.db).expanduser() if args.db else settings.database_path
    store = Store(path, indent=settings.json_indent)
    try:
        run(store, args)
    except (StoreError, StorageError, OSError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
