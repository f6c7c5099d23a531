#!/usr/bin/env python3
"""
LinkDeck -- personal bookmark groups with a JSON API.

Usage:
  python main.py serve
  python main.py serve --host 127.0.0.1 --port 9000 --reload
  python main.py export
  python main.py export -o backup.json
  python main.py import backup.json
  python main.py reset-password
  python main.py reset-password --username admin

Every command reads the same settings as the server (environment variables
and .env). export/import/reset-password work on the database directly, so
they can be used while the server is stopped.

Environment variables:
  SECRET_KEY      Required unless DEBUG=true. At least 32 characters.
  ADMIN_PASSWORD  Password for the admin account created on first start.
  DATABASE_URL    SQLAlchemy URL. Default: sqlite:///data/linkdeck.db
"""

import argparse
import getpass
import json
import sys
from pathlib import Path
from typing import Optional

from core.config import ensure_sqlite_dir, get_settings
from core.errors import LinkDeckError


def _link_store():
    from catalog.store import LinkStore

    settings = get_settings()
    ensure_sqlite_dir(settings.database_url)
    return LinkStore(settings.database_url)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    from catalog.transfer import document_to_dict, export_catalog

    store = _link_store()
    try:
        data = document_to_dict(export_catalog(store))
    finally:
        store.close()
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"  Exported {len(data['link_groups'])} groups to {args.output}")
    else:
        print(text)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    from catalog.transfer import import_document, parse_document

    file_path = Path(args.file).resolve()
    if not file_path.is_file():
        print(f"  [!] '{args.file}' is not a readable file.", file=sys.stderr)
        return 1
    try:
        raw = file_path.read_bytes()
    except OSError as e:
        print(f"  [!] Could not read file '{args.file}': {e}", file=sys.stderr)
        return 1

    store = _link_store()
    try:
        result = import_document(store, parse_document(raw))
    except LinkDeckError as e:
        print(f"  [!] Import failed: {e.message}", file=sys.stderr)
        return 1
    finally:
        store.close()
    print(
        f"  Imported {result.links_imported} links "
        f"({result.groups_created} new groups, {result.groups_replaced} replaced)"
    )
    return 0


def cmd_reset_password(args: argparse.Namespace) -> int:
    from auth.store import UserStore
    from auth.tokens import hash_password

    settings = get_settings()
    username = args.username or settings.admin_username
    ensure_sqlite_dir(settings.database_url)
    store = UserStore(settings.database_url)
    try:
        user = store.get_by_username(username)
        if user is None:
            print(f"  [!] No user named '{username}'.", file=sys.stderr)
            return 1
        password = getpass.getpass("New password: ")
        if len(password) < 6:
            print("  [!] Password must be at least 6 characters.", file=sys.stderr)
            return 1
        if getpass.getpass("Repeat password: ") != password:
            print("  [!] Passwords don't match.", file=sys.stderr)
            return 1
        store.update_password(user.id, hash_password(password))
    finally:
        store.close()
    print(f"  Password updated for '{username}'")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkdeck",
        description="LinkDeck bookmark server and admin tools.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    serve.set_defaults(func=cmd_serve)

    export = sub.add_parser("export", help="Write the whole catalog as JSON")
    export.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")
    export.set_defaults(func=cmd_export)

    imp = sub.add_parser("import", help="Merge an export file into the catalog")
    imp.add_argument("file", help="Export file produced by 'export' or GET /api/admin/export")
    imp.set_defaults(func=cmd_import)

    reset = sub.add_parser("reset-password", help="Set a user's password interactively")
    reset.add_argument("--username", default=None, help="Account name (default: ADMIN_USERNAME setting)")
    reset.set_defaults(func=cmd_reset_password)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
