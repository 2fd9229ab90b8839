#!/usr/bin/env python3
"""
GhostMatch — Bundle Manager: inspect, export, import and reset the stored bundle

Operates on whatever backend the environment configures (``STORAGE_BACKEND``
and friends), so the same commands work against a local file, Redis or GCS.

  stats   — Report match, session, message and notification counts.
  export  — Write the bundle as plain JSON (decrypted) to a file or stdout.
  import  — Replace the stored bundle with a JSON file.
  reset   — Restore the first-run state.

Usage examples
--------------
  python scripts/bundle_manager.py stats
  python scripts/bundle_manager.py export --output backup.json
  python scripts/bundle_manager.py import backup.json
  python scripts/bundle_manager.py reset --yes
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is importable
sys.path.insert(0, ".")

from ghostmatch.config import get_settings
from ghostmatch.errors import PersistenceError
from ghostmatch.bootstrap import build_store
from ghostmatch.schemas import Bundle


# ──────────────────────────────────────────────────────────────────────────────
# Subcommand: stats
# ──────────────────────────────────────────────────────────────────────────────

def cmd_stats(args: argparse.Namespace) -> int:
    with build_store(get_settings()) as store:
        if store.load_error is not None:
            print(f"  WARNING: {store.load_error}")
        bundle = store.snapshot()

    message_count = sum(len(s.messages) for s in bundle.sessions.values())
    revealed = sum(1 for s in bundle.sessions.values() if s.is_revealed)
    unread = sum(1 for n in bundle.notifications if not n.read)

    print(f"\n{'=' * 60}")
    print(f"  Bundle Statistics")
    print(f"{'=' * 60}")
    print(f"  Matches:        {len(bundle.matches)}")
    print(f"  Sessions:       {len(bundle.sessions)} ({revealed} revealed)")
    print(f"  Messages:       {message_count}")
    print(f"  Notifications:  {len(bundle.notifications)} ({unread} unread)")

    orphaned = set(bundle.sessions) ^ {m.id for m in bundle.matches}
    if orphaned:
        print(f"\n  Match/session mismatch for: {', '.join(sorted(orphaned))}")
    return 0


# ──────────────────────────────────────────────────────────────────────────────
# Subcommand: export
# ──────────────────────────────────────────────────────────────────────────────

def cmd_export(args: argparse.Namespace) -> int:
    with build_store(get_settings()) as store:
        payload = store.snapshot().model_dump_json(by_alias=True, indent=2)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"  Bundle written to {args.output}")
    else:
        print(payload)
    return 0


# ──────────────────────────────────────────────────────────────────────────────
# Subcommand: import
# ──────────────────────────────────────────────────────────────────────────────

def cmd_import(args: argparse.Namespace) -> int:
    bundle = Bundle.model_validate_json(Path(args.path).read_bytes())
    store = build_store(get_settings())
    try:
        store.gateway.save(bundle)
    except PersistenceError as exc:
        print(f"  ERROR: {exc}")
        return 1
    finally:
        store.gateway.close()

    print(
        f"  Imported {len(bundle.matches)} matches, {len(bundle.sessions)} sessions, "
        f"{len(bundle.notifications)} notifications"
    )
    return 0


# ──────────────────────────────────────────────────────────────────────────────
# Subcommand: reset
# ──────────────────────────────────────────────────────────────────────────────

def cmd_reset(args: argparse.Namespace) -> int:
    if not args.yes:
        print("  Refusing to reset without --yes")
        return 1
    with build_store(get_settings()) as store:
        try:
            store.reset()
        except PersistenceError as exc:
            print(f"  ERROR: {exc}")
            return 1
    print("  Bundle reset to first-run state")
    return 0


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="GhostMatch Bundle Manager — inspect, back up and restore stored state.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available subcommands",
    )

    subparsers.add_parser(
        "stats",
        help="Report match, session, message and notification counts.",
    )

    export_parser = subparsers.add_parser(
        "export",
        help="Write the bundle as plain JSON.",
    )
    export_parser.add_argument(
        "--output", "-o",
        type=str,
        default="",
        help="Destination file (default: stdout).",
    )

    import_parser = subparsers.add_parser(
        "import",
        help="Replace the stored bundle with a JSON file.",
    )
    import_parser.add_argument("path", type=str, help="Bundle JSON file to import.")

    reset_parser = subparsers.add_parser(
        "reset",
        help="Restore the first-run state.",
    )
    reset_parser.add_argument(
        "--yes",
        action="store_true",
        default=False,
        help="Confirm the reset.",
    )

    args = parser.parse_args()

    commands = {
        "stats": cmd_stats,
        "export": cmd_export,
        "import": cmd_import,
        "reset": cmd_reset,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    sys.exit(handler(args))


if __name__ == "__main__":
    main()
