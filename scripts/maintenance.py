#!/usr/bin/env python
"""Housekeeping: `cleanup` drops expired chat state, `reset --yes` wipes all data."""
import argparse
import sys

from tracker.core.kv_store import clear_all
from tracker.core.sessions import clear_drafts
from tracker.core.state_store import cleanup_expired


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="maintenance")
    sub = parser.add_subparsers(dest="cmd", required=True)
    sub.add_parser("cleanup")
    reset = sub.add_parser("reset")
    reset.add_argument("--yes", action="store_true")
    args = parser.parse_args(argv)

    if args.cmd == "cleanup":
        n = cleanup_expired()
        print(f"[state-store] cleaned {n} expired entries")
        return 0
    if not args.yes:
        print("[reset] refusing without --yes")
        return 1
    clear_all()
    n = clear_drafts()
    print(f"[reset] all collections removed, {n} drafts and selections dropped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
