# backend/inspector360/cli/__main__.py
from __future__ import annotations

import argparse

from inspector360.cli.seed_demo import seed_demo
from inspector360.db import SessionLocal
from inspector360.logging_config import configure_logging
from inspector360.services.status_backfill import (
    apply_status_corrections,
    corrections_as_dicts,
    preview_status_corrections,
)


def _fix_status(apply: bool) -> None:
    db = SessionLocal()
    try:
        if apply:
            scanned, corrections = apply_status_corrections(db, actor_email="cli")
        else:
            scanned, corrections = preview_status_corrections(db)
    finally:
        db.close()

    print({"ok": True, "applied": apply, "scanned": scanned, "corrections": corrections_as_dicts(corrections)})


def main() -> None:
    configure_logging()

    p = argparse.ArgumentParser(prog="inspector360")
    sub = p.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed-demo", help="stations, users, fleet and a bulletin for local work")
    seed.add_argument("--admin-email", default="admin@inspector360.local")
    seed.add_argument("--no-create-schema", action="store_true")

    fix = sub.add_parser("fix-status", help="re-classify stored inspection statuses")
    fix.add_argument("--apply", action="store_true", help="write the corrections (default is a dry run)")

    args = p.parse_args()

    if args.command == "seed-demo":
        out = seed_demo(admin_email=args.admin_email, create_schema=(not args.no_create_schema))
        print({"ok": True, "stations": out.stations, "equipment": out.equipment, "admin_email": out.admin_email})
    elif args.command == "fix-status":
        _fix_status(apply=args.apply)


if __name__ == "__main__":
    main()
