#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from backend/:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        print("WARN backend/.env missing; using defaults (DATABASE_URL, CANONICAL_TIMEZONE, ...)")
    else:
        print("OK  .env exists")

    # 2) Calendar config (canonical zone must exist in the tz database)
    try:
        from groupcal.core.calendar_config import get_calendar_config
        from groupcal.services.timezone.resolve import is_known_zone

        cfg = get_calendar_config()
        if is_known_zone(cfg.canonical_timezone):
            print(f"OK  Canonical timezone {cfg.canonical_timezone}")
        else:
            errors.append(f"CANONICAL_TIMEZONE {cfg.canonical_timezone!r} is not a known IANA zone")
    except Exception as e:
        errors.append(f"Calendar config: {e}")
        print("FAIL Calendar config:", e)

    # 3) DB connection
    try:
        from sqlalchemy import text
        from groupcal.db.session import engine

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from groupcal.main import app  # noqa: F401

        print("OK  App import (groupcal.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn groupcal.main:app --reload")
    return 0


if __name__ == "__main__":
    sys.exit(main())
