#!/usr/bin/env python3
"""
Clear all stored availability (availability_slots, availability_records). Sessions, campaigns and
settings are kept. PostgreSQL only (TRUNCATE).
Run with backend stopped to avoid locks: cd backend && python scripts/clear_availability.py
"""
import sys
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import text

from groupcal.db.session import engine
from groupcal.db.tables import AVAILABILITY_TABLE_NAMES


def main():
    tables = ", ".join(AVAILABILITY_TABLE_NAMES)
    print(f"Connecting to DB and truncating {tables} ...")
    with engine.connect() as conn:
        conn.execute(text(f"TRUNCATE TABLE {tables} RESTART IDENTITY CASCADE"))
        conn.commit()
    print("Done. Availability is empty; every slot now reads as unavailable.")


if __name__ == "__main__":
    main()
