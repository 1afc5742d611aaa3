from groupcal.db.base import Base
from groupcal.db.session import get_db, engine, SessionLocal
from groupcal.db.tables import ALL_TABLE_NAMES, AVAILABILITY_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES", "AVAILABILITY_TABLE_NAMES"]
