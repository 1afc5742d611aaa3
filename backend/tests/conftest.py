"""Pytest configuration and fixtures for the group calendar backend."""

import os

# Point the app at in-memory SQLite and pin calendar config BEFORE importing groupcal
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CANONICAL_TIMEZONE"] = "America/New_York"
os.environ.pop("CANONICAL_TIMEZONE_ALIASES", None)
os.environ["CALENDAR_DAY_START_HOUR"] = "8"
os.environ["CALENDAR_DAY_END_HOUR"] = "22"
os.environ["CALENDAR_WEEK_START"] = "0"
os.environ["CALENDAR_MAX_FUTURE_WEEKS"] = "12"
os.environ["CALENDAR_CONVERT_WITH_SLOT_DATE"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from groupcal.db.base import Base
from groupcal.db.session import engine, get_db
from groupcal.main import app
from groupcal.models import Campaign, CampaignMember

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CAMPAIGN_ID = "c1"
ROSTER = ("alice", "bob", "carol")


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def campaign(db_session):
    """Campaign c1 with alice, bob and carol as members."""
    row = Campaign(id=CAMPAIGN_ID, name="Tuesday group", description="", is_default=True)
    db_session.add(row)
    db_session.add_all([CampaignMember(campaign_id=CAMPAIGN_ID, username=u) for u in ROSTER])
    db_session.commit()
    return row


@pytest.fixture
def client(db_session):
    yield TestClient(app)


def user_headers(username: str, is_admin: bool = False) -> dict[str, str]:
    return {"X-Username": username, "X-Is-Admin": "true" if is_admin else "false"}


@pytest.fixture
def alice():
    return user_headers("alice")


@pytest.fixture
def admin():
    return user_headers("gm", is_admin=True)
