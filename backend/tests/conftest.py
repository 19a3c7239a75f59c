"""Pytest fixtures for DonorHub backend tests.

Provides reusable test fixtures for:
- Database session against an in-memory SQLite database
- Donor and audit log factories
- FastAPI test client wired to the test session

Usage:
    def test_match_endpoint(client, make_donor):
        make_donor(first_name="Ada", interests=["arts"])
        response = client.post("/api/v1/donors/match", json={"eventType": ["arts"]})
        assert response.status_code == 200
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from models import Base, Donor, Event, AuditLog, User
from database import get_db as database_get_db


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite does not emit BEGIN itself in a way SAVEPOINT can nest under;
# take over transaction control so Session.begin_nested() behaves as on PostgreSQL.
@event.listens_for(test_engine, "connect")
def _sqlite_disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _sqlite_emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def make_donor(db_session: Session):
    """Factory that persists a donor with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Donor:
        counter["n"] += 1
        values = {
            "first_name": f"Donor{counter['n']}",
            "last_name": "Test",
            "email": None,
            "city": "Toronto",
            "province": "ON",
            "interests": [],
            "total_donations": 0,
            "largest_gift": 0,
        }
        values.update(overrides)
        donor = Donor(**values)
        db_session.add(donor)
        db_session.commit()
        db_session.refresh(donor)
        return donor

    return _make


@pytest.fixture
def make_event(db_session: Session):
    def _make(**overrides) -> Event:
        values = {
            "name": "Spring Gala",
            "date": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
            "location": "Toronto",
            "event_type": ["arts", "gala"],
            "expected_attendees": 50,
        }
        values.update(overrides)
        evt = Event(**values)
        db_session.add(evt)
        db_session.commit()
        db_session.refresh(evt)
        return evt

    return _make


@pytest.fixture
def make_audit_log(db_session: Session):
    """Factory that inserts a raw audit log row with an explicit timestamp."""

    def _make(created_at: datetime, **overrides) -> AuditLog:
        values = {
            "action": "update",
            "entity_type": "user",
            "created_at": created_at,
        }
        values.update(overrides)
        entry = AuditLog(**values)
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _make


@pytest.fixture
def admin_user(db_session: Session) -> User:
    user = User(
        username="admin",
        email="admin@example.org",
        role="admin",
        password_hash="$argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def client(db_session: Session):
    """Create a test client whose requests share the test session."""
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
