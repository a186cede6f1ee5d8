"""Shared test fixtures.

Tests run against an in-memory SQLite database whose tables are created
before and dropped after every test, so tests never pollute each other.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATION_ENABLED"] = "false"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hospital_admin.app.core.database import Base, get_db
from hospital_admin.app.main import app
from hospital_admin.app.models.supplier import Supplier
from hospital_admin.app.services.expiry import invalidate_stock_cache

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


# ─── DB session with fresh tables per test ────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=test_engine)
    invalidate_stock_cache()
    session = TestingSession()

    yield session

    session.close()
    Base.metadata.drop_all(bind=test_engine)
    invalidate_stock_cache()


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Suppliers ───────────────────────────────────────────────────────────────


@pytest.fixture()
def acme(db: Session) -> Supplier:
    s = Supplier(name="Acme Pharma", email="accounts@acme.test", credit_days=30)
    db.add(s)
    db.flush()
    return s


@pytest.fixture()
def zenith(db: Session) -> Supplier:
    s = Supplier(name="Zenith Healthcare", email="billing@zenith.test")
    db.add(s)
    db.flush()
    return s
