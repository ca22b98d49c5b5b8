"""Shared fixtures: a fresh app and in-memory database per test."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_MAX"] = "50"
os.environ["RATE_LIMIT_WINDOW_SECONDS"] = "900"
os.environ["MAX_BODY_BYTES"] = "65536"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from pogo_accounts.app import create_app
from pogo_accounts.core import get_session
from pogo_accounts.core.database import build_engine


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app(engine):
    app = create_app()

    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def account_payload():
    """A minimal valid account."""
    return {"username": "trainer123", "email": "t@example.com", "team": "mystic"}


@pytest.fixture
def full_payload():
    return {
        "username": "ash_ketchum",
        "email": "ash@example.com",
        "team": "valor",
        "country": "New Zealand",
        "birthday": "1997-04-01",
        "level": 40,
    }
