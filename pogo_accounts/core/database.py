"""Database configuration and session helpers."""

from __future__ import annotations

from typing import Any, Dict, Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from .config import DATABASE_URL


def build_engine(url: str) -> Engine:
    """Create an engine, applying the sqlite tweaks FastAPI needs."""

    kwargs: Dict[str, Any] = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory databases live on a single connection.
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = build_engine(DATABASE_URL)


def get_session() -> Iterator[Session]:
    """FastAPI dependency that yields a database session."""

    with Session(engine) as session:
        yield session


__all__ = ["build_engine", "engine", "get_session"]
