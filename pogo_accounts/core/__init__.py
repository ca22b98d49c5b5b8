"""Core configuration and infrastructure helpers."""

from .config import (
    CORS_ORIGIN,
    DATABASE_URL,
    DB_RESET,
    HOST,
    LIST_LIMIT,
    LOG_LEVEL,
    MAX_BODY_BYTES,
    PORT,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW_SECONDS,
)
from .database import engine, get_session
from .ids import OBJECT_ID_LENGTH, is_valid_object_id, new_object_id
from .log import configure_logging
from .time import isoformat_z, utcnow

__all__ = [
    "CORS_ORIGIN",
    "DATABASE_URL",
    "DB_RESET",
    "HOST",
    "LIST_LIMIT",
    "LOG_LEVEL",
    "MAX_BODY_BYTES",
    "OBJECT_ID_LENGTH",
    "PORT",
    "RATE_LIMIT_MAX",
    "RATE_LIMIT_WINDOW_SECONDS",
    "configure_logging",
    "engine",
    "get_session",
    "is_valid_object_id",
    "isoformat_z",
    "new_object_id",
    "utcnow",
]
