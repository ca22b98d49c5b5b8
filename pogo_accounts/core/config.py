"""Application settings and environment helpers."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


# Database -------------------------------------------------------------------
DATABASE_URL = _require_env("DATABASE_URL")
DB_RESET = _env_bool("DB_RESET", False)


# HTTP server ----------------------------------------------------------------
HOST = os.getenv("HOST", "127.0.0.1")
PORT = _env_int("PORT", 5200)
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:4200")
MAX_BODY_BYTES = _env_int("MAX_BODY_BYTES", 10 * 1024 * 1024)


# Admission control ----------------------------------------------------------
RATE_LIMIT_MAX = _env_int("RATE_LIMIT_MAX", 50)
RATE_LIMIT_WINDOW_SECONDS = _env_int("RATE_LIMIT_WINDOW_SECONDS", 15 * 60)


# Runtime behaviour ----------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LIST_LIMIT = 100


__all__ = [
    "CORS_ORIGIN",
    "DATABASE_URL",
    "DB_RESET",
    "HOST",
    "LIST_LIMIT",
    "LOG_LEVEL",
    "MAX_BODY_BYTES",
    "PORT",
    "RATE_LIMIT_MAX",
    "RATE_LIMIT_WINDOW_SECONDS",
]
