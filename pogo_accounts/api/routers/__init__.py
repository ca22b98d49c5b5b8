"""Aggregate API routers."""

from fastapi import APIRouter

from .accounts import PREFIX as ACCOUNTS_PREFIX
from .accounts import router as accounts_router
from .system import router as system_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    accounts_router,
)

__all__ = ["ACCOUNTS_PREFIX", "ALL_ROUTERS"]
