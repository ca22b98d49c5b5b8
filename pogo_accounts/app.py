"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_error_handlers, register_routes
from .api.middleware import (
    BodySizeLimitMiddleware,
    FixedWindowLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from .api.routers import ACCOUNTS_PREFIX
from .core import (
    CORS_ORIGIN,
    DB_RESET,
    HOST,
    MAX_BODY_BYTES,
    PORT,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW_SECONDS,
    configure_logging,
    engine,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DB_RESET:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    logger.info("CORS enabled for: %s", CORS_ORIGIN)
    yield


def create_app(limiter: Optional[FixedWindowLimiter] = None) -> FastAPI:
    app = FastAPI(title="Pogo Accounts API", version="1.0.0", lifespan=lifespan)

    if limiter is None:
        limiter = FixedWindowLimiter(RATE_LIMIT_MAX, RATE_LIMIT_WINDOW_SECONDS)
    app.state.rate_limiter = limiter

    # Added innermost first.
    app.add_middleware(
        RateLimitMiddleware,
        limiter=app.state.rate_limiter,
        path_prefix=ACCOUNTS_PREFIX,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)
    register_routes(app)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""

    import uvicorn

    configure_logging()
    logger.info("Server is running at http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
