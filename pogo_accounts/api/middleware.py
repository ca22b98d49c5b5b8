"""HTTP middleware: security headers, body size cap and rate limiting."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'self'",
}

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        return apply_security_headers(response)


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_bytes`` with 413.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are buffered up to the cap and replayed to the app.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            if declared.isdigit() and int(declared) > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        chunks: List[bytes] = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        buffered: Optional[Message] = {
            "type": "http.request",
            "body": b"".join(chunks),
            "more_body": False,
        }

        async def replay() -> Message:
            nonlocal buffered
            if buffered is not None:
                message, buffered = buffered, None
                return message
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse({"error": "Payload too large"}, status_code=413)
        await response(scope, receive, send)


class FixedWindowLimiter:
    """Per-key request counter over fixed time windows."""

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> Tuple[bool, int, float]:
        """Count one request for ``key``.

        Returns ``(allowed, remaining, seconds_until_reset)``.
        """

        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
        reset_in = max(0.0, started + self.window_seconds - now)
        return count <= self.limit, max(0, self.limit - count), reset_in

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Admission gate for every path under ``path_prefix``."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowLimiter, path_prefix: str) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, remaining, reset_in = self.limiter.hit(client)
        headers = {
            "RateLimit-Limit": str(self.limiter.limit),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(math.ceil(reset_in)),
        }
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            headers["Retry-After"] = headers["RateLimit-Reset"]
            return JSONResponse({"error": RATE_LIMIT_MESSAGE}, status_code=429, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


__all__ = [
    "BodySizeLimitMiddleware",
    "FixedWindowLimiter",
    "RATE_LIMIT_MESSAGE",
    "RateLimitMiddleware",
    "SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
    "apply_security_headers",
]
