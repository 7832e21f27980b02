"""
HTTP middleware for the API app: access log, security headers, per-IP rate
limiting on ``/api/`` and a request body size cap.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from starlette.responses import Response

from services.config import Settings
from services.errors import (
    PayloadTooLargeError,
    RateLimitError,
    error_response,
    unhandled_error_handler,
)
from services.logging_setup import log_request

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

RATE_LIMITED_PREFIX = "/api/"


class FixedWindowRateLimiter:
    """Counts hits per key inside fixed windows of ``window_seconds``."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        """Drop every expired window. Runs at most once per window; caller holds the lock."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> Tuple[bool, int]:
        """
        Record one request for ``key``.

        Returns:
            (allowed, retry_after_seconds); retry_after is 0 when allowed
        """
        now = self._clock()
        with self._lock:
            self._sweep(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)

            if count > self.max_requests:
                retry_after = max(1, int(started + self.window_seconds - now + 0.999))
                return False, retry_after
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def install_middleware(app: FastAPI, settings: Settings) -> FastAPI:
    """
    Register the HTTP middleware stack.

    Starlette runs the last-registered middleware first, so registration is
    innermost-first: unhandled-error catch, body limit, rate limit, security
    headers, access log.
    """
    limiter = FixedWindowRateLimiter(
        settings.rate_limit_max_requests, settings.rate_limit_window_ms / 1000.0
    )
    app.state.rate_limiter = limiter
    max_body_bytes = settings.max_body_bytes

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        # Starlette runs the app-level Exception handler outside the whole middleware stack
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_error_handler(request, exc)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        declared: Optional[str] = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > max_body_bytes:
            exc = PayloadTooLargeError()
            logger.warning(
                f"Rejected {request.method} {request.url.path}: body of {declared} bytes"
            )
            return error_response(request, exc.status_code, exc.code, exc.message)
        return await call_next(request)

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith(RATE_LIMITED_PREFIX):
            allowed, retry_after = limiter.hit(_client_ip(request))
            if not allowed:
                exc = RateLimitError()
                logger.warning(f"Rate limit exceeded for {_client_ip(request)}")
                return error_response(
                    request,
                    exc.status_code,
                    exc.code,
                    exc.message,
                    headers={"Retry-After": str(retry_after)},
                )
        return await call_next(request)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response: Response = await call_next(request)
        log_request(request, response.status_code, (time.perf_counter() - started) * 1000)
        return response

    return app
