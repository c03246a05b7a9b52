"""
In-memory rate limiting middleware for the GameHub backend.

Uses a simple sliding-window counter per client IP address. The limit is
global: every route (including "/") draws from the same per-client budget,
and rejected requests never reach a handler.

Not suitable for multi-worker deployments (use a shared store instead).
"""
import time
import logging
from collections import defaultdict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from domain.errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Simple in-memory sliding-window rate limiter.

    Tracks request timestamps per key. check() never awaits, so it is atomic
    with respect to the event loop.
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 900, sweep_every: int = 1000):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        # Every `sweep_every` checks, drop clients whose whole window has expired
        self.sweep_every = sweep_every
        self._checks = 0
        # {key: [timestamp1, timestamp2, ...]}
        self._requests: dict[str, list[float]] = defaultdict(list)

    def _cleanup(self, key: str):
        """Remove expired timestamps from the window."""
        cutoff = time.time() - self.window_seconds
        live = [ts for ts in self._requests.get(key, ()) if ts > cutoff]
        if live:
            self._requests[key] = live
        else:
            self._requests.pop(key, None)

    def _sweep(self):
        """Forget every client with no timestamp left in the window."""
        cutoff = time.time() - self.window_seconds
        stale = [key for key, stamps in self._requests.items() if not stamps or stamps[-1] <= cutoff]
        for key in stale:
            del self._requests[key]
        if stale:
            logger.debug(f"Rate limiter swept {len(stale)} idle clients")

    def check(self, key: str) -> bool:
        """
        Record a request for `key` if it is under the limit.

        Returns:
            True if allowed, False if rate-limited
        """
        self._checks += 1
        if self._checks % self.sweep_every == 0:
            self._sweep()
        self._cleanup(key)

        if len(self._requests[key]) >= self.max_requests:
            return False

        self._requests[key].append(time.time())
        return True

    def remaining(self, key: str) -> int:
        """Get the number of remaining requests in the current window."""
        self._cleanup(key)
        return max(0, self.max_requests - len(self._requests.get(key, ())))

    def reset(self):
        self._requests.clear()
        self._checks = 0


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over the per-client budget with 429 before routing."""

    def __init__(self, app, limiter: RateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        key = client_key(request)

        if not self.limiter.check(key):
            logger.warning(
                f"Rate limit exceeded: {key} on {request.method} {request.url.path} "
                f"({self.limiter.max_requests}/{self.limiter.window_seconds}s)"
            )
            exc = RateLimitError(
                headers={
                    "Retry-After": str(self.limiter.window_seconds),
                    "X-RateLimit-Limit": str(self.limiter.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message, "code": exc.code},
                headers=exc.headers,
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.remaining(key))
        return response
