"""
Notekeeper — Login Rate Limiting Middleware
=============================================

What:  Per-IP sliding-window limit on POST /api/login.
How:   Keeps a deque of attempt timestamps per client IP; attempts older than
       the window fall off the left, and a full deque means 429.

Algorithm: Sliding Window Log
    1. Drop timestamps older than `now - window`
    2. If the remaining count >= limit → 429 with Retry-After
    3. Otherwise record `now` and let the request through

Only the login endpoint is limited: it is the one place an attacker can
guess passwords, and every other route either needs a token or is a read.

State is per process. Multiple workers each keep their own counts.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from notekeeper.config import settings
from notekeeper.exceptions import RateLimitExceededError
from notekeeper.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

LIMITED_ROUTES = {("POST", "/api/login")}


class SlidingWindowLimiter:
    """Attempt log per key; `hit` answers whether one more attempt fits."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._attempts: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int]:
        """
        Record an attempt for `key` if allowed.

        Returns:
            (allowed, retry_after_seconds); retry_after is 0 when allowed
        """
        now = time.monotonic() if now is None else now
        window_start = now - self.window_seconds
        attempts = self._attempts[key]
        while attempts and attempts[0] <= window_start:
            attempts.popleft()

        if len(attempts) >= self.max_requests:
            retry_after = int(attempts[0] + self.window_seconds - now) + 1
            return False, retry_after

        attempts.append(now)
        return True, 0

    def prune(self, now: Optional[float] = None) -> None:
        """Forget keys with no attempts inside the window."""
        now = time.monotonic() if now is None else now
        window_start = now - self.window_seconds
        stale = [k for k, v in self._attempts.items() if not v or v[-1] <= window_start]
        for key in stale:
            del self._attempts[key]


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """Applies SlidingWindowLimiter to the routes in LIMITED_ROUTES."""

    def __init__(
        self,
        app: ASGIApp,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(
            max_requests=max_requests or settings.login_rate_limit_requests,
            window_seconds=window_seconds or settings.login_rate_limit_window,
        )
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if (request.method, request.url.path) not in LIMITED_ROUTES:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        allowed, retry_after = self.limiter.hit(client_ip)

        if not allowed:
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning("Login rate limit exceeded for IP %s", client_ip)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": {"retry_after": exc.retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        self._seen += 1
        if self._seen % 1000 == 0:
            self.limiter.prune()

        return await call_next(request)
