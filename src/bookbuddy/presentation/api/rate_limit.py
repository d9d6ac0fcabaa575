"""Per-IP request limits for the authentication endpoints.

Each rule is a token bucket per client IP: ``limit`` requests, refilled
evenly over ``window_seconds``. Endpoints that share a rule share its
bucket, so login, code requests and code guesses draw from one budget.

Buckets live in process memory on the application instance; every worker
process counts on its own.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from fastapi import Request, status

from bookbuddy.domain.shared.exceptions import ErrorCode
from bookbuddy.domain.shared.time import utc_now
from bookbuddy.presentation.api.exception_handlers import CodedHTTPException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    name: str
    limit: int
    window_seconds: int

    @property
    def refill_per_second(self) -> float:
        return self.limit / self.window_seconds


LOGIN_LIMIT = RateLimit("login", limit=100, window_seconds=10 * 60)
REGISTER_LIMIT = RateLimit("register", limit=30, window_seconds=60 * 60)
EMAIL_VERIFICATION_LIMIT = RateLimit("email-verification", limit=10, window_seconds=60)
PASSWORD_RESET_LIMIT = RateLimit("password-reset", limit=10, window_seconds=60)


class RateLimiter:
    """In-memory token buckets keyed by rule and client."""

    # Above this many buckets, idle ones are dropped before adding another
    MAX_BUCKETS = 10_000

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._buckets: dict[tuple[str, str], tuple[float, datetime, RateLimit]] = {}

    def hit(self, rule: RateLimit, client: str) -> int:
        """Spend one request from the client's bucket for ``rule``.

        Returns
        -------
        0 if the request may proceed, otherwise the seconds to wait
        """
        now = self._clock()
        key = (rule.name, client)
        tokens, last, _ = self._buckets.get(key, (float(rule.limit), now, rule))
        elapsed = max(0.0, (now - last).total_seconds())
        tokens = min(float(rule.limit), tokens + elapsed * rule.refill_per_second)

        if tokens < 1:
            self._buckets[key] = (tokens, now, rule)
            return max(1, math.ceil((1 - tokens) / rule.refill_per_second))

        if key not in self._buckets and len(self._buckets) >= self.MAX_BUCKETS:
            self._drop_idle(now)
        self._buckets[key] = (tokens - 1, now, rule)
        return 0

    def _drop_idle(self, now: datetime) -> None:
        # A bucket untouched for a full window has refilled, same as absent
        idle = [
            key
            for key, (_, last, rule) in self._buckets.items()
            if (now - last).total_seconds() >= rule.window_seconds
        ]
        for key in idle:
            del self._buckets[key]


def rate_limited(rule: RateLimit) -> Callable:
    """Build a route dependency enforcing ``rule`` per client IP.

    The limiter is read from ``app.state.rate_limiter``; when it is ``None``
    (disabled in settings) the dependency does nothing.
    """

    async def _enforce(request: Request) -> None:
        limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        if limiter is None:
            return

        client = request.client.host if request.client else "unknown"
        retry_after = limiter.hit(rule, client)
        if retry_after:
            logger.warning(
                "Rate limit %s exceeded by %s on %s",
                rule.name,
                client,
                request.url.path,
            )
            raise CodedHTTPException(
                status.HTTP_429_TOO_MANY_REQUESTS,
                ErrorCode.RATE_LIMITED,
                "Too many requests, please try again later",
                headers={"Retry-After": str(retry_after)},
            )

    return _enforce
