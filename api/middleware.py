"""Per-client rate limiting."""
import time
from dataclasses import dataclass
from threading import Lock

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from utils.logger import get_logger

logger = get_logger(__name__)

# Clients idle for longer than this are forgotten
CLIENT_IDLE_SECONDS = 180.0
SWEEP_INTERVAL_SECONDS = 60.0


@dataclass
class _Bucket:
    tokens: float
    last_seen: float


class TokenBucketLimiter:
    """
    Token bucket per client key.

    Each bucket refills at ``rps`` tokens per second up to ``burst``. A request
    spends one token; an empty bucket means the request is rejected.
    """

    def __init__(self, rps: float, burst: int, clock=time.monotonic):
        self.rps = rps
        self.burst = burst
        self.clock = clock
        self.buckets: dict[str, _Bucket] = {}
        self.lock = Lock()
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        with self.lock:
            now = self.clock()
            self._sweep(now)

            bucket = self.buckets.get(key)
            if bucket is None:
                bucket = _Bucket(tokens=float(self.burst), last_seen=now)
                self.buckets[key] = bucket
            else:
                elapsed = now - bucket.last_seen
                bucket.tokens = min(float(self.burst), bucket.tokens + elapsed * self.rps)
                bucket.last_seen = now

            if bucket.tokens < 1:
                return False
            bucket.tokens -= 1
            return True

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < SWEEP_INTERVAL_SECONDS:
            return
        self._last_sweep = now
        stale = [key for key, b in self.buckets.items() if now - b.last_seen > CLIENT_IDLE_SECONDS]
        for key in stale:
            del self.buckets[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, rps: float, burst: int, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled
        self.limiter = TokenBucketLimiter(rps, burst)

    async def dispatch(self, request: Request, call_next):
        if self.enabled:
            client = request.client.host if request.client else "unknown"
            if not self.limiter.allow(client):
                logger.debug(f"[RateLimit] Rejected request from {client}")
                return JSONResponse(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    content={"error": "rate limit exceeded"},
                )
        return await call_next(request)
