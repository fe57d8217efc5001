"""
Per‑client request rate limiting.

``RateLimiter`` keeps, per key, the timestamps of the requests made in
the last window and rejects a request once the window is full.  The
state lives in process memory, so every worker process counts on its
own.

``enforce_rate_limit`` is installed as a router dependency: it keys
authenticated requests by user id and anonymous ones by client IP,
and runs before authentication and handler logic.
"""

import logging
import math
import threading
import time
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials

from .config import settings
from .errors import RateLimitError
from .security import resolve_token, security

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding window limiter: at most ``limit`` hits per ``window`` seconds per key.

    Keys whose hits have all left the window are dropped, at most once
    per window, so idle clients do not accumulate.
    """

    def __init__(self, limit: int, window: float = 60.0) -> None:
        self.limit = limit
        self.window = window
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int, int]:
        """Record a request for ``key``.

        Returns ``(allowed, remaining, retry_after)`` where
        ``retry_after`` is the number of seconds until the oldest hit
        leaves the window (0 when allowed).  Rejected requests are not
        recorded.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep >= self.window:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self.window:
                hits.popleft()
            if len(hits) >= self.limit:
                retry_after = max(1, math.ceil(hits[0] + self.window - now))
                return False, 0, retry_after
            hits.append(now)
            return True, self.limit - len(hits), 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = None


rate_limiter = RateLimiter(settings.rate_limit_per_minute)


def enforce_rate_limit(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """Router dependency raising ``RateLimitError`` (HTTP 429) when the client is over its limit."""
    if rate_limiter.limit <= 0:
        return
    actor = resolve_token(credentials.credentials, touch=False) if credentials else None
    if actor is not None:
        key = f"user:{actor.id}"
    else:
        key = f"ip:{request.client.host if request.client else 'unknown'}"
    allowed, remaining, retry_after = rate_limiter.hit(key)
    if not allowed:
        logger.warning("Rate limit exceeded for %s on %s %s", key, request.method, request.url.path)
        raise RateLimitError(retry_after=retry_after, limit=rate_limiter.limit)
    response.headers["X-RateLimit-Limit"] = str(rate_limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
