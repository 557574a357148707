"""Per-client request throttling."""

import threading
import time
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from roster.config import Settings, get_settings


class RateLimiter:
    """Fixed-window request counter keyed by client.

    Windows that have run out are swept at most once per window length, so
    clients that stop sending do not keep an entry forever.
    """

    def __init__(self) -> None:
        self._hits: dict[str, tuple[int, float]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Count a request; return False once the key is over its limit."""
        now = time.monotonic()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
                self._next_sweep = now + window_seconds
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
            return count <= limit

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, reset) in self._hits.items() if reset < now]
        for key in expired:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._next_sweep = 0.0

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)


limiter = RateLimiter()


def client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """Best guess at the caller's address.

    X-Forwarded-For is set by the client unless a proxy rewrites it, so it
    is only used when trust_forwarded_for is enabled.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Dependency that rejects clients exceeding the configured rate."""
    if settings.rate_limit_requests == 0:
        return
    allowed = limiter.hit(
        client_ip(request, settings.rate_limit_trust_forwarded_for),
        settings.rate_limit_requests,
        settings.rate_limit_window_seconds,
    )
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, try again later",
        )
