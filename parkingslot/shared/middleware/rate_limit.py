# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import Request, request

from parkingslot.shared.config import load_config
from parkingslot.shared.errors import RateLimitedError
from parkingslot.shared.logging import logger


class InMemoryRateLimiter:
    """Sliding-window limiter: at most ``limit`` hits per key within ``window_seconds``."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: dict[str, deque[float]] = {}

    def _expire(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] > self._window:
            hits.popleft()

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque(maxlen=self._limit))
            self._expire(hits, now)
            if len(hits) >= self._limit:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until ``key`` may be allowed again, 0 when it already may."""
        now = self._clock()
        with self._lock:
            hits = self._hits.get(key)
            if not hits:
                return 0.0
            self._expire(hits, now)
            if len(hits) < self._limit:
                return 0.0
            return max(0.0, self._window - (now - hits[0]))


def _client_key(req: Request) -> str:
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or (req.remote_addr or "unknown")


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Limit a view per client IP and path.

    Settings are read when the decorator is applied, so ``ENABLE_RATE_LIMIT``
    must be set before the controller modules are imported.
    """
    security = load_config().security
    limiter = InMemoryRateLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(f: Callable):
        if not security.enable_rate_limit:
            return f

        @wraps(f)
        def wrapper(*args, **kwargs):
            key = f"{request.path}:{_client_key(request)}"
            if not limiter.allow(key):
                wait = limiter.retry_after(key)
                logger.warning(f"rate_limit: rejected {request.method} {request.path} retry_after={wait:.1f}s")
                raise RateLimitedError(retry_after=wait)
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
