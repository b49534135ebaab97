"""
Fixed-window rate limiting for form submissions.

Configure via RATE_LIMIT_ENABLED (default: 1), RATE_LIMIT_BACKEND ("memory" or
"redis"), RATE_LIMIT_MAX_PER_WINDOW (default: 5) and
RATE_LIMIT_WINDOW_SECONDS (default: 3600).

The in-memory limiter is process-local and is lost on restart. Use the redis
backend when several workers must share counts.
"""

from __future__ import annotations
import logging
import math
import time
from dataclasses import dataclass
from functools import wraps
from threading import Lock
from typing import Callable, Mapping

from flask import current_app, jsonify, request
from redis import RedisError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PER_WINDOW = 5
DEFAULT_WINDOW_SECONDS = 60 * 60
DEFAULT_SWEEP_SECONDS = 10 * 60
UNKNOWN_CLIENT = "unknown"


@dataclass(frozen=True)
class RateLimitDecision:
    is_limited: bool
    remaining: int
    reset_in: float  # seconds until the window closes


@dataclass
class RateLimitEntry:
    count: int
    window_start: float


class RateLimiter:
    """In-memory fixed-window counter keyed by client identifier."""

    def __init__(
        self,
        max_per_window: int = DEFAULT_MAX_PER_WINDOW,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        sweep_seconds: float = DEFAULT_SWEEP_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_per_window = max_per_window
        self.window_seconds = window_seconds
        self.sweep_seconds = sweep_seconds
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[str, RateLimitEntry] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: RateLimitEntry, now: float) -> bool:
        return now - entry.window_start > self.window_seconds

    def check(self, key: str) -> RateLimitDecision:
        """Count one submission attempt for key and decide whether to reject it."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.sweep_seconds:
                self._sweep_locked(now)

            entry = self._entries.get(key)
            if entry is None or self._expired(entry, now):
                self._entries[key] = RateLimitEntry(count=1, window_start=now)
                return RateLimitDecision(
                    is_limited=False,
                    remaining=self.max_per_window - 1,
                    reset_in=self.window_seconds,
                )

            # every attempt counts, including rejected ones
            entry.count += 1
            reset_in = self.window_seconds - (now - entry.window_start)
            return RateLimitDecision(
                is_limited=entry.count > self.max_per_window,
                remaining=max(0, self.max_per_window - entry.count),
                reset_in=reset_in,
            )

    def sweep(self) -> int:
        """Drop entries whose window has elapsed. Returns how many were removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        stale = [k for k, e in self._entries.items() if self._expired(e, now)]
        for k in stale:
            del self._entries[k]
        self._last_sweep = now
        return len(stale)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisRateLimiter:
    """Fixed-window counter stored in Redis, shared by every worker."""

    def __init__(
        self,
        client,
        max_per_window: int = DEFAULT_MAX_PER_WINDOW,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        prefix: str = "intake:ratelimit:",
    ):
        self.client = client
        self.max_per_window = max_per_window
        self.window_seconds = int(window_seconds)
        self.prefix = prefix

    def check(self, key: str) -> RateLimitDecision:
        rkey = f"{self.prefix}{key}"
        try:
            pipe = self.client.pipeline()
            pipe.incr(rkey)
            pipe.ttl(rkey)
            count, ttl = pipe.execute()
            count = int(count)
            if count == 1 or ttl is None or int(ttl) < 0:
                self.client.expire(rkey, self.window_seconds)
                ttl = self.window_seconds
        except RedisError as e:
            # store down: let the submission through rather than fail it
            logger.warning("[rate limit] redis unavailable, allowing client=%s: %s", key, e)
            return RateLimitDecision(
                is_limited=False,
                remaining=self.max_per_window,
                reset_in=float(self.window_seconds),
            )
        return RateLimitDecision(
            is_limited=count > self.max_per_window,
            remaining=max(0, self.max_per_window - count),
            reset_in=float(ttl),
        )


def build_rate_limiter(config: Mapping):
    """Create the limiter named by RATE_LIMIT_BACKEND."""
    max_per_window = int(config.get("RATE_LIMIT_MAX_PER_WINDOW", DEFAULT_MAX_PER_WINDOW))
    window = int(config.get("RATE_LIMIT_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS))
    backend = str(config.get("RATE_LIMIT_BACKEND", "memory")).lower()
    if backend == "redis":
        from intake.utils.cache import r

        return RedisRateLimiter(
            r(config.get("REDIS_URL")),
            max_per_window=max_per_window,
            window_seconds=window,
        )
    if backend != "memory":
        raise ValueError(f"Unknown RATE_LIMIT_BACKEND: {backend}")
    return RateLimiter(
        max_per_window=max_per_window,
        window_seconds=window,
        sweep_seconds=int(config.get("RATE_LIMIT_SWEEP_SECONDS", DEFAULT_SWEEP_SECONDS)),
    )


def client_ip(headers) -> str:
    """Client identifier from proxy headers; "unknown" when none is present."""
    forwarded = headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip() or UNKNOWN_CLIENT
    real_ip = headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    cf_ip = headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()
    return UNKNOWN_CLIENT


def rate_limit_exceeded_response(decision: RateLimitDecision):
    """Return 429 response."""
    retry_after = max(1, math.ceil(decision.reset_in))
    resp = jsonify(
        {
            "error": "Too many submissions. Please try again later.",
            "retry_after": retry_after,
        }
    )
    resp.headers["Retry-After"] = str(retry_after)
    return resp, 429


def limit_submissions(fn):
    """Reject the request with 429 before the handler runs when the client is over its limit."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("RATE_LIMIT_ENABLED", True):
            return fn(*args, **kwargs)
        limiter = current_app.extensions["rate_limiter"]
        key = client_ip(request.headers)
        decision = limiter.check(key)
        if decision.is_limited:
            logger.warning(
                "[rate limit] rejected client=%s reset_in=%.0fs", key, decision.reset_in
            )
            return rate_limit_exceeded_response(decision)
        return fn(*args, **kwargs)

    return wrapper
