import math
import threading
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Dict, List

from flask import current_app, make_response, request
from flask_jwt_extended import get_jwt_identity

from tasktrack.errors import RateLimitError

RATE_LIMIT_WINDOW = 60  # seconds


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int = 0


class RateLimiter:
    """In-process sliding-window counter, one hit log per client key."""

    def __init__(self, window: int = RATE_LIMIT_WINDOW, clock: Callable[[], float] = time.monotonic):
        self.window = window
        self.clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self):
        return len(self._hits)

    def hit(self, key: str, limit: int) -> RateLimitResult:
        now = self.clock()
        window_start = now - self.window

        with self._lock:
            if now - self._last_sweep >= self.window:
                self._sweep(window_start)
                self._last_sweep = now

            # Clean old entries
            hits = [t for t in self._hits.pop(key, []) if t > window_start]

            if len(hits) >= limit:
                self._hits[key] = hits
                retry_after = max(1, math.ceil(hits[0] + self.window - now))
                return RateLimitResult(False, limit, 0, retry_after)

            hits.append(now)
            self._hits[key] = hits
            return RateLimitResult(True, limit, limit - len(hits))

    def _sweep(self, window_start: float):
        # drop keys whose newest hit has left the window; caller holds the lock
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._hits[key]

    def reset(self, key: str):
        with self._lock:
            self._hits.pop(key, None)


def client_ip() -> str:
    return request.remote_addr or "unknown"


def user_or_ip() -> str:
    # jwt_required() must already have run for the identity to be available
    identity = get_jwt_identity()
    return f"user:{identity}" if identity else f"ip:{client_ip()}"


def rate_limited(scope: str, key_func: Callable[[], str] = client_ip):
    """Limit a view to ``RATELIMIT_<SCOPE>`` requests per minute per key."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_app.config.get("RATELIMIT_ENABLED", True):
                return fn(*args, **kwargs)

            limit = current_app.config[f"RATELIMIT_{scope.upper()}"]
            key = f"{scope}:{key_func()}"
            result = current_app.extensions["rate_limiter"].hit(key, limit)
            if not result.allowed:
                current_app.logger.warning("Rate limit exceeded for %s", key)
                raise RateLimitError(limit, result.retry_after)

            response = make_response(fn(*args, **kwargs))
            response.headers["X-RateLimit-Limit"] = str(result.limit)
            response.headers["X-RateLimit-Remaining"] = str(result.remaining)
            return response

        return wrapper

    return decorator
