"""
Simple in-memory rate limiter.

Enabled and sized through Settings.rate_limit_enabled / rate_limit_per_minute
(RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE).
"""

from __future__ import annotations
import time
from collections import defaultdict
from functools import wraps
from threading import Lock

from flask import current_app, jsonify, request

_lock = Lock()
_counts: dict[str, list[float]] = defaultdict(list)
_window = 60  # seconds


def _clean_old(ts_list: list[float], window: int) -> None:
    cutoff = time.time() - window
    while ts_list and ts_list[0] < cutoff:
        ts_list.pop(0)


def is_rate_limited(key: str, limit: int) -> bool:
    """Return True if the key has exceeded the limit within the window."""
    if limit <= 0:
        return False
    with _lock:
        _clean_old(_counts[key], _window)
        if len(_counts[key]) >= limit:
            return True
        _counts[key].append(time.time())
        return False


def reset() -> None:
    with _lock:
        _counts.clear()


def rate_limit_key() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def rate_limited(key_prefix: str):
    """Rate limit a route per client IP."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            settings = current_app.config["SETTINGS"]
            if not settings.rate_limit_enabled:
                return fn(*args, **kwargs)
            key = f"{key_prefix}:{rate_limit_key()}"
            if is_rate_limited(key, settings.rate_limit_per_minute):
                return jsonify({"error": "rate limit exceeded", "retry_after": 60}), 429
            return fn(*args, **kwargs)

        return wrapper

    return decorator
