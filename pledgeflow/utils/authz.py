import hmac
from functools import wraps

from flask import current_app, request

from pledgeflow.errors import Unauthorized


def bearer_matches(header: str | None, secret: str | None) -> bool:
    if not secret or not header:
        return False
    return hmac.compare_digest(header.encode(), f"Bearer {secret}".encode())


def require_cron_secret(fn):
    """Reject the request unless `Authorization: Bearer <CRON_SECRET>` matches."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        settings = current_app.config["SETTINGS"]
        if not bearer_matches(request.headers.get("Authorization"), settings.cron_secret):
            raise Unauthorized("Unauthorized")
        return fn(*args, **kwargs)

    return wrapper
