"""
Runtime settings, read from the environment once at startup.

Public values (safe for the browser):
- SUPABASE_URL / NEXT_PUBLIC_SUPABASE_URL
- SUPABASE_ANON_KEY / NEXT_PUBLIC_SUPABASE_ANON_KEY
- STRIPE_PUBLISHABLE_KEY / NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY

Server-only values:
- STRIPE_SECRET_KEY
- DATABASE_URL / SUPABASE_DB_URL, or DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD
- CRON_SECRET
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote_plus

from pledgeflow.errors import ConfigError


def _first(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        val = (env.get(name) or "").strip()
        if val:
            return val
    return None


def _int(val: Optional[str], default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


def _database_url(env: Mapping[str, str]) -> Optional[str]:
    url = _first(env, "DATABASE_URL", "SUPABASE_DB_URL")
    if url:
        return url
    host = _first(env, "DB_HOST")
    if not host:
        return None
    user = env.get("DB_USER", "postgres")
    pwd = quote_plus(env.get("DB_PASSWORD", ""))
    port = env.get("DB_PORT", "5432")
    name = env.get("DB_NAME", "postgres")
    return f"postgresql://{user}:{pwd}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: Optional[str] = None
    stripe_publishable_key: Optional[str] = None
    stripe_currency: str = "usd"
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    database_url: Optional[str] = None
    cron_secret: Optional[str] = None
    config_debug: bool = False
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 60

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            stripe_secret_key=_first(env, "STRIPE_SECRET_KEY"),
            stripe_publishable_key=_first(
                env, "NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY", "STRIPE_PUBLISHABLE_KEY"
            ),
            stripe_currency=(_first(env, "STRIPE_CURRENCY") or "usd").lower(),
            supabase_url=_first(env, "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_URL"),
            supabase_anon_key=_first(
                env, "NEXT_PUBLIC_SUPABASE_ANON_KEY", "SUPABASE_ANON_KEY"
            ),
            database_url=_database_url(env),
            cron_secret=_first(env, "CRON_SECRET"),
            config_debug=env.get("CONFIG_DEBUG", "0") == "1",
            rate_limit_enabled=env.get("RATE_LIMIT_ENABLED", "1") == "1",
            rate_limit_per_minute=_int(env.get("RATE_LIMIT_PER_MINUTE"), 60),
        )

    def require_stripe(self) -> str:
        if not self.stripe_secret_key:
            raise ConfigError(
                "Stripe is not configured. Please check environment variables."
            )
        return self.stripe_secret_key

    def require_database(self) -> str:
        if not self.database_url:
            raise ConfigError("Missing database configuration")
        return self.database_url

    def missing(self) -> list[str]:
        """Names of unset settings that some endpoint needs."""
        out = []
        if not self.stripe_secret_key:
            out.append("STRIPE_SECRET_KEY")
        if not self.stripe_publishable_key:
            out.append("STRIPE_PUBLISHABLE_KEY")
        if not self.supabase_url:
            out.append("SUPABASE_URL")
        if not self.supabase_anon_key:
            out.append("SUPABASE_ANON_KEY")
        if not self.database_url:
            out.append("DATABASE_URL")
        if not self.cron_secret:
            out.append("CRON_SECRET")
        return out
