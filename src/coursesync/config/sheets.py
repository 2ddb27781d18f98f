"""Google Sheets (Apps Script web app) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

SHEETS_TIMEOUT_SECONDS = 60.0

# Apps Script web apps are throttled per user; stay well below the quota.
SHEETS_RATE_LIMIT = RateLimit(max_calls=5, per_seconds=1.0)


@dataclass(frozen=True, slots=True)
class SheetsConfig:
    """Endpoint of the Apps Script deployment that fronts the content sheet."""

    api_url: str
    resilience: ResilienceConfig


def get_sheets_config(*, resilience: ResilienceConfig | None = None) -> SheetsConfig:
    values = require_env_vars(("SHEETS_API_URL",))
    cache_ttl = optional_env_float("SHEETS_CACHE_TTL")

    cache: CacheConfig | None = None
    if cache_ttl:
        cache = CacheConfig(
            backend="sqlite",
            sqlite_path=str(get_storage_config().http_cache_path()),
            default_ttl_seconds=cache_ttl,
        )

    return SheetsConfig(
        api_url=values["SHEETS_API_URL"],
        resilience=resilience
        or ResilienceConfig(
            name="sheets",
            timeout_seconds=SHEETS_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=SHEETS_RATE_LIMIT,
            cache=cache,
        ),
    )
