"""Configuration for fetching skill source URLs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_MAX_SOURCE_CHARS = 50_000
USER_AGENT = "skillshelf-source-fetcher/1.0"


@dataclass(frozen=True, slots=True)
class SourceFetchConfig:
    resilience: ResilienceConfig
    max_chars: int = DEFAULT_MAX_SOURCE_CHARS


def get_source_fetch_config() -> SourceFetchConfig:
    resilience = ResilienceConfig(
        name="sources",
        timeout_seconds=env_float("SKILLSHELF_SOURCE_TIMEOUT", 30.0),
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        retry=RetryPolicy(total=2),
        cache=CacheConfig(enabled=True, backend="memory", default_ttl_seconds=3600.0),
        default_headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )
    return SourceFetchConfig(
        resilience=resilience,
        max_chars=env_int("SKILLSHELF_SOURCE_MAX_CHARS", DEFAULT_MAX_SOURCE_CHARS),
    )
