"""Configuration for the generative-text API used to merge, analyze and refresh skills."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, optional_env, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_LLM_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_LLM_MODEL = "claude-sonnet-4-20250514"
ANTHROPIC_VERSION = "2023-06-01"


@dataclass(frozen=True, slots=True)
class LlmConfig:
    model: str
    resilience: ResilienceConfig
    merge_max_tokens: int = 8000
    analysis_max_tokens: int = 4000
    refresh_max_tokens: int = 8000
    analysis_temperature: float = 0.2


def get_llm_config() -> LlmConfig:
    values = require_env_vars(("SKILLSHELF_LLM_API_KEY",))
    api_key = values["SKILLSHELF_LLM_API_KEY"]
    base_url = optional_env("SKILLSHELF_LLM_BASE_URL", DEFAULT_LLM_BASE_URL)
    model = optional_env("SKILLSHELF_LLM_MODEL", DEFAULT_LLM_MODEL)

    resilience = ResilienceConfig(
        name="llm",
        base_url=base_url,
        timeout_seconds=env_float("SKILLSHELF_LLM_TIMEOUT", 120.0),
        ratelimit=RateLimit(max_calls=env_int("SKILLSHELF_LLM_RATE_LIMIT", 5), per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=None,
        default_headers={
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        },
    )
    return LlmConfig(model=model or DEFAULT_LLM_MODEL, resilience=resilience)
