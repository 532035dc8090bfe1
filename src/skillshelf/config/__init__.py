"""Application configuration helpers."""

from __future__ import annotations

from .actor import get_actor_config
from .env import optional_env, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .llm import LlmConfig, get_llm_config
from .logging import configure_logging
from .sources import SourceFetchConfig, get_source_fetch_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "LlmConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SourceFetchConfig",
    "StorageConfig",
    "configure_logging",
    "get_actor_config",
    "get_database_config",
    "get_llm_config",
    "get_source_fetch_config",
    "get_storage_config",
    "optional_env",
    "require_env_vars",
]
