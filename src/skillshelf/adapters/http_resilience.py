"""Async HTTP client shared by the LLM and source-fetching adapters.

Each :class:`ResilientClient` layers, from the outside in: an optional rate limiter,
an optional hishel response cache, and an ``httpx-retries`` transport around the
network (or a test transport).
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import RetryTransport

from skillshelf.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from skillshelf.config.http_resilience import CacheConfig, ResilienceConfig


class ResilientClient:
    """``httpx.AsyncClient`` configured from a :class:`ResilienceConfig`.

    ``transport`` replaces the network transport underneath the retry layer.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        retrying = RetryTransport(transport=transport, retry=config.retry.build())
        self._client = _build_client(config, retrying)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async with AsyncExitStack() as stack:
            if self._limiter is not None:
                await stack.enter_async_context(self._limiter)
            return await self._client.request(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


def _build_client(config: ResilienceConfig, transport: RetryTransport) -> httpx.AsyncClient:
    options: dict[str, Any] = {
        "timeout": config.timeout_seconds,
        "transport": transport,
        "follow_redirects": config.follow_redirects,
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)

    storage = _cache_storage(config.cache)
    if storage is None:
        return httpx.AsyncClient(**options)
    return AsyncCacheClient(**options, storage=storage)


def _cache_storage(cache: CacheConfig | None) -> AsyncSqliteStorage | None:
    if cache is None or not cache.enabled:
        return None
    match cache.backend:
        case "memory":
            database_path = ":memory:"
        case "sqlite":
            database_path = cache.sqlite_path or str(get_storage_config().http_cache_path())
        case other:
            raise ValueError(f"Unsupported cache backend: {other}")
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=cache.default_ttl_seconds,
        refresh_ttl_on_access=cache.refresh_ttl_on_access,
    )
