"""Messages API client."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from skillshelf.adapters.http_resilience import ResilientClient

from .schema import MessageResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from skillshelf.config.http_resilience import ResilienceConfig
    from skillshelf.config.llm import LlmConfig

log = getLogger(__name__)


class LlmAPIError(RuntimeError):
    """Raised when the messages API returns an unexpected response."""


@dataclass(frozen=True, slots=True)
class Completion:
    system: str
    prompt: str
    max_tokens: int
    temperature: float | None = None


class LlmClient:
    """Low-level HTTP client for a messages-style text generation API."""

    def __init__(
        self,
        *,
        config: LlmConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    @property
    def model(self) -> str:
        return self._config.model

    def complete(self, request: Completion) -> str:
        """Return the first text block of the model's reply."""
        return asyncio.run(self._complete_async(request))

    async def _complete_async(self, request: Completion) -> str:
        if self._resilience.base_url is None:
            raise LlmAPIError("Missing LLM base_url in resilience configuration")
        payload: dict[str, object] = {
            "model": self._config.model,
            "max_tokens": request.max_tokens,
            "system": request.system,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        async with self._client_factory(self._resilience) as client:
            response = await client.post("messages", json=payload)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise LlmAPIError("Unexpected messages API response payload")
        message = MessageResponse.model_validate(data)
        text = message.first_text()
        if text is None:
            raise LlmAPIError("Messages API response contained no text")
        if message.usage is not None:
            log.debug(
                "LLM usage: input=%s output=%s",
                message.usage.input_tokens,
                message.usage.output_tokens,
            )
        return text
