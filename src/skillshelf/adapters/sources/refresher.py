"""Source refresher: fetch a skill's sources and let the model propose an update."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from skillshelf.adapters.llm.client import Completion, LlmAPIError
from skillshelf.adapters.llm.prompts import REFRESH_SYSTEM_PROMPT, refresh_prompt
from skillshelf.adapters.llm.schema import LlmPayloadError, RefreshPayload, extract_json
from skillshelf.domain.ports.collaborators import SourceRefresh
from skillshelf.domain.results import Failed, Ok

if TYPE_CHECKING:
    from skillshelf.adapters.llm.client import LlmClient
    from skillshelf.domain.model import Skill
    from skillshelf.domain.results import Outcome

    from .fetcher import SourceFetcher

log = getLogger(__name__)


class LlmSourceRefresher:
    def __init__(
        self,
        *,
        fetcher: SourceFetcher,
        client: LlmClient,
        max_tokens: int = 8000,
    ) -> None:
        self._fetcher = fetcher
        self._client = client
        self._max_tokens = max_tokens

    def __call__(self, skill: Skill) -> Outcome[SourceRefresh]:
        urls = [source.url for source in skill.source_urls]
        if not urls:
            return Failed("Skill has no source URLs")
        fetched = self._fetcher.fetch_many(urls)
        if not fetched:
            return Failed("Could not fetch any source URLs")

        request = Completion(
            system=REFRESH_SYSTEM_PROMPT,
            prompt=refresh_prompt(skill, [(source.url, source.text) for source in fetched]),
            max_tokens=self._max_tokens,
        )
        try:
            text = self._client.complete(request)
            payload = RefreshPayload.model_validate(extract_json(text))
        except (httpx.HTTPError, LlmAPIError, LlmPayloadError, ValidationError) as exc:
            log.warning("Refresh of %s failed: %s", skill.id, exc)
            return Failed(str(exc))

        if payload.has_changes and not (payload.content or "").strip():
            return Failed("Refresh reported changes but returned no content")
        log.info(
            "Refreshed %s from %s/%s source(s): has_changes=%s",
            skill.id,
            len(fetched),
            len(urls),
            payload.has_changes,
        )
        return Ok(
            SourceRefresh(
                has_changes=payload.has_changes,
                summary=payload.summary,
                title=payload.title or None,
                content=payload.content,
                tags=tuple(payload.tags),
                change_highlights=tuple(payload.change_highlights),
            )
        )
