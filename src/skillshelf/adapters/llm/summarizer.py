"""Summarizer backed by the messages API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from skillshelf.domain.ports.collaborators import MergeSummary
from skillshelf.domain.results import Failed, Ok

from .client import Completion, LlmAPIError
from .prompts import MERGE_SYSTEM_PROMPT, merge_prompt
from .schema import LlmPayloadError, MergePayload, extract_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skillshelf.domain.ports.collaborators import SkillText
    from skillshelf.domain.results import Outcome

    from .client import LlmClient

log = getLogger(__name__)


class LlmSummarizer:
    def __init__(self, client: LlmClient, *, max_tokens: int = 8000) -> None:
        self._client = client
        self._max_tokens = max_tokens

    def __call__(self, target: SkillText, losers: Sequence[SkillText]) -> Outcome[MergeSummary]:
        request = Completion(
            system=MERGE_SYSTEM_PROMPT,
            prompt=merge_prompt(target, losers),
            max_tokens=self._max_tokens,
        )
        try:
            text = self._client.complete(request)
            payload = MergePayload.model_validate(extract_json(text))
        except (httpx.HTTPError, LlmAPIError, LlmPayloadError, ValidationError) as exc:
            log.warning("Merge summarization failed: %s", exc)
            return Failed(str(exc))
        return Ok(MergeSummary(content=payload.content, title=payload.title or None))
