"""Library analyzer backed by the messages API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from skillshelf.domain.ports.collaborators import (
    AnalysisTransparency,
    LibraryAnalysis,
    LibraryRecommendation,
)
from skillshelf.domain.results import Failed, Ok

from .client import Completion, LlmAPIError
from .prompts import ANALYSIS_SYSTEM_PROMPT, analysis_prompt
from .schema import AnalysisPayload, LlmPayloadError, RecommendationPayload, extract_json

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from skillshelf.domain.ports.collaborators import SkillSummary
    from skillshelf.domain.results import Outcome

    from .client import LlmClient

log = getLogger(__name__)

MAX_RECOMMENDATIONS = 10


class LlmLibraryAnalyzer:
    def __init__(
        self,
        client: LlmClient,
        *,
        max_tokens: int = 4000,
        temperature: float = 0.2,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens
        self._temperature = temperature

    def __call__(self, summaries: Sequence[SkillSummary]) -> Outcome[LibraryAnalysis]:
        request = Completion(
            system=ANALYSIS_SYSTEM_PROMPT,
            prompt=analysis_prompt(summaries),
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        try:
            text = self._client.complete(request)
            payload = AnalysisPayload.model_validate(extract_json(text))
        except (httpx.HTTPError, LlmAPIError, LlmPayloadError, ValidationError) as exc:
            log.warning("Library analysis failed: %s", exc)
            return Failed(str(exc))

        known_ids = {str(summary.id): summary.id for summary in summaries}
        recommendations = tuple(
            _recommendation(index, item, known_ids)
            for index, item in enumerate(payload.recommendations[:MAX_RECOMMENDATIONS])
        )
        transparency = AnalysisTransparency(
            system_prompt=request.system,
            user_prompt=request.prompt,
            model=self._client.model,
            max_tokens=request.max_tokens,
            temperature=self._temperature,
            skill_count=len(summaries),
        )
        return Ok(
            LibraryAnalysis(
                recommendations=recommendations,
                summary=payload.summary,
                health_score=payload.health_score,
                transparency=transparency,
            )
        )


def _recommendation(
    index: int,
    item: RecommendationPayload,
    known_ids: dict[str, UUID],
) -> LibraryRecommendation:
    affected: list[UUID] = []
    for raw in item.affected_skill_ids:
        skill_id = known_ids.get(raw)
        if skill_id is None:
            log.debug("Ignoring unknown skill id in recommendation: %s", raw)
            continue
        affected.append(skill_id)
    return LibraryRecommendation(
        id=item.id or f"rec-{index + 1}",
        type=item.type,
        priority=item.priority,
        title=item.title,
        description=item.description,
        affected_skill_ids=tuple(affected),
        affected_skill_titles=tuple(item.affected_skill_titles),
        suggested_action=item.suggested_action,
    )
