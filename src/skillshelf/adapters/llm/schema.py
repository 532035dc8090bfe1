"""Response schemas for the messages API and the JSON payloads we ask the model for."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillshelf.domain.model import RecommendationPriority, RecommendationType

log = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


class LlmPayloadError(ValueError):
    """Raised when the model's text is not the JSON document we asked for."""


class LlmBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "LLM %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


# messages API ------------------------------------------------------------------


class ContentBlock(LlmBaseModel):
    type: str
    text: str | None = None


class Usage(LlmBaseModel):
    input_tokens: int | None = None
    output_tokens: int | None = None


class MessageResponse(LlmBaseModel):
    id: str | None = None
    model: str | None = None
    role: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    stop_reason: str | None = None
    usage: Usage | None = None

    def first_text(self) -> str | None:
        for block in self.content:
            if block.type == "text" and block.text:
                return block.text
        return None


# structured payloads -------------------------------------------------------------


class MergePayload(LlmBaseModel):
    title: str | None = None
    content: str


class RecommendationPayload(LlmBaseModel):
    id: str | None = None
    type: RecommendationType = RecommendationType.MERGE
    priority: RecommendationPriority = RecommendationPriority.MEDIUM
    title: str = "Unnamed recommendation"
    description: str = ""
    affected_skill_ids: list[str] = Field(default_factory=list, alias="affectedSkillIds")
    affected_skill_titles: list[str] = Field(default_factory=list, alias="affectedSkillTitles")
    suggested_action: str | None = Field(default=None, alias="suggestedAction")

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> Any:
        if value not in {member.value for member in RecommendationType}:
            return RecommendationType.MERGE
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, value: Any) -> Any:
        if value not in {member.value for member in RecommendationPriority}:
            return RecommendationPriority.MEDIUM
        return value

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_default(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            return "Unnamed recommendation"
        return value


class AnalysisPayload(LlmBaseModel):
    recommendations: list[RecommendationPayload] = Field(default_factory=list)
    summary: str = "Analysis complete."
    health_score: int = Field(default=75, alias="healthScore")

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_or_default(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            return "Analysis complete."
        return value

    @field_validator("health_score", mode="before")
    @classmethod
    def _clamp_health(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 75
        return max(0, min(100, round(value)))


class RefreshPayload(LlmBaseModel):
    has_changes: bool = Field(default=False, alias="hasChanges")
    summary: str = ""
    title: str | None = None
    content: str | None = None
    tags: list[str] = Field(default_factory=list)
    change_highlights: list[str] = Field(default_factory=list, alias="changeHighlights")


def extract_json(text: str) -> dict[str, Any]:
    """Parse the JSON object in ``text``, tolerating a surrounding markdown code fence."""

    match = _FENCE.search(text)
    candidate = match.group(1) if match else text.strip()
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise LlmPayloadError(f"Model response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise LlmPayloadError("Model response is not a JSON object")
    return payload
