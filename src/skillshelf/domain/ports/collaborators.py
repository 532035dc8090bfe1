"""Ports for the external text-generation collaborators and their payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from skillshelf.domain.model import RecommendationPriority, RecommendationType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from skillshelf.domain.model import Skill, Tag
    from skillshelf.domain.results import Outcome


@dataclass(frozen=True, slots=True)
class SkillText:
    title: str
    content: str

    @classmethod
    def of(cls, skill: Skill) -> SkillText:
        return cls(title=skill.title, content=skill.content)


@dataclass(frozen=True, slots=True)
class MergeSummary:
    content: str
    title: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceRefresh:
    """Proposed update produced from a skill's source URLs."""

    has_changes: bool
    summary: str = ""
    title: str | None = None
    content: str | None = None
    tags: tuple[Tag, ...] = ()
    change_highlights: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SkillSummary:
    """What the analysis collaborator gets to see of a skill."""

    id: UUID
    title: str
    tags: tuple[Tag, ...]
    content_preview: str


@dataclass(frozen=True, slots=True, kw_only=True)
class LibraryRecommendation:
    id: str
    type: RecommendationType = RecommendationType.MERGE
    priority: RecommendationPriority = RecommendationPriority.MEDIUM
    title: str = "Unnamed recommendation"
    description: str = ""
    affected_skill_ids: tuple[UUID, ...] = ()
    affected_skill_titles: tuple[str, ...] = ()
    suggested_action: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalysisTransparency:
    """The exact request sent for an analysis, for display to the operator."""

    system_prompt: str
    user_prompt: str
    model: str
    max_tokens: int
    temperature: float
    skill_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class LibraryAnalysis:
    recommendations: tuple[LibraryRecommendation, ...] = ()
    summary: str = "Analysis complete."
    health_score: int = 75
    transparency: AnalysisTransparency | None = None


@runtime_checkable
class Summarizer(Protocol):
    """Merges the content of several skills into one body of text."""

    def __call__(
        self,
        target: SkillText,
        losers: Sequence[SkillText],
    ) -> Outcome[MergeSummary]: ...


@runtime_checkable
class SourceRefresher(Protocol):
    """Re-reads a skill's source URLs and proposes updated content."""

    def __call__(self, skill: Skill) -> Outcome[SourceRefresh]: ...


@runtime_checkable
class LibraryAnalyzer(Protocol):
    """Looks across the library for redundancy, gaps and naming problems."""

    def __call__(self, summaries: Sequence[SkillSummary]) -> Outcome[LibraryAnalysis]: ...
