"""Explicit, immutable state of the library screen.

Every transition returns a new :class:`LibraryState`; nothing here talks to a store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from skillshelf.domain.bulk import BulkResult
    from skillshelf.domain.consolidation import ConsolidationResult, MergeDraft
    from skillshelf.domain.model import Skill
    from skillshelf.domain.ports.collaborators import LibraryAnalysis, LibraryRecommendation


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalysisPanel:
    recommendations: tuple[LibraryRecommendation, ...] = ()
    dismissed: frozenset[str] = frozenset()
    summary: str | None = None
    health_score: int | None = None
    error: str | None = None

    @property
    def visible(self) -> tuple[LibraryRecommendation, ...]:
        return tuple(rec for rec in self.recommendations if rec.id not in self.dismissed)


@dataclass(frozen=True, slots=True, kw_only=True)
class LibraryState:
    skills: tuple[Skill, ...] = ()
    selected_ids: frozenset[UUID] = frozenset()
    analysis: AnalysisPanel = field(default_factory=AnalysisPanel)
    pending_merge: MergeDraft | None = None
    message: str | None = None

    @classmethod
    def of(cls, skills: Iterable[Skill]) -> LibraryState:
        return cls(skills=tuple(skills))

    def get(self, skill_id: UUID) -> Skill | None:
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        return None

    # selection -----------------------------------------------------------------

    @property
    def selected_skills(self) -> list[Skill]:
        return [skill for skill in self.skills if skill.id in self.selected_ids]

    def toggle_selection(self, skill_id: UUID) -> LibraryState:
        if skill_id in self.selected_ids:
            return replace(self, selected_ids=self.selected_ids - {skill_id})
        if self.get(skill_id) is None:
            return self
        return replace(self, selected_ids=self.selected_ids | {skill_id})

    def select_all(self) -> LibraryState:
        return replace(self, selected_ids=frozenset(skill.id for skill in self.skills))

    def clear_selection(self) -> LibraryState:
        return replace(self, selected_ids=frozenset())

    # analysis ------------------------------------------------------------------

    def with_analysis(self, analysis: LibraryAnalysis) -> LibraryState:
        panel = AnalysisPanel(
            recommendations=analysis.recommendations,
            summary=analysis.summary,
            health_score=analysis.health_score,
        )
        return replace(self, analysis=panel)

    def with_analysis_error(self, error: str) -> LibraryState:
        return replace(self, analysis=replace(self.analysis, error=error))

    def dismiss_recommendation(self, recommendation_id: str) -> LibraryState:
        dismissed = self.analysis.dismissed | {recommendation_id}
        return replace(self, analysis=replace(self.analysis, dismissed=dismissed))

    @property
    def visible_recommendations(self) -> tuple[LibraryRecommendation, ...]:
        return self.analysis.visible

    # merging -------------------------------------------------------------------

    def with_pending_merge(self, draft: MergeDraft) -> LibraryState:
        return replace(self, pending_merge=draft)

    def discard_pending_merge(self) -> LibraryState:
        return replace(self, pending_merge=None)

    def apply_consolidation(self, result: ConsolidationResult) -> LibraryState:
        """Swap in the merged target, drop deleted losers and resolve the recommendation."""

        deleted = set(result.deleted_ids)
        skills = tuple(
            result.target if skill.id == result.target.id else skill
            for skill in self.skills
            if skill.id not in deleted
        )
        state = replace(
            self,
            skills=skills,
            selected_ids=self.selected_ids - deleted,
            pending_merge=None,
            message=_consolidation_message(result),
        )
        if result.recommendation_id is not None:
            state = state.dismiss_recommendation(result.recommendation_id)
        return state

    # bulk ----------------------------------------------------------------------

    def apply_bulk_result(self, result: BulkResult) -> LibraryState:
        state = self
        for skill in result.updated:
            state = state.replace_skill(skill)
        return replace(state, message=result.summary())

    def replace_skill(self, updated: Skill) -> LibraryState:
        skills = tuple(updated if skill.id == updated.id else skill for skill in self.skills)
        return replace(self, skills=skills)


def _consolidation_message(result: ConsolidationResult) -> str:
    message = f"Merged {len(result.deleted_ids)} skill(s) into {result.target.title!r}"
    if result.failed_deletions:
        titles = ", ".join(failure.title for failure in result.failed_deletions)
        message += f"; could not delete: {titles}"
    return message
