"""Library analysis: find redundant skills and turn merge advice into merge candidates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skillshelf.domain.consolidation import MergeValidationError
from skillshelf.domain.consolidation.merge import MIN_MERGE_SIZE
from skillshelf.domain.model import RecommendationType
from skillshelf.domain.ports.collaborators import LibraryAnalysis, SkillSummary
from skillshelf.domain.results import Failed, Ok

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skillshelf.domain.model import Skill
    from skillshelf.domain.ports.collaborators import LibraryAnalyzer, LibraryRecommendation
    from skillshelf.domain.results import Outcome

log = logging.getLogger(__name__)

PREVIEW_LENGTH = 500
MAX_RECOMMENDATIONS = 10

EMPTY_LIBRARY_SUMMARY = "No skills to analyze. Add some skills to your knowledge library first."
SINGLE_SKILL_SUMMARY = (
    "Only one skill in the library. Add more skills to enable redundancy analysis."
)


def analysis_request(skills: Sequence[Skill]) -> list[SkillSummary]:
    return [
        SkillSummary(
            id=skill.id,
            title=skill.title,
            tags=skill.tags,
            content_preview=skill.content[:PREVIEW_LENGTH],
        )
        for skill in skills
    ]


def analyze_library(skills: Sequence[Skill], analyzer: LibraryAnalyzer) -> Outcome[LibraryAnalysis]:
    """Analyze the library; libraries with fewer than two skills are never sent out."""

    if not skills:
        return Ok(LibraryAnalysis(summary=EMPTY_LIBRARY_SUMMARY, health_score=100))
    if len(skills) == 1:
        return Ok(LibraryAnalysis(summary=SINGLE_SKILL_SUMMARY, health_score=100))

    try:
        outcome = analyzer(analysis_request(skills))
    except Exception as exc:  # noqa: BLE001
        log.exception("Library analysis failed")
        return Failed(str(exc) or type(exc).__name__)

    if isinstance(outcome, Ok) and len(outcome.value.recommendations) > MAX_RECOMMENDATIONS:
        analysis = outcome.value
        return Ok(
            LibraryAnalysis(
                recommendations=analysis.recommendations[:MAX_RECOMMENDATIONS],
                summary=analysis.summary,
                health_score=analysis.health_score,
                transparency=analysis.transparency,
            )
        )
    return outcome


def merge_candidates(
    recommendation: LibraryRecommendation,
    skills: Sequence[Skill],
) -> list[Skill]:
    """Resolve a ``merge`` recommendation to the skills it names, in recommendation order.

    Ids no longer present in ``skills`` are dropped; fewer than two survivors is an error.
    """

    if recommendation.type is not RecommendationType.MERGE:
        raise MergeValidationError(f"Not a merge recommendation: {recommendation.type}")
    by_id = {skill.id: skill for skill in skills}
    wanted = dict.fromkeys(recommendation.affected_skill_ids)
    found = [by_id[skill_id] for skill_id in wanted if skill_id in by_id]
    if len(found) < MIN_MERGE_SIZE:
        raise MergeValidationError("Need at least 2 skills to merge")
    return found
