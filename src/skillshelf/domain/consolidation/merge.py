"""Provenance merger: target selection, provenance union and merged content."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skillshelf.domain.identity import merge_owners, merge_source_urls, merge_tags
from skillshelf.domain.model import DraftStatus
from skillshelf.domain.ports.collaborators import SkillText
from skillshelf.domain.results import Degraded, Failed, Ok

from .draft import MergeDraft, MergedProvenance, MergeValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skillshelf.domain.model import Skill
    from skillshelf.domain.ports.collaborators import MergeSummary, Summarizer
    from skillshelf.domain.results import Outcome

log = logging.getLogger(__name__)

MIN_MERGE_SIZE = 2
FALLBACK_WARNING = "AI merge failed, showing concatenated content. ({reason})"


def select_merge_target(skills: Sequence[Skill]) -> tuple[Skill, list[Skill]]:
    """Pick the skill with the longest content as target; earlier input wins ties.

    Returns ``(target, losers)`` with losers in input order.
    """

    if len(skills) < MIN_MERGE_SIZE:
        raise MergeValidationError("Need at least 2 skills to merge")
    if len({skill.id for skill in skills}) != len(skills):
        raise MergeValidationError("Cannot merge a skill with itself")
    # sorted() is stable, so equal lengths keep input order
    ranked = sorted(skills, key=lambda skill: len(skill.content), reverse=True)
    target = ranked[0]
    losers = [skill for skill in skills if skill is not target]
    return target, losers


def merge_provenance(target: Skill, losers: Sequence[Skill]) -> MergedProvenance:
    """Union tags, source URLs and owners, target first, first record per identity."""

    return MergedProvenance(
        tags=tuple(merge_tags(target.tags, *(loser.tags for loser in losers))),
        source_urls=tuple(
            merge_source_urls(target.source_urls, *(loser.source_urls for loser in losers))
        ),
        owners=tuple(merge_owners(target.owners, *(loser.owners for loser in losers))),
    )


def fallback_content(target: SkillText, losers: Sequence[SkillText]) -> str:
    sections = [f"## {loser.title}\n\n{loser.content}" for loser in losers]
    return "\n".join([target.content, "", "---", "", *sections])


def pending_merge_draft(target: Skill, losers: Sequence[Skill]) -> MergeDraft:
    """Draft shown while the summarizer runs: provenance known, content not yet."""

    provenance = merge_provenance(target, losers)
    return MergeDraft(
        target_id=target.id,
        loser_ids=tuple(loser.id for loser in losers),
        loser_titles=tuple(loser.title for loser in losers),
        title=target.title,
        content="",
        tags=provenance.tags,
        source_urls=provenance.source_urls,
        owners=provenance.owners,
        status=DraftStatus.GENERATING,
    )


def build_merge_draft(
    target: Skill,
    losers: Sequence[Skill],
    summarizer: Summarizer,
    *,
    recommendation_id: str | None = None,
) -> MergeDraft:
    """Compute the merged draft. Never raises for summarizer problems.

    Any non-``Ok`` summarizer outcome (or exception) yields the deterministic
    concatenation fallback and a degraded draft carrying a warning.
    """

    if not losers:
        raise MergeValidationError("Need at least 2 skills to merge")

    draft = pending_merge_draft(target, losers)
    draft.recommendation_id = recommendation_id
    target_text = SkillText.of(target)
    loser_texts = [SkillText.of(loser) for loser in losers]

    outcome = _summarize(summarizer, target_text, loser_texts)
    match outcome:
        case Ok(value=summary) if summary.content.strip():
            draft.title = summary.title or target.title
            draft.content = summary.content
            draft.status = DraftStatus.READY
            return draft
        case Ok():
            reason = "summarizer returned empty content"
        case Degraded(reason=reason) | Failed(error=reason):
            pass
        case _:
            reason = f"unexpected summarizer outcome: {outcome!r}"

    log.warning("Falling back to concatenated merge for %r: %s", target.title, reason)
    draft.content = fallback_content(target_text, loser_texts)
    draft.status = DraftStatus.DEGRADED
    draft.warning = FALLBACK_WARNING.format(reason=reason)
    return draft


def _summarize(
    summarizer: Summarizer,
    target: SkillText,
    losers: Sequence[SkillText],
) -> Outcome[MergeSummary]:
    try:
        return summarizer(target, losers)
    except Exception as exc:  # noqa: BLE001
        log.exception("Summarizer raised while merging %r", target.title)
        return Failed(str(exc) or type(exc).__name__)
