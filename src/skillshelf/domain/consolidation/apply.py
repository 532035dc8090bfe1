"""Consolidation orchestrator: persist the merged target, then retire the losers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skillshelf.domain.model import HistoryAction, HistoryEntry, SkillPatch, utcnow

from .draft import ConsolidationError, MergeValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from skillshelf.domain.model import Actor, Skill
    from skillshelf.domain.ports.persistence import SkillStore

    from .draft import MergeDraft

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeletionFailure:
    skill_id: UUID
    title: str
    error: str


@dataclass(frozen=True, slots=True)
class ConsolidationResult:
    target: Skill
    deleted_ids: tuple[UUID, ...]
    failed_deletions: tuple[DeletionFailure, ...] = ()
    recommendation_id: str | None = None

    @property
    def complete(self) -> bool:
        return not self.failed_deletions


def merge_patch(
    draft: MergeDraft,
    losers: Sequence[Skill],
    *,
    actor: Actor | None = None,
    at: datetime | None = None,
) -> SkillPatch:
    """Patch turning the target into the merged skill, with its ``merged`` history line."""

    now = at or utcnow()
    entry = HistoryEntry(
        action=HistoryAction.MERGED,
        summary=f"Merged with: {', '.join(loser.title for loser in losers)}",
        date=now,
        user=actor.label if actor else None,
    )
    return SkillPatch(
        title=draft.title,
        content=draft.content,
        tags=draft.tags,
        source_urls=draft.source_urls,
        owners=draft.owners,
        last_refreshed_at=now,
        append_history=(entry,),
    )


def apply_merge_draft(
    draft: MergeDraft,
    target: Skill,
    losers: Sequence[Skill],
    *,
    store: SkillStore,
    actor: Actor | None = None,
) -> ConsolidationResult:
    """Persist ``draft`` onto ``target`` and delete ``losers`` one at a time.

    Losers are only deleted after the target write succeeded. A failed target write
    raises :class:`ConsolidationError` and leaves every skill in place. Individual
    delete failures are logged and reported, never rolled back.
    """

    _validate(draft, target, losers)

    patch = merge_patch(draft, losers, actor=actor)
    try:
        updated = store.update(target.id, patch)
    except Exception as exc:
        log.exception("Failed to save merged skill %s", target.id)
        msg = f"Failed to save merged skill {target.title!r}: {exc}"
        raise ConsolidationError(msg) from exc

    deleted: list[UUID] = []
    failures: list[DeletionFailure] = []
    for loser in losers:
        try:
            store.delete(loser.id)
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to delete merged skill %s (%r): %s", loser.id, loser.title, exc)
            failures.append(DeletionFailure(skill_id=loser.id, title=loser.title, error=str(exc)))
            continue
        deleted.append(loser.id)

    log.info(
        "Merged %s skill(s) into %s: deleted=%s, failed=%s",
        len(losers),
        target.id,
        len(deleted),
        len(failures),
    )
    return ConsolidationResult(
        target=updated,
        deleted_ids=tuple(deleted),
        failed_deletions=tuple(failures),
        recommendation_id=draft.recommendation_id,
    )


def _validate(draft: MergeDraft, target: Skill, losers: Sequence[Skill]) -> None:
    if draft.is_generating:
        raise MergeValidationError("Merge draft is still being generated")
    if not losers:
        raise MergeValidationError("Need at least 2 skills to merge")
    if draft.target_id != target.id:
        raise MergeValidationError("Merge draft was built for a different target")
    if set(draft.loser_ids) != {loser.id for loser in losers}:
        raise MergeValidationError("Merge draft was built for different skills")
    if not draft.content.strip():
        raise MergeValidationError("Merged content must not be empty")
