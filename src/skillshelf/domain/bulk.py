"""Bulk operations over a selection of skills.

Only skills the actor may edit are touched; the rest are excluded silently. The
remaining skills are processed strictly one after another and a failure on one skill
never aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, ClassVar, Protocol

from skillshelf.domain.authorization import can_edit
from skillshelf.domain.identity import owner_identity
from skillshelf.domain.model import HistoryAction, HistoryEntry, SkillPatch, utcnow
from skillshelf.domain.results import Degraded, Failed, Ok

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from skillshelf.domain.model import Actor, Skill, SkillOwner
    from skillshelf.domain.ports.collaborators import SourceRefresh, SourceRefresher
    from skillshelf.domain.ports.persistence import SkillStore

log = logging.getLogger(__name__)


class RefreshError(RuntimeError):
    """Raised when the refresh collaborator could not produce an update."""


class BulkOperation(Protocol):
    name: ClassVar[str]

    def is_eligible(self, skill: Skill) -> bool: ...

    def apply(self, skill: Skill, *, store: SkillStore, actor: Actor | None) -> Skill | None:
        """Return the updated skill, or ``None`` when there was nothing to do."""
        ...


@dataclass(frozen=True, slots=True)
class BulkFailure:
    skill_id: UUID
    title: str
    error: str


@dataclass(slots=True, kw_only=True)
class BulkResult:
    operation: str
    selected: int
    excluded_unauthorized: tuple[UUID, ...] = ()
    excluded_ineligible: tuple[UUID, ...] = ()
    succeeded: list[UUID] = field(default_factory=list)
    skipped: list[UUID] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)
    updated: list[Skill] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.skipped) + len(self.failed)

    @property
    def nothing_editable(self) -> bool:
        return self.selected > 0 and len(self.excluded_unauthorized) == self.selected

    def summary(self) -> str:
        if self.nothing_editable:
            return "No editable skills selected. You can only modify skills you own."
        parts = [f"{len(self.succeeded)} succeeded"]
        if self.failed:
            parts.append(f"{len(self.failed)} failed")
        if self.skipped:
            parts.append(f"{len(self.skipped)} skipped")
        return ", ".join(parts)


def run_bulk(
    skills: Iterable[Skill],
    operation: BulkOperation,
    actor: Actor | None,
    *,
    store: SkillStore,
) -> BulkResult:
    selected = list(skills)
    allowed = [skill for skill in selected if can_edit(skill, actor)]
    eligible = [skill for skill in allowed if operation.is_eligible(skill)]
    allowed_ids = {skill.id for skill in allowed}
    eligible_ids = {skill.id for skill in eligible}

    result = BulkResult(
        operation=operation.name,
        selected=len(selected),
        excluded_unauthorized=tuple(s.id for s in selected if s.id not in allowed_ids),
        excluded_ineligible=tuple(s.id for s in allowed if s.id not in eligible_ids),
    )
    if not allowed:
        log.info("Bulk %s: no editable skills among %s selected", operation.name, len(selected))
        return result

    for skill in eligible:
        try:
            updated = operation.apply(skill, store=store, actor=actor)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "Bulk %s failed for %s (%r): %s", operation.name, skill.id, skill.title, exc
            )
            result.failed.append(BulkFailure(skill_id=skill.id, title=skill.title, error=str(exc)))
            continue
        if updated is None:
            result.skipped.append(skill.id)
            continue
        result.succeeded.append(skill.id)
        result.updated.append(updated)

    log.info("Bulk %s finished: %s", operation.name, result.summary())
    return result


@dataclass(frozen=True, slots=True)
class AssignOwner:
    """Add ``owner`` to every skill that does not already have them."""

    name: ClassVar[str] = "assign_owner"

    owner: SkillOwner

    def is_eligible(self, skill: Skill) -> bool:  # noqa: ARG002
        return True

    def apply(self, skill: Skill, *, store: SkillStore, actor: Actor | None) -> Skill | None:
        key = owner_identity(self.owner)
        if any(owner_identity(existing) == key for existing in skill.owners):
            return None
        entry = HistoryEntry(
            action=HistoryAction.OWNER_ADDED,
            summary=f"Added owner: {self.owner.name}",
            user=actor.label if actor else None,
        )
        patch = SkillPatch(owners=(*skill.owners, self.owner), append_history=(entry,))
        return store.update(skill.id, patch)


@dataclass(frozen=True, slots=True)
class RefreshFromSource:
    """Re-read each skill's source URLs through ``refresher`` and store the result."""

    name: ClassVar[str] = "refresh_from_source"

    refresher: SourceRefresher

    def is_eligible(self, skill: Skill) -> bool:
        return bool(skill.source_urls)

    def apply(self, skill: Skill, *, store: SkillStore, actor: Actor | None) -> Skill | None:
        match self.refresher(skill):
            case Ok(value=refresh):
                return store.update(skill.id, refresh_patch(skill, refresh, actor=actor))
            case Degraded(reason=reason) | Failed(error=reason):
                raise RefreshError(reason)
            case unexpected:
                raise RefreshError(f"Unexpected refresh outcome: {unexpected!r}")


def refresh_patch(skill: Skill, refresh: SourceRefresh, *, actor: Actor | None) -> SkillPatch:
    now = utcnow()
    user = actor.label if actor else None
    source_urls = tuple(replace(source, last_fetched_at=now) for source in skill.source_urls)
    if not refresh.has_changes:
        entry = HistoryEntry(
            action=HistoryAction.REFRESHED,
            summary="Refreshed from source URLs - no changes needed",
            date=now,
            user=user,
        )
        return SkillPatch(source_urls=source_urls, last_refreshed_at=now, append_history=(entry,))

    summary = refresh.summary or "Updated from source URLs"
    entry = HistoryEntry(
        action=HistoryAction.REFRESHED,
        summary=f"Refreshed from source URLs: {summary}",
        date=now,
        user=user,
    )
    return SkillPatch(
        title=refresh.title or None,
        content=refresh.content or None,
        tags=refresh.tags or None,
        source_urls=source_urls,
        last_refreshed_at=now,
        append_history=(entry,),
    )
