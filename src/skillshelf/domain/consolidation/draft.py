"""Merge drafts and consolidation errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from skillshelf.domain.model import DraftStatus

if TYPE_CHECKING:
    from uuid import UUID

    from skillshelf.domain.model import SkillOwner, SourceUrl, Tag


class MergeValidationError(ValueError):
    """Raised before any side effect when a merge request is malformed."""


class ConsolidationError(RuntimeError):
    """Raised when the merged target could not be persisted. No skill was deleted."""


@dataclass(frozen=True, slots=True)
class MergedProvenance:
    tags: tuple[Tag, ...]
    source_urls: tuple[SourceUrl, ...]
    owners: tuple[SkillOwner, ...]


@dataclass(kw_only=True)
class MergeDraft:
    """Proposed merge result, editable by the operator until it is applied."""

    target_id: UUID
    loser_ids: tuple[UUID, ...]
    loser_titles: tuple[str, ...] = ()
    title: str
    content: str
    tags: tuple[Tag, ...] = ()
    source_urls: tuple[SourceUrl, ...] = ()
    owners: tuple[SkillOwner, ...] = ()
    status: DraftStatus = DraftStatus.READY
    warning: str | None = None
    recommendation_id: str | None = None

    @property
    def is_generating(self) -> bool:
        return self.status is DraftStatus.GENERATING

    @property
    def is_degraded(self) -> bool:
        return self.status is DraftStatus.DEGRADED

    @property
    def skill_ids(self) -> tuple[UUID, ...]:
        return (self.target_id, *self.loser_ids)

    def edit(self, *, title: str | None = None, content: str | None = None) -> None:
        if self.is_generating:
            raise MergeValidationError("Merge draft is still being generated")
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content

    def remove_tag(self, tag: Tag) -> None:
        self.tags = tuple(existing for existing in self.tags if existing != tag)
