"""Skill aggregate and the partial-update patch applied to it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from skillshelf.domain.identity import merge_owners, merge_source_urls, merge_tags
from skillshelf.domain.model.entity import Entity, utcnow
from skillshelf.domain.model.enums import EntityType, HistoryAction, Tier
from skillshelf.domain.model.primitives import HistoryEntry

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from skillshelf.domain.model.primitives import CategoryName, SkillOwner, SourceUrl, Tag


@dataclass(eq=False, kw_only=True)
class Skill(Entity):
    """A curated knowledge snippet.

    Value collections are tuples and are only ever replaced, never mutated in place.
    ``history`` is append-only: use :meth:`record` or a patch's ``append_history``.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SKILL

    title: str
    content: str = ""
    tags: tuple[Tag, ...] = ()
    categories: tuple[CategoryName, ...] = ()
    tier: Tier = Tier.CORE
    tier_overrides: dict[CategoryName, Tier] = field(default_factory=dict)
    source_urls: tuple[SourceUrl, ...] = ()
    owners: tuple[SkillOwner, ...] = ()
    history: tuple[HistoryEntry, ...] = ()
    usage_count: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    last_refreshed_at: datetime | None = None

    def __post_init__(self) -> None:
        self.tags = tuple(merge_tags(self.tags))
        self.categories = tuple(dict.fromkeys(self.categories))
        self.source_urls = tuple(merge_source_urls(self.source_urls))
        self.owners = tuple(merge_owners(self.owners))
        self.tier_overrides = {name: Tier(tier) for name, tier in self.tier_overrides.items()}

    @property
    def is_ownerless(self) -> bool:
        return not self.owners

    def record(
        self,
        action: HistoryAction,
        summary: str,
        *,
        user: str | None = None,
        at: datetime | None = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(action=action, summary=summary, user=user, date=at or utcnow())
        self.history = (*self.history, entry)
        return entry

    def apply(self, patch: SkillPatch, *, at: datetime | None = None) -> None:
        """Apply a partial update in place; fields left as ``None`` are untouched."""

        if patch.title is not None:
            self.title = patch.title
        if patch.content is not None:
            self.content = patch.content
        if patch.tags is not None:
            self.tags = tuple(merge_tags(patch.tags))
        if patch.categories is not None:
            self.categories = tuple(dict.fromkeys(patch.categories))
        if patch.tier is not None:
            self.tier = patch.tier
        if patch.tier_overrides is not None:
            self.tier_overrides = dict(patch.tier_overrides)
        if patch.source_urls is not None:
            self.source_urls = tuple(merge_source_urls(patch.source_urls))
        if patch.owners is not None:
            self.owners = tuple(merge_owners(patch.owners))
        if patch.is_active is not None:
            self.is_active = patch.is_active
        if patch.last_refreshed_at is not None:
            self.last_refreshed_at = patch.last_refreshed_at
        if patch.append_history:
            self.history = (*self.history, *patch.append_history)
        self.updated_at = at or utcnow()


@dataclass(frozen=True, slots=True, kw_only=True)
class SkillPatch:
    """Partial update for a skill. History can only be appended, never replaced."""

    title: str | None = None
    content: str | None = None
    tags: tuple[Tag, ...] | None = None
    categories: tuple[CategoryName, ...] | None = None
    tier: Tier | None = None
    tier_overrides: Mapping[CategoryName, Tier] | None = None
    source_urls: tuple[SourceUrl, ...] | None = None
    owners: tuple[SkillOwner, ...] | None = None
    is_active: bool | None = None
    last_refreshed_at: datetime | None = None
    append_history: tuple[HistoryEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self == SkillPatch()


def new_skill(
    *,
    title: str,
    content: str,
    user: str | None = None,
    **fields: object,
) -> Skill:
    """Create a skill with its initial ``created`` history entry."""

    skill = Skill(title=title, content=content, **fields)  # pyright: ignore[reportArgumentType]
    skill.record(HistoryAction.CREATED, "Skill created", user=user, at=skill.created_at)
    return skill
