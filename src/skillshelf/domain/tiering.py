"""Tier resolution: which skills go into the answer context, and in which group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from skillshelf.domain.model import Tier

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from uuid import UUID

    from skillshelf.domain.model import CategoryName, CategoryRegistry, Skill


@dataclass(frozen=True, slots=True)
class TieredSkills:
    core: tuple[Skill, ...] = ()
    extended: tuple[Skill, ...] = ()
    library: tuple[Skill, ...] = ()

    def bucket(self, tier: Tier) -> tuple[Skill, ...]:
        match tier:
            case Tier.CORE:
                return self.core
            case Tier.EXTENDED:
                return self.extended
            case Tier.LIBRARY:
                return self.library

    def tier_of(self, skill_id: UUID) -> Tier | None:
        for tier in Tier:
            if any(skill.id == skill_id for skill in self.bucket(tier)):
                return tier
        return None

    def __len__(self) -> int:
        return len(self.core) + len(self.extended) + len(self.library)


class TierResolver:
    """Buckets active skills into Core, Extended and Library for a set of active categories.

    Every active skill lands in exactly one bucket and inactive skills in none. Within a
    bucket the input order is kept.
    """

    def __init__(self, registry: CategoryRegistry) -> None:
        self._registry = registry

    def effective_tier(self, skill: Skill, active_categories: Collection[CategoryName]) -> Tier:
        """Return the override of the first matching category (registry order), else the default.

        Only overrides for categories that are active, assigned to the skill and known to
        the registry are considered.
        """

        candidates = [
            name
            for name in skill.categories
            if name in active_categories and name in skill.tier_overrides
        ]
        if not candidates:
            return skill.tier
        winner = self._registry.first_match(candidates)
        if winner is None:
            return skill.tier
        return skill.tier_overrides[winner]

    def resolve(
        self,
        skills: Iterable[Skill],
        active_categories: Iterable[CategoryName],
    ) -> TieredSkills:
        active = frozenset(active_categories)
        core: list[Skill] = []
        extended: list[Skill] = []
        library: list[Skill] = []
        for skill in skills:
            if not skill.is_active:
                continue
            tier = self.effective_tier(skill, active)
            if tier is Tier.CORE:
                core.append(skill)
            elif tier is Tier.EXTENDED and active.intersection(skill.categories):
                extended.append(skill)
            else:
                library.append(skill)
        return TieredSkills(core=tuple(core), extended=tuple(extended), library=tuple(library))


def sort_by_usage(skills: Iterable[Skill]) -> list[Skill]:
    """Most-used first; ties keep their input order."""
    return sorted(skills, key=lambda skill: skill.usage_count, reverse=True)


def progressive_context(
    tiered: TieredSkills,
    *,
    through: Tier = Tier.LIBRARY,
    exclude_ids: Collection[UUID] = frozenset(),
    limit: int | None = None,
) -> list[Skill]:
    """Cumulative context for progressive loading.

    Core is always included in full. Each later stage (Extended, then Library) adds at
    most ``limit`` skills not already excluded. ``through`` stops after that stage.
    """

    context = [skill for skill in tiered.core if skill.id not in exclude_ids]
    stages = (Tier.EXTENDED, Tier.LIBRARY)
    for stage in stages:
        if through is Tier.CORE:
            break
        additions = [skill for skill in tiered.bucket(stage) if skill.id not in exclude_ids]
        if limit is not None:
            additions = additions[:limit]
        context.extend(additions)
        if stage is through:
            break
    return context
