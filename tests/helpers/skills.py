from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skillshelf.domain.model import (
    Actor,
    CategoryError,
    CategoryRegistry,
    Skill,
    SkillOwner,
    SourceUrl,
    Tier,
)
from skillshelf.domain.ports.persistence import SkillNotFoundError
from skillshelf.domain.results import Failed, Ok

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from skillshelf.domain.model import Category, CategoryName, SkillPatch
    from skillshelf.domain.ports.collaborators import (
        LibraryAnalysis,
        MergeSummary,
        SkillSummary,
        SkillText,
        SourceRefresh,
    )
    from skillshelf.domain.results import Outcome


def make_skill(  # noqa: PLR0913
    title: str = "Skill",
    *,
    content: str | None = None,
    tags: Iterable[str] = (),
    categories: Iterable[str] = (),
    tier: Tier = Tier.CORE,
    overrides: dict[str, Tier] | None = None,
    urls: Iterable[str] = (),
    owners: Iterable[SkillOwner] = (),
    usage_count: int = 0,
    is_active: bool = True,
) -> Skill:
    return Skill(
        title=title,
        content=content if content is not None else f"{title} content",
        tags=tuple(tags),
        categories=tuple(categories),
        tier=tier,
        tier_overrides=dict(overrides or {}),
        source_urls=tuple(SourceUrl(url=url) for url in urls),
        owners=tuple(owners),
        usage_count=usage_count,
        is_active=is_active,
    )


def make_owner(
    name: str = "Ada",
    *,
    user_id: str | None = None,
    email: str | None = None,
) -> SkillOwner:
    return SkillOwner(name=name, user_id=user_id, email=email)


def make_actor(
    *,
    user_id: str | None = "user-1",
    email: str | None = "ada@example.com",
    name: str | None = "Ada",
) -> Actor:
    return Actor(user_id=user_id, email=email, name=name)


@dataclass
class FakeSkillStore:
    """In-memory skill store with per-id failure injection."""

    skills: dict[UUID, Skill] = field(default_factory=dict)
    fail_update: set[UUID] = field(default_factory=set)
    fail_delete: set[UUID] = field(default_factory=set)
    calls: list[tuple[str, UUID]] = field(default_factory=list)

    @classmethod
    def of(cls, *skills: Skill) -> FakeSkillStore:
        return cls(skills={skill.id: skill for skill in skills})

    def list_skills(self) -> list[Skill]:
        return list(self.skills.values())

    def get(self, skill_id: UUID) -> Skill:
        try:
            return self.skills[skill_id]
        except KeyError:
            raise SkillNotFoundError(skill_id) from None

    def create(self, skill: Skill) -> Skill:
        self.calls.append(("create", skill.id))
        self.skills[skill.id] = skill
        return skill

    def update(self, skill_id: UUID, patch: SkillPatch) -> Skill:
        self.calls.append(("update", skill_id))
        if skill_id in self.fail_update:
            raise RuntimeError(f"update failed for {skill_id}")
        skill = self.get(skill_id)
        skill.apply(patch)
        return skill

    def delete(self, skill_id: UUID) -> None:
        self.calls.append(("delete", skill_id))
        if skill_id in self.fail_delete:
            raise RuntimeError(f"delete failed for {skill_id}")
        self.get(skill_id)
        del self.skills[skill_id]

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)


@dataclass
class FakeCategoryStore:
    registry: CategoryRegistry = field(default_factory=CategoryRegistry)

    @classmethod
    def of(cls, *names: str) -> FakeCategoryStore:
        return cls(registry=CategoryRegistry.from_names(names))

    def load_registry(self) -> CategoryRegistry:
        return CategoryRegistry(self.registry)

    def add(self, name: CategoryName) -> Category:
        return self.registry.add(name)

    def rename(self, old: CategoryName, new: CategoryName) -> Category:
        return self.registry.rename(old, new)

    def remove(self, name: CategoryName) -> None:
        if self.registry.get(name) is None:
            raise CategoryError(f"Unknown category: {name}")
        self.registry.remove(name)


@dataclass
class StaticSummarizer:
    outcome: Outcome[MergeSummary]
    calls: list[tuple[SkillText, tuple[SkillText, ...]]] = field(default_factory=list)

    def __call__(self, target: SkillText, losers: Sequence[SkillText]) -> Outcome[MergeSummary]:
        self.calls.append((target, tuple(losers)))
        return self.outcome


class RaisingSummarizer:
    def __call__(self, target: SkillText, losers: Sequence[SkillText]) -> Outcome[MergeSummary]:
        raise RuntimeError("summarizer exploded")


@dataclass
class StaticAnalyzer:
    outcome: Outcome[LibraryAnalysis]
    calls: list[tuple[SkillSummary, ...]] = field(default_factory=list)

    def __call__(self, summaries: Sequence[SkillSummary]) -> Outcome[LibraryAnalysis]:
        self.calls.append(tuple(summaries))
        return self.outcome


@dataclass
class ScriptedRefresher:
    """Returns the refresh registered for a skill title, or fails for unknown titles."""

    by_title: dict[str, SourceRefresh] = field(default_factory=dict)
    calls: list[UUID] = field(default_factory=list)

    def __call__(self, skill: Skill) -> Outcome[SourceRefresh]:
        self.calls.append(skill.id)
        refresh = self.by_title.get(skill.title)
        if refresh is None:
            return Failed(f"no source text for {skill.title}")
        return Ok(refresh)
