"""Ports for persisting skills and categories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from skillshelf.domain.model import Category, Skill

if TYPE_CHECKING:
    from uuid import UUID

    from skillshelf.domain.model import CategoryName, CategoryRegistry, SkillPatch


class SkillNotFoundError(LookupError):
    """Raised when a skill id is unknown to the store."""

    def __init__(self, skill_id: UUID) -> None:
        super().__init__(f"Skill not found: {skill_id}")
        self.skill_id = skill_id


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def delete(self, entity: TEntity) -> None: ...

    def list_all(self) -> list[TEntity]: ...


@runtime_checkable
class SkillRepository(Repository[Skill], Protocol):
    def get(self, skill_id: UUID) -> Skill | None: ...


@runtime_checkable
class CategoryRepository(Repository[Category], Protocol):
    def get_by_name(self, name: CategoryName) -> Category | None: ...


@runtime_checkable
class SkillStore(Protocol):
    """Entry store boundary.

    Every call is one round-trip and commits on its own. ``update`` applies a partial
    patch and returns the stored skill.
    """

    def list_skills(self) -> list[Skill]: ...

    def get(self, skill_id: UUID) -> Skill: ...

    def create(self, skill: Skill) -> Skill: ...

    def update(self, skill_id: UUID, patch: SkillPatch) -> Skill: ...

    def delete(self, skill_id: UUID) -> None: ...


@runtime_checkable
class CategoryStore(Protocol):
    def load_registry(self) -> CategoryRegistry: ...

    def add(self, name: CategoryName) -> Category: ...

    def rename(self, old: CategoryName, new: CategoryName) -> Category: ...

    def remove(self, name: CategoryName) -> None: ...
