"""Skill and category stores built on a unit of work: one call, one committed transaction."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from skillshelf.domain.model import CategoryError, CategoryRegistry
from skillshelf.domain.ports.persistence import SkillNotFoundError
from skillshelf.domain.ports.unit_of_work import LibraryUnitOfWork

if TYPE_CHECKING:
    from uuid import UUID

    from skillshelf.domain.model import Category, CategoryName, Skill, SkillPatch

UnitOfWorkFactory = Callable[[], LibraryUnitOfWork]


class UnitOfWorkSkillStore:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    def list_skills(self) -> list[Skill]:
        with self._uow_factory() as uow:
            return uow.repositories.skills.list_all()

    def get(self, skill_id: UUID) -> Skill:
        with self._uow_factory() as uow:
            skill = uow.repositories.skills.get(skill_id)
            if skill is None:
                raise SkillNotFoundError(skill_id)
            return skill

    def create(self, skill: Skill) -> Skill:
        with self._uow_factory() as uow:
            uow.repositories.skills.add(skill)
            uow.commit()
        return skill

    def update(self, skill_id: UUID, patch: SkillPatch) -> Skill:
        with self._uow_factory() as uow:
            skill = uow.repositories.skills.get(skill_id)
            if skill is None:
                raise SkillNotFoundError(skill_id)
            skill.apply(patch)
            uow.commit()
            return skill

    def delete(self, skill_id: UUID) -> None:
        with self._uow_factory() as uow:
            skill = uow.repositories.skills.get(skill_id)
            if skill is None:
                raise SkillNotFoundError(skill_id)
            uow.repositories.skills.delete(skill)
            uow.commit()


class UnitOfWorkCategoryStore:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    def load_registry(self) -> CategoryRegistry:
        with self._uow_factory() as uow:
            return CategoryRegistry(uow.repositories.categories.list_all())

    def add(self, name: CategoryName) -> Category:
        with self._uow_factory() as uow:
            registry = CategoryRegistry(uow.repositories.categories.list_all())
            category = registry.add(name)
            uow.repositories.categories.add(category)
            uow.commit()
            return category

    def rename(self, old: CategoryName, new: CategoryName) -> Category:
        with self._uow_factory() as uow:
            registry = CategoryRegistry(uow.repositories.categories.list_all())
            category = registry.rename(old, new)
            uow.commit()
            return category

    def remove(self, name: CategoryName) -> None:
        with self._uow_factory() as uow:
            category = uow.repositories.categories.get_by_name(name)
            if category is None:
                raise CategoryError(f"Unknown category: {name}")
            uow.repositories.categories.delete(category)
            uow.commit()
