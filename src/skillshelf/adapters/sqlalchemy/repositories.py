"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from skillshelf.adapters.sqlalchemy.mappings import category_table, skill_table
from skillshelf.domain.model import Category, Skill

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session

    from skillshelf.domain.model import CategoryName


class SqlAlchemySkillRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Skill) -> None:
        self.session.add(entity)

    def delete(self, entity: Skill) -> None:
        self.session.delete(entity)

    def get(self, skill_id: uuid.UUID) -> Skill | None:
        return self.session.get(Skill, skill_id)

    def list_all(self) -> list[Skill]:
        stmt = select(Skill).order_by(skill_table.c.created_at, skill_table.c.id)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyCategoryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Category) -> None:
        self.session.add(entity)

    def delete(self, entity: Category) -> None:
        self.session.delete(entity)

    def get_by_name(self, name: CategoryName) -> Category | None:
        stmt = select(Category).where(category_table.c.name == name)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Category]:
        stmt = select(Category).order_by(category_table.c.position, category_table.c.name)
        return list(self.session.execute(stmt).scalars())
