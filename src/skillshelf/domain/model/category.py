"""Categories and the ordered registry that resolves overrides deterministically."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from skillshelf.domain.model.entity import Entity
from skillshelf.domain.model.enums import EntityType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from skillshelf.domain.model.primitives import CategoryName


class CategoryError(ValueError):
    """Raised for invalid registry operations (blank, duplicate or unknown names)."""


@dataclass(eq=False, kw_only=True)
class Category(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CATEGORY

    name: CategoryName
    position: int = 0


class CategoryRegistry:
    """Ordered set of categories.

    Order is by ``position`` (stable for equal positions) and is the precedence used when
    a skill has tier overrides for several active categories.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: list[Category] = sorted(categories, key=lambda item: item.position)

    @classmethod
    def from_names(cls, names: Iterable[CategoryName]) -> CategoryRegistry:
        return cls(Category(name=name, position=index) for index, name in enumerate(names))

    @property
    def names(self) -> tuple[CategoryName, ...]:
        return tuple(category.name for category in self._categories)

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return any(category.name == name for category in self._categories)

    def get(self, name: CategoryName) -> Category | None:
        for category in self._categories:
            if category.name == name:
                return category
        return None

    def first_match(self, names: Iterable[CategoryName]) -> CategoryName | None:
        """Return the first registered category (in registry order) among ``names``."""

        wanted = set(names)
        for category in self._categories:
            if category.name in wanted:
                return category.name
        return None

    def add(self, name: CategoryName) -> Category:
        cleaned = _clean(name)
        if cleaned in self:
            raise CategoryError(f"Category already exists: {cleaned}")
        position = max((category.position for category in self._categories), default=-1) + 1
        category = Category(name=cleaned, position=position)
        self._categories.append(category)
        return category

    def remove(self, name: CategoryName) -> Category:
        category = self._require(name)
        self._categories.remove(category)
        return category

    def rename(self, old: CategoryName, new: CategoryName) -> Category:
        category = self._require(old)
        cleaned = _clean(new)
        if cleaned != old and cleaned in self:
            raise CategoryError(f"Category already exists: {cleaned}")
        category.name = cleaned
        return category

    def _require(self, name: CategoryName) -> Category:
        category = self.get(name)
        if category is None:
            raise CategoryError(f"Unknown category: {name}")
        return category


def _clean(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise CategoryError("Category name must not be blank")
    return cleaned
