from __future__ import annotations

import pytest

from skillshelf.domain.model import Category, CategoryError, CategoryRegistry, EntityType


def test_registry_orders_by_position() -> None:
    registry = CategoryRegistry(
        [
            Category(name="ops", position=2),
            Category(name="frontend", position=0),
            Category(name="data", position=1),
        ]
    )

    assert registry.names == ("frontend", "data", "ops")
    assert len(registry) == 3
    assert "data" in registry
    assert "missing" not in registry


def test_first_match_uses_registry_order() -> None:
    registry = CategoryRegistry.from_names(["frontend", "backend", "ops"])

    assert registry.first_match(["ops", "backend"]) == "backend"
    assert registry.first_match(["unknown"]) is None
    assert registry.first_match([]) is None


def test_add_appends_after_highest_position() -> None:
    registry = CategoryRegistry([Category(name="a", position=5)])

    category = registry.add("  b  ")

    assert category.name == "b"
    assert category.position == 6
    assert category.entity_type is EntityType.CATEGORY
    assert registry.names == ("a", "b")


def test_add_rejects_blank_and_duplicate_names() -> None:
    registry = CategoryRegistry.from_names(["ops"])

    with pytest.raises(CategoryError):
        registry.add("   ")
    with pytest.raises(CategoryError):
        registry.add("ops")


def test_rename_keeps_position() -> None:
    registry = CategoryRegistry.from_names(["frontend", "backend"])

    renamed = registry.rename("frontend", "web")

    assert renamed.position == 0
    assert registry.names == ("web", "backend")


def test_rename_rejects_unknown_and_taken_names() -> None:
    registry = CategoryRegistry.from_names(["frontend", "backend"])

    with pytest.raises(CategoryError):
        registry.rename("missing", "x")
    with pytest.raises(CategoryError):
        registry.rename("frontend", "backend")


def test_remove_drops_category() -> None:
    registry = CategoryRegistry.from_names(["frontend", "backend"])

    removed = registry.remove("frontend")

    assert removed.name == "frontend"
    assert registry.names == ("backend",)
    with pytest.raises(CategoryError):
        registry.remove("frontend")
