from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import text

from skillshelf.domain.model import (
    CategoryError,
    HistoryAction,
    HistoryEntry,
    SkillOwner,
    SkillPatch,
    SourceUrl,
    Tier,
    new_skill,
)
from skillshelf.domain.ports.persistence import SkillNotFoundError
from skillshelf.domain.store import UnitOfWorkCategoryStore, UnitOfWorkSkillStore
from tests.helpers.skills import make_skill

if TYPE_CHECKING:
    from collections.abc import Callable

    from skillshelf.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


def test_skill_round_trips_value_collections(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    store = UnitOfWorkSkillStore(sqlite_unit_of_work)
    fetched_at = datetime(2025, 2, 3, 4, 5, tzinfo=UTC)
    skill = new_skill(
        title="Deploy",
        content="steps",
        user="ada@example.com",
        tags=("ops", "ci"),
        categories=("backend",),
        tier=Tier.EXTENDED,
        tier_overrides={"backend": Tier.CORE},
        source_urls=(SourceUrl(url="https://docs.dev/deploy", last_fetched_at=fetched_at),),
        owners=(SkillOwner(name="Ada", user_id="u1", email="ada@example.com"),),
    )

    store.create(skill)
    loaded = store.get(skill.id)

    assert loaded.title == "Deploy"
    assert loaded.tags == ("ops", "ci")
    assert loaded.categories == ("backend",)
    assert loaded.tier is Tier.EXTENDED
    assert loaded.tier_overrides == {"backend": Tier.CORE}
    assert loaded.source_urls[0].url == "https://docs.dev/deploy"
    assert loaded.source_urls[0].last_fetched_at == fetched_at
    assert loaded.owners == (SkillOwner(name="Ada", user_id="u1", email="ada@example.com"),)
    assert [entry.action for entry in loaded.history] == [HistoryAction.CREATED]
    assert loaded.history[0].user == "ada@example.com"
    assert loaded.created_at.tzinfo is not None


def test_update_applies_partial_patch_and_appends_history(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    store = UnitOfWorkSkillStore(sqlite_unit_of_work)
    skill = store.create(new_skill(title="Deploy", content="old", tags=("ops",)))
    entry = HistoryEntry(action=HistoryAction.UPDATED, summary="rewrote")

    store.update(skill.id, SkillPatch(content="new", append_history=(entry,)))
    loaded = store.get(skill.id)

    assert loaded.content == "new"
    assert loaded.title == "Deploy"
    assert loaded.tags == ("ops",)
    assert [item.summary for item in loaded.history] == ["Skill created", "rewrote"]


def test_list_and_delete(sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork]) -> None:
    store = UnitOfWorkSkillStore(sqlite_unit_of_work)
    first = store.create(make_skill("first"))
    second = store.create(make_skill("second"))

    store.delete(first.id)

    assert [skill.id for skill in store.list_skills()] == [second.id]
    with pytest.raises(SkillNotFoundError):
        store.get(first.id)
    with pytest.raises(SkillNotFoundError):
        store.delete(first.id)
    with pytest.raises(SkillNotFoundError):
        store.update(first.id, SkillPatch(title="gone"))


def test_category_store_keeps_registry_order(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    store = UnitOfWorkCategoryStore(sqlite_unit_of_work)
    store.add("frontend")
    store.add("backend")
    store.add("ops")

    store.rename("backend", "api")
    store.remove("frontend")

    registry = store.load_registry()
    assert registry.names == ("api", "ops")
    assert [category.position for category in registry] == [1, 2]
    with pytest.raises(CategoryError):
        store.add("ops")
    with pytest.raises(CategoryError):
        store.remove("frontend")


def test_unknown_history_actions_survive_load_and_update(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    store = UnitOfWorkSkillStore(sqlite_unit_of_work)
    skill = store.create(new_skill(title="Imported", content="body"))
    history = json.dumps(
        [
            {"date": "2024-05-01T00:00:00+00:00", "action": "created", "summary": "Skill created"},
            {"date": "2024-06-01T00:00:00+00:00", "action": "archived", "summary": "Archived"},
        ]
    )
    with sqlite_unit_of_work() as uow:
        uow.session.execute(
            text("UPDATE skill SET history = :history WHERE id = :id"),
            {"history": history, "id": skill.id.hex},
        )
        uow.commit()

    store.update(skill.id, SkillPatch(content="new body"))
    loaded = store.get(skill.id)

    assert [entry.action for entry in loaded.history] == [HistoryAction.CREATED, "archived"]
    assert [skill.title for skill in store.list_skills()] == ["Imported"]
