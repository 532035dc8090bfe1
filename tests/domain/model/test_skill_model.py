from __future__ import annotations

from datetime import UTC, datetime

from skillshelf.domain.model import (
    EntityType,
    HistoryAction,
    HistoryEntry,
    Skill,
    SkillOwner,
    SkillPatch,
    SourceUrl,
    Tier,
    new_skill,
)
from tests.helpers.skills import make_skill


def test_skill_dedupes_collections_on_creation() -> None:
    skill = Skill(
        title="Deploy",
        tags=("ops", "ops", "Ops"),
        categories=("infra", "infra"),
        source_urls=(SourceUrl(url="https://a.dev/x"), SourceUrl(url="https://A.dev/x/")),
        owners=(
            SkillOwner(name="Ada", user_id="u1"),
            SkillOwner(name="Ada L.", user_id="u1"),
        ),
    )

    assert skill.tags == ("ops", "Ops")
    assert skill.categories == ("infra",)
    assert [source.url for source in skill.source_urls] == ["https://a.dev/x"]
    assert [owner.name for owner in skill.owners] == ["Ada"]


def test_skill_coerces_override_values_to_tier() -> None:
    overrides: dict[str, object] = {"infra": "extended"}
    skill = Skill(title="Deploy", tier_overrides=overrides)  # pyright: ignore[reportArgumentType]

    assert skill.tier_overrides == {"infra": Tier.EXTENDED}
    assert skill.entity_type is EntityType.SKILL


def test_new_skill_records_created_history() -> None:
    skill = new_skill(title="Deploy", content="steps", user="ada@example.com")

    assert len(skill.history) == 1
    entry = skill.history[0]
    assert entry.action is HistoryAction.CREATED
    assert entry.summary == "Skill created"
    assert entry.user == "ada@example.com"
    assert entry.date == skill.created_at


def test_apply_patch_leaves_unset_fields_untouched() -> None:
    skill = make_skill("Deploy", tags=("ops",), categories=("infra",))
    at = datetime(2025, 3, 1, tzinfo=UTC)

    skill.apply(SkillPatch(content="new body"), at=at)

    assert skill.content == "new body"
    assert skill.title == "Deploy"
    assert skill.tags == ("ops",)
    assert skill.categories == ("infra",)
    assert skill.updated_at == at


def test_apply_patch_appends_history_only() -> None:
    skill = new_skill(title="Deploy", content="steps")
    entry = HistoryEntry(action=HistoryAction.UPDATED, summary="edited")

    skill.apply(SkillPatch(title="Deploy v2", append_history=(entry,)))

    assert [item.action for item in skill.history] == [
        HistoryAction.CREATED,
        HistoryAction.UPDATED,
    ]
    assert skill.title == "Deploy v2"


def test_record_appends_history_entry() -> None:
    skill = make_skill("Deploy")

    entry = skill.record(HistoryAction.UPDATED, "tweaked", user="ada")

    assert skill.history == (entry,)


def test_empty_patch_is_detected() -> None:
    assert SkillPatch().is_empty
    assert not SkillPatch(is_active=False).is_empty


def test_ownerless_skill() -> None:
    assert make_skill().is_ownerless
    assert not make_skill(owners=(SkillOwner(name="Ada"),)).is_ownerless


def test_entities_compare_by_identity() -> None:
    first = make_skill("Same")
    second = make_skill("Same")

    assert first != second
    assert first == first  # noqa: PLR0124
