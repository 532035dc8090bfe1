from __future__ import annotations

from typing import TYPE_CHECKING

from skillshelf.domain.model import CategoryRegistry, Tier
from skillshelf.domain.tiering import (
    TieredSkills,
    TierResolver,
    progressive_context,
    sort_by_usage,
)
from tests.helpers.skills import make_skill

if TYPE_CHECKING:
    from collections.abc import Sequence

    from skillshelf.domain.model import Skill

REGISTRY = CategoryRegistry.from_names(["frontend", "backend", "ops"])


def _titles(skills: Sequence[Skill]) -> list[str]:
    return [skill.title for skill in skills]


def test_every_active_skill_lands_in_exactly_one_bucket() -> None:
    skills = [
        make_skill("core"),
        make_skill("ext-active", tier=Tier.EXTENDED, categories=("frontend",)),
        make_skill("ext-inactive-category", tier=Tier.EXTENDED, categories=("ops",)),
        make_skill("library", tier=Tier.LIBRARY),
        make_skill("retired", is_active=False),
    ]

    tiered = TierResolver(REGISTRY).resolve(skills, ["frontend"])

    assert _titles(tiered.core) == ["core"]
    assert _titles(tiered.extended) == ["ext-active"]
    assert _titles(tiered.library) == ["ext-inactive-category", "library"]
    assert len(tiered) == 4
    assert tiered.tier_of(skills[4].id) is None


def test_extended_without_categories_falls_to_library() -> None:
    skill = make_skill("floating", tier=Tier.EXTENDED)

    tiered = TierResolver(REGISTRY).resolve([skill], ["frontend"])

    assert tiered.tier_of(skill.id) is Tier.LIBRARY


def test_override_applies_only_for_active_assigned_category() -> None:
    skill = make_skill(
        "deploy",
        tier=Tier.LIBRARY,
        categories=("ops",),
        overrides={"ops": Tier.CORE},
    )
    resolver = TierResolver(REGISTRY)

    assert resolver.effective_tier(skill, {"ops"}) is Tier.CORE
    assert resolver.effective_tier(skill, {"frontend"}) is Tier.LIBRARY
    assert resolver.effective_tier(skill, set()) is Tier.LIBRARY


def test_override_precedence_follows_registry_order() -> None:
    skill = make_skill(
        "shared",
        tier=Tier.LIBRARY,
        categories=("ops", "frontend"),
        overrides={"ops": Tier.EXTENDED, "frontend": Tier.CORE},
    )

    resolver = TierResolver(REGISTRY)

    assert resolver.effective_tier(skill, {"ops", "frontend"}) is Tier.CORE
    reordered = TierResolver(CategoryRegistry.from_names(["ops", "frontend"]))
    assert reordered.effective_tier(skill, {"ops", "frontend"}) is Tier.EXTENDED


def test_override_for_unknown_category_is_ignored() -> None:
    skill = make_skill(
        "legacy",
        tier=Tier.LIBRARY,
        categories=("retired-team",),
        overrides={"retired-team": Tier.CORE},
    )

    tiered = TierResolver(REGISTRY).resolve([skill], ["retired-team"])

    assert tiered.tier_of(skill.id) is Tier.LIBRARY


def test_override_for_unassigned_category_is_ignored() -> None:
    skill = make_skill("api", tier=Tier.LIBRARY, overrides={"backend": Tier.CORE})

    assert TierResolver(REGISTRY).effective_tier(skill, {"backend"}) is Tier.LIBRARY


def test_bucket_order_follows_input_order() -> None:
    skills = [make_skill(f"s{index}") for index in range(5)]

    tiered = TierResolver(REGISTRY).resolve(reversed(skills), [])

    assert _titles(tiered.core) == ["s4", "s3", "s2", "s1", "s0"]


def test_sort_by_usage_is_stable_descending() -> None:
    skills = [
        make_skill("a", usage_count=1),
        make_skill("b", usage_count=5),
        make_skill("c", usage_count=1),
    ]

    assert _titles(sort_by_usage(skills)) == ["b", "a", "c"]


def test_progressive_context_accumulates_stages() -> None:
    core = make_skill("core")
    extended = make_skill("ext", tier=Tier.EXTENDED, categories=("ops",))
    library = make_skill("lib", tier=Tier.LIBRARY)
    tiered = TieredSkills(core=(core,), extended=(extended,), library=(library,))

    assert progressive_context(tiered, through=Tier.CORE) == [core]
    assert progressive_context(tiered, through=Tier.EXTENDED) == [core, extended]
    assert progressive_context(tiered) == [core, extended, library]


def test_progressive_context_limit_and_exclusions() -> None:
    core = make_skill("core")
    extended = tuple(make_skill(f"ext{index}", tier=Tier.EXTENDED) for index in range(3))
    tiered = TieredSkills(core=(core,), extended=extended)

    context = progressive_context(
        tiered,
        through=Tier.EXTENDED,
        exclude_ids={extended[0].id},
        limit=1,
    )

    assert context == [core, extended[1]]
