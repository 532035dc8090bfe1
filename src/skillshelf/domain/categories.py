"""Category maintenance that has to touch skills as well as the registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skillshelf.domain.model import HistoryAction, HistoryEntry, SkillPatch

if TYPE_CHECKING:
    from uuid import UUID

    from skillshelf.domain.model import Actor, CategoryName, Skill
    from skillshelf.domain.ports.persistence import CategoryStore, SkillStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CategoryRenameResult:
    old: CategoryName
    new: CategoryName
    updated: list[UUID] = field(default_factory=list)
    failed: list[UUID] = field(default_factory=list)


def rekey_patch(
    skill: Skill,
    old: CategoryName,
    new: CategoryName,
    *,
    actor: Actor | None = None,
) -> SkillPatch | None:
    """Patch moving ``skill``'s membership and tier override from ``old`` to ``new``."""

    if old not in skill.categories and old not in skill.tier_overrides:
        return None
    # a stale membership or override left under ``new`` collapses into the renamed one
    categories = tuple(dict.fromkeys(new if name == old else name for name in skill.categories))
    overrides = {name: tier for name, tier in skill.tier_overrides.items() if name != old}
    if old in skill.tier_overrides:
        overrides[new] = skill.tier_overrides[old]
    entry = HistoryEntry(
        action=HistoryAction.CATEGORY_RENAMED,
        summary=f"Category renamed: {old} -> {new}",
        user=actor.label if actor else None,
    )
    return SkillPatch(categories=categories, tier_overrides=overrides, append_history=(entry,))


def rename_category(
    old: CategoryName,
    new: CategoryName,
    *,
    categories: CategoryStore,
    skills: SkillStore,
    actor: Actor | None = None,
) -> CategoryRenameResult:
    """Rename a category and rekey every skill that references it, one skill at a time."""

    renamed = categories.rename(old, new)
    result = CategoryRenameResult(old=old, new=renamed.name)
    if renamed.name == old:
        return result
    for skill in skills.list_skills():
        patch = rekey_patch(skill, old, renamed.name, actor=actor)
        if patch is None:
            continue
        try:
            skills.update(skill.id, patch)
        except Exception:  # noqa: BLE001
            log.exception("Failed to rekey skill %s after renaming %r", skill.id, old)
            result.failed.append(skill.id)
            continue
        result.updated.append(skill.id)
    log.info(
        "Renamed category %r to %r: updated=%s, failed=%s",
        old,
        renamed.name,
        len(result.updated),
        len(result.failed),
    )
    return result
