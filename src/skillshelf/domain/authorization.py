"""Ownership-based edit permission."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from skillshelf.domain.model import Actor, Skill


def can_edit(skill: Skill, actor: Actor | None) -> bool:
    """Ownerless skills are editable by anyone; owned ones only by a matching owner.

    An actor matches an owner by user id, or by e-mail compared case-insensitively.
    """

    if skill.is_ownerless:
        return True
    if actor is None or not actor.has_identity:
        return False
    email = actor.email.lower() if actor.email else None
    for owner in skill.owners:
        if actor.user_id and owner.user_id == actor.user_id:
            return True
        if email and owner.email and owner.email.lower() == email:
            return True
    return False


def editable(skills: Iterable[Skill], actor: Actor | None) -> list[Skill]:
    return [skill for skill in skills if can_edit(skill, actor)]
