"""Identity keys and the keyed "merge unique" primitive.

Tags, source URLs and owners are all unioned the same way: concatenate the groups in
order and keep the first item seen for every identity key. Only the key function
differs per collection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from skillshelf.domain.model.primitives import SkillOwner, SourceUrl


def merge_unique[T](*groups: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Concatenate ``groups`` keeping the first item for every distinct ``key``."""

    seen: set[Hashable] = set()
    merged: list[T] = []
    for group in groups:
        for item in group:
            identity = key(item)
            if identity in seen:
                continue
            seen.add(identity)
            merged.append(item)
    return merged


def tag_identity(tag: str) -> str:
    # case-sensitive on purpose: "API" and "api" are distinct tags
    return tag


def normalize_url(url: str) -> str:
    return url.lower().rstrip("/")


def source_url_identity(source: SourceUrl) -> str:
    return normalize_url(source.url)


def owner_identity(owner: SkillOwner) -> tuple[str, str]:
    """Owners are the same person if their user ids match, else if their names match."""

    if owner.user_id:
        return ("user_id", owner.user_id)
    return ("name", owner.name)


def merge_tags(*groups: Iterable[str]) -> list[str]:
    return merge_unique(*groups, key=tag_identity)


def merge_source_urls(*groups: Iterable[SourceUrl]) -> list[SourceUrl]:
    return merge_unique(*groups, key=source_url_identity)


def merge_owners(*groups: Iterable[SkillOwner]) -> list[SkillOwner]:
    return merge_unique(*groups, key=owner_identity)
