"""Public domain model surface."""

from __future__ import annotations

from skillshelf.domain.model.category import Category, CategoryError, CategoryRegistry
from skillshelf.domain.model.entity import Entity, new_id, utcnow
from skillshelf.domain.model.enums import (
    DraftStatus,
    EntityType,
    HistoryAction,
    RecommendationPriority,
    RecommendationType,
    Tier,
)
from skillshelf.domain.model.primitives import (
    CategoryName,
    HistoryEntry,
    SkillOwner,
    SourceUrl,
    Tag,
)
from skillshelf.domain.model.skill import Skill, SkillPatch, new_skill
from skillshelf.domain.model.user import Actor

__all__ = [
    "Actor",
    "Category",
    "CategoryError",
    "CategoryName",
    "CategoryRegistry",
    "DraftStatus",
    "Entity",
    "EntityType",
    "HistoryAction",
    "HistoryEntry",
    "RecommendationPriority",
    "RecommendationType",
    "Skill",
    "SkillOwner",
    "SkillPatch",
    "SourceUrl",
    "Tag",
    "Tier",
    "new_id",
    "new_skill",
    "utcnow",
]
