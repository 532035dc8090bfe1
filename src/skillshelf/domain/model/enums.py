"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    SKILL = "skill"
    CATEGORY = "category"


class Tier(StrEnum):
    """Progressive-disclosure placement of a skill in the answer context."""

    CORE = "core"
    EXTENDED = "extended"
    LIBRARY = "library"


class HistoryAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    OWNER_ADDED = "owner_added"
    OWNER_REMOVED = "owner_removed"
    MERGED = "merged"
    REFRESHED = "refreshed"
    CATEGORY_RENAMED = "category_renamed"


class DraftStatus(StrEnum):
    GENERATING = "generating"
    READY = "ready"
    DEGRADED = "degraded"


class RecommendationType(StrEnum):
    MERGE = "merge"
    SPLIT = "split"
    RENAME = "rename"
    RETAG = "retag"
    GAP = "gap"


class RecommendationPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
