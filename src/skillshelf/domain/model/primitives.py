"""Value objects carried by skills: provenance records and history entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skillshelf.domain.model.entity import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from skillshelf.domain.model.enums import HistoryAction

type CategoryName = str
type Tag = str


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceUrl:
    """A URL the skill content was derived from."""

    url: str
    added_at: datetime = field(default_factory=utcnow)
    last_fetched_at: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SkillOwner:
    name: str
    user_id: str | None = None
    email: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class HistoryEntry:
    """Single audit line on a skill. ``user`` is the acting user's label, if known.

    ``action`` stays a plain string for actions this version does not know.
    """

    action: HistoryAction | str
    summary: str
    date: datetime = field(default_factory=utcnow)
    user: str | None = None
