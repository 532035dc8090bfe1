"""Acting user."""

from __future__ import annotations

from dataclasses import dataclass

from skillshelf.domain.model.primitives import SkillOwner


@dataclass(frozen=True, slots=True, kw_only=True)
class Actor:
    """The signed-in user performing an operation. Every field may be missing."""

    user_id: str | None = None
    email: str | None = None
    name: str | None = None
    image: str | None = None

    @property
    def has_identity(self) -> bool:
        return bool(self.user_id or self.email)

    @property
    def label(self) -> str | None:
        """Short attribution used in history entries."""
        return self.email or self.name or self.user_id

    def as_owner(self) -> SkillOwner:
        return SkillOwner(
            name=self.name or self.email or "Unknown",
            user_id=self.user_id,
            email=self.email,
            image=self.image,
        )
