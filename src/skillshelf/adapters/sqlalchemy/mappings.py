"""SQLAlchemy mapping metadata for the skillshelf domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from skillshelf.domain.model import (
    Category,
    HistoryAction,
    HistoryEntry,
    Skill,
    SkillOwner,
    SourceUrl,
    Tier,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

type JSONObject = dict[str, Any]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _dump_datetime(value: datetime | None) -> str | None:
    return value.astimezone(UTC).isoformat() if value is not None else None


def _load_datetime(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _load_action(value: object) -> HistoryAction | str:
    raw = str(value)
    try:
        return HistoryAction(raw)
    except ValueError:
        log.warning("Keeping unknown history action %r as text", raw)
        return raw


class _JSONText[T](TypeDecorator[T]):
    """Stores a value collection as JSON text. Subclasses convert to and from payloads."""

    impl = Text
    cache_ok = True

    def dump(self, value: T) -> object:
        raise NotImplementedError

    def load(self, payload: object) -> T:
        raise NotImplementedError

    def process_bind_param(self, value: T | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(self.dump(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> T:
        _ = dialect
        payload = json.loads(value) if value else None
        return self.load(payload)


def _items(payload: object) -> list[Any]:
    if not isinstance(payload, list):
        return []
    return cast(list[Any], payload)


class StringTupleType(_JSONText[tuple[str, ...]]):
    cache_ok = True

    def dump(self, value: tuple[str, ...]) -> object:
        return list(value)

    def load(self, payload: object) -> tuple[str, ...]:
        return tuple(item for item in _items(payload) if isinstance(item, str))


class TierOverridesType(_JSONText[dict[str, Tier]]):
    cache_ok = True

    def dump(self, value: Mapping[str, Tier]) -> object:
        return {name: Tier(tier).value for name, tier in value.items()}

    def load(self, payload: object) -> dict[str, Tier]:
        if not isinstance(payload, dict):
            return {}
        mapping = cast(JSONObject, payload)
        return {str(name): Tier(tier) for name, tier in mapping.items()}


class SourceUrlsType(_JSONText[tuple[SourceUrl, ...]]):
    cache_ok = True

    def dump(self, value: tuple[SourceUrl, ...]) -> object:
        return [
            {
                "url": source.url,
                "added_at": _dump_datetime(source.added_at),
                "last_fetched_at": _dump_datetime(source.last_fetched_at),
            }
            for source in value
        ]

    def load(self, payload: object) -> tuple[SourceUrl, ...]:
        sources: list[SourceUrl] = []
        for item in _items(payload):
            record = cast(JSONObject, item)
            added_at = _load_datetime(record.get("added_at"))
            sources.append(
                SourceUrl(
                    url=str(record["url"]),
                    added_at=added_at or datetime.now(UTC),
                    last_fetched_at=_load_datetime(record.get("last_fetched_at")),
                )
            )
        return tuple(sources)


class OwnersType(_JSONText[tuple[SkillOwner, ...]]):
    cache_ok = True

    def dump(self, value: tuple[SkillOwner, ...]) -> object:
        return [
            {
                "name": owner.name,
                "user_id": owner.user_id,
                "email": owner.email,
                "image": owner.image,
            }
            for owner in value
        ]

    def load(self, payload: object) -> tuple[SkillOwner, ...]:
        return tuple(
            SkillOwner(
                name=str(record["name"]),
                user_id=record.get("user_id"),
                email=record.get("email"),
                image=record.get("image"),
            )
            for record in (cast(JSONObject, item) for item in _items(payload))
        )


class HistoryType(_JSONText[tuple[HistoryEntry, ...]]):
    cache_ok = True

    def dump(self, value: tuple[HistoryEntry, ...]) -> object:
        return [
            {
                "date": _dump_datetime(entry.date),
                "action": str(entry.action),
                "summary": entry.summary,
                "user": entry.user,
            }
            for entry in value
        ]

    def load(self, payload: object) -> tuple[HistoryEntry, ...]:
        entries: list[HistoryEntry] = []
        for item in _items(payload):
            record = cast(JSONObject, item)
            date = _load_datetime(record.get("date")) or datetime.now(UTC)
            entries.append(
                HistoryEntry(
                    action=_load_action(record["action"]),
                    summary=str(record.get("summary", "")),
                    date=date,
                    user=record.get("user"),
                )
            )
        return tuple(entries)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

skill_table = Table(
    "skill",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("title", String(500), nullable=False),
    Column("content", Text, nullable=False),
    Column("tags", StringTupleType(), nullable=False),
    Column("categories", StringTupleType(), nullable=False),
    Column("tier", Enum(Tier, native_enum=False, length=16), nullable=False),
    Column("tier_overrides", TierOverridesType(), nullable=False),
    Column("source_urls", SourceUrlsType(), nullable=False),
    Column("owners", OwnersType(), nullable=False),
    Column("history", HistoryType(), nullable=False),
    Column("usage_count", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("last_refreshed_at", UTCDateTime(), nullable=True),
)

category_table = Table(
    "category",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("name", String(200), nullable=False, unique=True),
    Column("position", Integer, nullable=False, default=0),
)


@cache
def start_mappers() -> None:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(Skill, skill_table)
    mapper_registry.map_imperatively(Category, category_table)
    configure_mappers()
    log.debug("SQLAlchemy mappers configured")
