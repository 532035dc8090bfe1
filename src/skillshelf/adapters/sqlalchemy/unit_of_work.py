"""SQLAlchemy-backed unit of work for the skill library.

The adapter owns a single process-wide database handle. :func:`startup` binds it
(creating the engine from configuration when none is passed), maps the model and
migrates the schema; every :class:`SqlAlchemyUnitOfWork` then opens its own session
from that handle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from skillshelf.adapters.sqlalchemy.mappings import start_mappers
from skillshelf.adapters.sqlalchemy.migrations import upgrade_head
from skillshelf.adapters.sqlalchemy.repositories import (
    SqlAlchemyCategoryRepository,
    SqlAlchemySkillRepository,
)
from skillshelf.config.storage import get_database_config
from skillshelf.domain.ports.unit_of_work import LibraryRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database handle is missing, or a unit of work is used outside ``with``."""


@dataclass(slots=True)
class _Database:
    engine: Engine
    sessions: sessionmaker[Session] = field(init=False)

    def __post_init__(self) -> None:
        self.sessions = sessionmaker(bind=self.engine, expire_on_commit=False)


_database: _Database | None = None


def _require_database() -> _Database:
    if _database is None:
        raise StartupError(
            "Skill library database not initialised; call startup() before opening "
            "a unit of work."
        )
    return _database


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the library database, map the model and migrate the schema to head.

    A second call without ``force=True`` is an error; with it, the previous engine is
    disposed and replaced.
    """

    global _database  # noqa: PLW0603

    if _database is not None and not force:
        raise StartupError("Skill library database already initialised; pass force=True.")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    upgrade_head(engine=bound)
    if _database is not None and _database.engine is not bound:
        _database.engine.dispose()
    _database = _Database(engine=bound)
    log.debug("Skill library database ready at %s", bound.url.render_as_string())


def is_started() -> bool:
    return _database is not None


def shutdown() -> None:
    """Dispose the engine and forget it; ``startup`` may be called again afterwards."""

    global _database  # noqa: PLW0603

    if _database is not None:
        _database.engine.dispose()
    _database = None


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block; rolled back on error, committed only explicitly."""

    def __init__(self) -> None:
        self._sessions = _require_database().sessions
        self._session: Session | None = None
        self._repositories: LibraryRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already in use")
        session = self._sessions()
        self._session = session
        self._repositories = LibraryRepositories(
            skills=SqlAlchemySkillRepository(session),
            categories=SqlAlchemyCategoryRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> LibraryRepositories:
        if self._repositories is None:
            raise StartupError("Repositories are only available inside the unit of work")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work has no open session")
        return self._session


if TYPE_CHECKING:
    from skillshelf.domain.ports.unit_of_work import LibraryUnitOfWork

    _uow_check: LibraryUnitOfWork = SqlAlchemyUnitOfWork()
