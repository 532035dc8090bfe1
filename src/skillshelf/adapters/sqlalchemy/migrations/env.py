"""Alembic environment for the skill library schema.

``upgrade_head`` hands over an open connection through ``config.attributes``; the
command-line ``alembic`` entry point falls back to ``sqlalchemy.url`` or the
configured database URI.
"""

from __future__ import annotations

from logging.config import fileConfig
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from skillshelf.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from skillshelf.config.storage import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

start_mappers()
target_metadata = mapper_registry.metadata

# skill and category columns are altered through batch mode on SQLite
_OPTIONS = {"target_metadata": target_metadata, "render_as_batch": True, "compare_type": True}


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


if context.is_offline_mode():
    context.configure(url=_database_url(), literal_binds=True, **_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()
elif (handed_over := config.attributes.get("connection")) is not None:
    _migrate(handed_over)
else:
    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _migrate(connection)
    finally:
        engine.dispose()
