"""Logging setup for the command line and scripts."""

from __future__ import annotations

import logging

from .env import optional_env
from .errors import InvalidConfigurationValueError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVEL_ENV = "SKILLSHELF_LOG_LEVEL"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Read ``SKILLSHELF_LOG_LEVEL`` (a level name such as ``DEBUG``), else ``default``."""

    raw = optional_env(LOG_LEVEL_ENV)
    if raw is None:
        return default
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise InvalidConfigurationValueError(LOG_LEVEL_ENV, raw, "a logging level name")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    ``level`` defaults to ``SKILLSHELF_LOG_LEVEL`` or INFO. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level if level is not None else resolve_log_level(),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
