"""The acting user for command-line sessions."""

from __future__ import annotations

from skillshelf.domain.model import Actor

from .env import optional_env


def get_actor_config() -> Actor:
    """Build the actor from ``SKILLSHELF_USER_*``; all fields are optional."""

    return Actor(
        user_id=optional_env("SKILLSHELF_USER_ID"),
        email=optional_env("SKILLSHELF_USER_EMAIL"),
        name=optional_env("SKILLSHELF_USER_NAME"),
    )
