"""Tagged outcomes returned by external collaborators.

Collaborators never signal failure by returning plausible-looking data: they return
``Ok`` with a value, ``Degraded`` when they could only partially do the work, or
``Failed`` with an error message.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T


@dataclass(frozen=True, slots=True)
class Degraded:
    reason: str


@dataclass(frozen=True, slots=True)
class Failed:
    error: str


type Outcome[T] = Ok[T] | Degraded | Failed


def failure_reason(outcome: Degraded | Failed) -> str:
    if isinstance(outcome, Degraded):
        return outcome.reason
    return outcome.error
