"""Principal protocol used to key per-user settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Principal(Protocol):
    """Anything that can own per-user settings.

    Uses structural subtyping: any object exposing a stable ``identifier``
    string qualifies, whatever user model the host application has.
    """

    @property
    def identifier(self) -> str:
        """Stable identifier used as cache key and record owner."""
        ...


@dataclass(frozen=True)
class User:
    """Minimal principal for callers that only have a username."""

    identifier: str


def owner_of(user: Principal | None) -> str | None:
    """Return the record owner for ``user``; None means global."""
    if user is None:
        return None
    if not isinstance(user, Principal):
        raise TypeError(
            f"user must expose an 'identifier' attribute, got {type(user).__name__}"
        )
    identifier = user.identifier
    # An empty identifier would share storage with the global records
    if not isinstance(identifier, str) or not identifier:
        raise ValueError(
            f"user identifier must be a non-empty string, got {identifier!r}"
        )
    return identifier
