"""Scopes, setting definitions and persisted setting records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class Scope(str, Enum):
    GLOBAL = "global"
    USER = "user"
    ALL = "all"

    def allows(self, has_user: bool) -> bool:
        """Whether a value of this scope may be read or written in the given context."""
        if self is Scope.ALL:
            return True
        return (self is Scope.USER) == has_user


class SettingDefinition(BaseModel):
    """Static configuration for one named setting."""

    model_config = ConfigDict(frozen=True)

    scope: Scope = Scope.ALL

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_scope(cls, data: Any) -> Any:
        # `theme = "all"` is shorthand for `theme = {scope = "all"}`
        if isinstance(data, (str, Scope)):
            return {"scope": data}
        return data


@dataclass
class SettingRecord:
    """A persisted setting value.

    ``owner`` is None for global records, otherwise the user identifier.
    ``value`` holds the codec-encoded text.
    """

    name: str
    owner: str | None = None
    value: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        return (self.name, self.owner)
