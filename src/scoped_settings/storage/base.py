"""Setting store Protocol."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from scoped_settings.manager.models import SettingRecord


@runtime_checkable
class SettingStore(Protocol):
    """Persistence contract the settings manager writes through.

    Records returned by ``find_by`` stay attached to the store: changing
    their ``value`` and calling ``flush`` persists the change, the same way
    newly ``persist``-ed records are committed.
    """

    def find_by(
        self,
        names: Iterable[str] | None = None,
        owner: str | None = None,
    ) -> list[SettingRecord]:
        """Return records owned by ``owner`` (None = global), optionally limited to ``names``."""
        ...

    def persist(self, record: SettingRecord) -> None:
        """Stage a new record for the next flush."""
        ...

    def flush(self) -> None:
        """Commit staged and modified records in one transaction."""
        ...
