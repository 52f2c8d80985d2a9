"""Dict-backed setting store for tests and single-process hosts."""

from __future__ import annotations

from typing import Iterable

from scoped_settings.manager.models import SettingRecord
from scoped_settings.utils.logging import get_logger

logger = get_logger(__name__)


class InMemorySettingStore:
    """Keeps committed records in a dict keyed by (name, owner)."""

    def __init__(self, records: Iterable[SettingRecord] = ()) -> None:
        self._records: dict[tuple[str, str | None], SettingRecord] = {
            r.key: r for r in records
        }
        self._staged: list[SettingRecord] = []
        self.flush_count = 0

    def find_by(
        self,
        names: Iterable[str] | None = None,
        owner: str | None = None,
    ) -> list[SettingRecord]:
        wanted = set(names) if names is not None else None
        return [
            r
            for r in self._records.values()
            if r.owner == owner and (wanted is None or r.name in wanted)
        ]

    def persist(self, record: SettingRecord) -> None:
        self._staged.append(record)

    def flush(self) -> None:
        for record in self._staged:
            self._records[record.key] = record
        staged = len(self._staged)
        self._staged.clear()
        self.flush_count += 1
        logger.debug("store_flushed", store="memory", staged=staged, total=len(self._records))

    def records(self) -> list[SettingRecord]:
        """All committed records, in insertion order."""
        return list(self._records.values())
