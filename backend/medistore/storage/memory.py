from __future__ import annotations

import copy

from .base import RecordStore


class MemoryRecordStore(RecordStore):
    """In-process store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, list[dict]] | None = None):
        super().__init__()
        self._data: dict[str, list[dict]] = {}
        for collection, records in (initial or {}).items():
            self.save(collection, records)

    def load(self, collection: str) -> list[dict]:
        self._check(collection)
        return copy.deepcopy(self._data.get(collection, []))

    def save(self, collection: str, records: list[dict]) -> None:
        self._check(collection)
        self._data[collection] = copy.deepcopy(list(records))
