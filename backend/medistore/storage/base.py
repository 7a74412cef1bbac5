# Overview: Record store port; whole-collection load/save shared by every backend.

from __future__ import annotations

import threading

COLLECTIONS = (
    "medicines",
    "sales",
    "refunds",
    "udhar",
    "expenses",
    "settings",
    "users",
)


class RecordStore:
    """
    Durable keyed persistence, one list of flat records per collection.

    There is no row-level update primitive: writers load the whole collection,
    mutate it in memory and save it back. `write_lock` serialises those
    read-modify-write sequences inside one process; it gives no guarantee
    across processes or devices.
    """

    def __init__(self):
        self.write_lock = threading.RLock()

    def _check(self, collection: str) -> None:
        if collection not in COLLECTIONS:
            raise KeyError(f"unknown collection: {collection}")

    def load(self, collection: str) -> list[dict]:
        """Every record of the collection; empty list if never written."""
        raise NotImplementedError

    def save(self, collection: str, records: list[dict]) -> None:
        """Replace the collection's contents."""
        raise NotImplementedError

    def clear(self, collection: str) -> None:
        self.save(collection, [])
