"""
Record store backends.

    store = build_record_store(app.config)
    store.load("sales")          -> list[dict]
    store.save("sales", records) -> None
"""

from __future__ import annotations

from pathlib import Path

from .base import COLLECTIONS, RecordStore
from .memory import MemoryRecordStore
from .local import LocalRecordStore


def build_record_store(config) -> RecordStore:
    method = config.get("STORAGE_METHOD", "local")
    if method == "memory":
        return MemoryRecordStore()
    if method == "local":
        return LocalRecordStore(
            Path(config.get("STORAGE_PATH", "data")),
            namespace=config.get("STORAGE_NAMESPACE", "pharmacy"),
        )
    if method == "sql":
        from .sql import SqlRecordStore
        return SqlRecordStore()
    raise ValueError(f"unknown STORAGE_METHOD: {method}")


__all__ = [
    "COLLECTIONS",
    "RecordStore",
    "MemoryRecordStore",
    "LocalRecordStore",
    "build_record_store",
]
