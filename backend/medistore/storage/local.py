# Overview: Client-side key-value store; one JSON document per namespace on local disk.

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import StorageError
from .base import RecordStore

logger = logging.getLogger(__name__)


class LocalRecordStore(RecordStore):
    """
    Key-value persistence in `<directory>/<namespace>.json`.

    Each collection lives under the key `<namespace>_<collection>`
    (e.g. `pharmacy_medicines`). Writes go to a temp file that replaces the
    document atomically, so a crash never leaves a half-written file.
    """

    def __init__(self, directory: str | os.PathLike, namespace: str = "pharmacy"):
        super().__init__()
        self.directory = Path(directory)
        self.namespace = namespace
        self.path = self.directory / f"{namespace}.json"

    def key(self, collection: str) -> str:
        return f"{self.namespace}_{collection}"

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading %s: %s", self.path, exc)
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a key-value document")
        return data

    def _write(self, data: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{self.namespace}-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error("Error saving %s: %s", self.path, exc)
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def load(self, collection: str) -> list[dict]:
        self._check(collection)
        return list(self._read().get(self.key(collection), []))

    def save(self, collection: str, records: list[dict]) -> None:
        self._check(collection)
        with self.write_lock:
            data = self._read()
            data[self.key(collection)] = list(records)
            self._write(data)
