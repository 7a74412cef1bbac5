"""
Backup / restore of the whole pharmacy dataset.

Export format (JSON object):

    {
      "medicines": [...], "sales": [...], "expenses": [...],
      "refunds": [...], "udhars": [...], "settings": {...}, "users": [...],
      "exportDate": "2024-01-01T00:00:00Z", "version": "1.0"
    }

Import replaces every collection present in the payload. Refunds reference
sales, so refunds are cleared before sales are replaced and written after.
"""

from __future__ import annotations

import logging

from ..errors import InvalidField
from ..records import Settings
from ..storage import COLLECTIONS, RecordStore
from ..time_utils import now_iso

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"

# Export key -> store collection. Credit records travel as "udhars".
LIST_KEYS = {
    "medicines": "medicines",
    "sales": "sales",
    "expenses": "expenses",
    "refunds": "refunds",
    "udhars": "udhar",
}


class BackupService:
    def __init__(self, store: RecordStore):
        self.store = store

    def export_data(self) -> dict:
        data = {key: self.store.load(collection) for key, collection in LIST_KEYS.items()}
        settings = self.store.load("settings")
        data["settings"] = Settings.from_dict(settings[0]).to_dict() if settings else Settings().to_dict()
        data["users"] = self.store.load("users")
        data["exportDate"] = now_iso()
        data["version"] = EXPORT_VERSION
        return data

    def import_data(self, payload: dict) -> dict:
        """Replace stored data with an export payload; returns the new data_stats()."""
        if not isinstance(payload, dict) or not payload.get("version"):
            raise InvalidField("version", "Invalid data format")

        lists = {}
        for key in LIST_KEYS:
            value = payload.get(key) or []
            if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
                raise InvalidField(key, f"{key} must be a list of objects")
            lists[key] = value

        settings = payload.get("settings")
        if settings is not None and not isinstance(settings, dict):
            raise InvalidField("settings", "settings must be an object")
        users = payload.get("users") or []
        if not isinstance(users, list):
            raise InvalidField("users", "users must be a list of objects")

        with self.store.write_lock:
            self.store.clear("refunds")
            self.store.save("medicines", lists["medicines"])
            self.store.save("sales", lists["sales"])
            self.store.save("expenses", lists["expenses"])
            self.store.save("refunds", lists["refunds"])
            self.store.save("udhar", lists["udhars"])
            if settings:
                self.store.save("settings", [Settings.from_dict(settings).to_dict()])
            if users:
                self.store.save("users", users)

        stats = self.data_stats()
        logger.info("Imported backup version %s: %s", payload["version"], stats)
        return stats

    def clear_all(self) -> None:
        with self.store.write_lock:
            self.store.clear("refunds")
            for collection in COLLECTIONS:
                if collection != "refunds":
                    self.store.clear(collection)
        logger.warning("All pharmacy data cleared")

    def data_stats(self) -> dict:
        return {
            "medicines": len(self.store.load("medicines")),
            "sales": len(self.store.load("sales")),
            "expenses": len(self.store.load("expenses")),
            "refunds": len(self.store.load("refunds")),
            "udhars": len(self.store.load("udhar")),
            "users": len(self.store.load("users")),
        }
