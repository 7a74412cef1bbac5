from __future__ import annotations

import logging
from dataclasses import fields

from ..records import Settings
from ..storage import RecordStore
from ..validation import (
    coerce_bool,
    coerce_int,
    coerce_percent,
    optional_text,
    reject_unknown,
    require_text,
)

logger = logging.getLogger(__name__)

SETTING_FIELDS = {f.name for f in fields(Settings)}
PERCENT_FIELDS = {"default_tax_percent", "default_discount_percent"}
COUNT_FIELDS = {"low_stock_threshold", "expiry_alert_days"}
FLAG_FIELDS = {"show_customer_info", "enable_udhar", "dark_mode", "glassy_ui", "compact_sidebar"}
REQUIRED_TEXT_FIELDS = {"shop_name", "currency_symbol"}


class SettingsService:
    """Singleton shop configuration; falls back to defaults until first saved."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_settings(self) -> Settings:
        rows = self.store.load("settings")
        if not rows:
            return Settings()
        return Settings.from_dict(rows[0])

    def update_settings(self, updates: dict) -> Settings:
        reject_unknown(updates, SETTING_FIELDS)
        clean: dict = {}
        for key, value in updates.items():
            if key in PERCENT_FIELDS:
                clean[key] = coerce_percent(value, key)
            elif key in COUNT_FIELDS:
                clean[key] = coerce_int(value, key, minimum=0)
            elif key in FLAG_FIELDS:
                clean[key] = coerce_bool(value, key)
            elif key in REQUIRED_TEXT_FIELDS:
                clean[key] = require_text(value, key)
            else:
                clean[key] = optional_text(value) or ""

        with self.store.write_lock:
            settings = self.get_settings()
            for key, value in clean.items():
                setattr(settings, key, value)
            self.store.save("settings", [settings.to_dict()])
        logger.info("Settings updated: %s", ", ".join(sorted(clean)) or "no changes")
        return settings

    def reset_settings(self) -> Settings:
        self.store.clear("settings")
        return Settings()
