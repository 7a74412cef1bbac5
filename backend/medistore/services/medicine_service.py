# Overview: Medicine catalogue; create, edit, delete and search medicine records.

from __future__ import annotations

import logging

from ..errors import DuplicateMedicine, MedicineNotFound
from ..records import Medicine, new_id
from ..storage import RecordStore
from ..validation import (
    coerce_date,
    coerce_int,
    coerce_money,
    optional_text,
    reject_unknown,
    require_text,
)

logger = logging.getLogger(__name__)

MEDICINE_FIELDS = {
    "name", "company", "category", "cost_price", "sale_price",
    "stock", "reorder_level", "expiry", "batch_number",
}


def _clean(data: dict, *, partial: bool) -> dict:
    reject_unknown(data, MEDICINE_FIELDS)
    out: dict = {}
    for key in ("name", "company"):
        if key in data or not partial:
            out[key] = require_text(data.get(key), key)
    for key in ("category", "batch_number"):
        if key in data:
            out[key] = optional_text(data[key]) or ""
    for key in ("cost_price", "sale_price"):
        if key in data:
            out[key] = coerce_money(data[key], key)
    for key in ("stock", "reorder_level"):
        if key in data:
            out[key] = coerce_int(data[key], key, minimum=0)
    if "expiry" in data:
        out["expiry"] = coerce_date(data["expiry"], "expiry") or ""
    return out


class MedicineCatalog:
    def __init__(self, store: RecordStore):
        self.store = store

    def _load(self) -> list[Medicine]:
        return [Medicine.from_dict(m) for m in self.store.load("medicines")]

    def _save(self, medicines: list[Medicine]) -> None:
        self.store.save("medicines", [m.to_dict() for m in medicines])

    def list_medicines(self) -> list[Medicine]:
        return self._load()

    def get_medicine(self, medicine_id: str) -> Medicine:
        medicine = next((m for m in self._load() if m.id == medicine_id), None)
        if medicine is None:
            raise MedicineNotFound(medicine_id)
        return medicine

    def search_medicines(self, term: str) -> list[Medicine]:
        needle = (term or "").strip().lower()
        if not needle:
            return self._load()
        return [
            m for m in self._load()
            if needle in m.name.lower()
            or needle in m.company.lower()
            or needle in (m.category or "").lower()
        ]

    def add_medicine(self, fields: dict) -> Medicine:
        """
        Create a medicine. Name + company must be unique (case-insensitive);
        the duplicate check runs before anything is written.
        """
        values = _clean(fields, partial=False)
        with self.store.write_lock:
            medicines = self._load()
            if any(m.matches(values["name"], values["company"]) for m in medicines):
                raise DuplicateMedicine(values["name"], values["company"])
            medicine = Medicine(id=new_id("med"), **values)
            medicines.append(medicine)
            self._save(medicines)
        logger.info("Medicine %s added (%s / %s)", medicine.id, medicine.name, medicine.company)
        return medicine

    def update_medicine(self, medicine_id: str, updates: dict) -> Medicine:
        values = _clean(updates, partial=True)
        with self.store.write_lock:
            medicines = self._load()
            medicine = next((m for m in medicines if m.id == medicine_id), None)
            if medicine is None:
                raise MedicineNotFound(medicine_id)
            name = values.get("name", medicine.name)
            company = values.get("company", medicine.company)
            if any(m.id != medicine_id and m.matches(name, company) for m in medicines):
                raise DuplicateMedicine(name, company)
            for key, value in values.items():
                setattr(medicine, key, value)
            self._save(medicines)
        return medicine

    def delete_medicine(self, medicine_id: str) -> None:
        """
        Remove a medicine. Sales and refunds keep their snapshots; later
        stock adjustments for this id become no-ops.
        """
        with self.store.write_lock:
            medicines = self._load()
            remaining = [m for m in medicines if m.id != medicine_id]
            if len(remaining) == len(medicines):
                raise MedicineNotFound(medicine_id)
            self._save(remaining)
        logger.info("Medicine %s deleted", medicine_id)
