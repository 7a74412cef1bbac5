# Overview: Inventory ledger; owns each medicine's on-hand quantity.

"""
Inventory invariants

- Stock is an integer stored on the medicine record; sales and refunds change
  it only through `adjust_stock`.
- `adjust_stock` on an unknown medicine id is a silent no-op: historical
  sales and refunds may reference medicines deleted since.
- `adjust_stock` does not clamp at zero. Sale callers cap cart quantities at
  available stock before recording; manual removals go through
  `remove_stock`, which refuses to go below zero.
"""

from __future__ import annotations

import logging

from ..errors import InsufficientStock, InvalidQuantity, MedicineNotFound
from ..records import Medicine
from ..storage import RecordStore
from ..time_utils import days_until

logger = logging.getLogger(__name__)


def _positive_int(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(quantity)
    return quantity


class InventoryLedger:
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

    def find_medicine(self, medicine_id: str) -> Medicine | None:
        return next((m for m in self._load() if m.id == medicine_id), None)

    def adjust_stock(self, medicine_id: str, delta: int) -> None:
        """stock += delta and persist; no-op if the medicine no longer exists."""
        with self.store.write_lock:
            medicines = self._load()
            medicine = next((m for m in medicines if m.id == medicine_id), None)
            if medicine is None:
                logger.warning("Stock adjustment %+d skipped: medicine %s not found", delta, medicine_id)
                return
            medicine.stock += int(delta)
            self._save(medicines)
        logger.info("Stock of %s adjusted by %+d to %d", medicine_id, delta, medicine.stock)

    # ------------------------------------------------------------------
    # Manual stock adjustment (stock screen)
    # ------------------------------------------------------------------

    def restock(self, medicine_id: str, quantity: int) -> Medicine:
        quantity = _positive_int(quantity)
        with self.store.write_lock:
            self.get_medicine(medicine_id)
            self.adjust_stock(medicine_id, quantity)
            return self.get_medicine(medicine_id)

    def remove_stock(self, medicine_id: str, quantity: int) -> Medicine:
        quantity = _positive_int(quantity)
        with self.store.write_lock:
            medicine = self.get_medicine(medicine_id)
            if medicine.stock - quantity < 0:
                raise InsufficientStock(medicine_id, medicine.stock, quantity)
            self.adjust_stock(medicine_id, -quantity)
            return self.get_medicine(medicine_id)

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def low_stock(self, threshold: int | None = None) -> list[Medicine]:
        """Medicines at or below their reorder level (or a fixed threshold)."""
        return [
            m for m in self._load()
            if m.stock <= (threshold if threshold is not None else m.reorder_level)
        ]

    def expiring_soon(self, days: int = 30, *, on=None) -> list[Medicine]:
        """Medicines whose expiry falls within (0, days] days; expired ones are excluded."""
        out = []
        for m in self._load():
            left = days_until(m.expiry, on=on)
            if left is not None and 0 < left <= days:
                out.append(m)
        return out
