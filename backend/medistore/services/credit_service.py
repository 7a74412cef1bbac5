# Overview: Customer credit ("udhar") ledger; record, settle and total unpaid credit.

from __future__ import annotations

import logging
from datetime import date

from ..errors import CreditRecordNotFound, InvalidField
from ..records import (
    CREDIT_STATUS_PAID,
    CREDIT_STATUS_UNPAID,
    CREDIT_STATUSES,
    CreditRecord,
    new_id,
    round_money,
)
from ..storage import RecordStore
from ..time_utils import parse_iso_date, today
from ..validation import coerce_date, coerce_money, optional_text, reject_unknown, require_text

logger = logging.getLogger(__name__)

CREDIT_FIELDS = {"customer_name", "customer_phone", "amount", "due_date", "invoice_no", "note"}


class CreditLedger:
    def __init__(self, store: RecordStore):
        self.store = store

    def _load(self) -> list[CreditRecord]:
        return [CreditRecord.from_dict(c) for c in self.store.load("udhar")]

    def _save(self, credits: list[CreditRecord]) -> None:
        self.store.save("udhar", [c.to_dict() for c in credits])

    def get_credit(self, credit_id: str) -> CreditRecord:
        credit = next((c for c in self._load() if c.id == credit_id), None)
        if credit is None:
            raise CreditRecordNotFound(credit_id)
        return credit

    def add_credit(self, fields: dict) -> CreditRecord:
        reject_unknown(fields, CREDIT_FIELDS)
        credit = CreditRecord(
            id=new_id("udhar"),
            customer_name=require_text(fields.get("customer_name"), "customer_name"),
            customer_phone=optional_text(fields.get("customer_phone")),
            amount=coerce_money(fields.get("amount"), "amount", allow_zero=False),
            invoice_no=require_text(fields.get("invoice_no"), "invoice_no"),
            date=today().isoformat(),
            status=CREDIT_STATUS_UNPAID,
            due_date=coerce_date(fields.get("due_date"), "due_date"),
            note=optional_text(fields.get("note")),
        )
        with self.store.write_lock:
            credits = self._load()
            credits.append(credit)
            self._save(credits)
        logger.info("Udhar %s added for %s: %.2f", credit.id, credit.customer_name, credit.amount)
        return credit

    def update_credit(self, credit_id: str, updates: dict) -> CreditRecord:
        reject_unknown(updates, CREDIT_FIELDS | {"status", "paid_date"})
        with self.store.write_lock:
            credits = self._load()
            credit = next((c for c in credits if c.id == credit_id), None)
            if credit is None:
                raise CreditRecordNotFound(credit_id)
            for key, value in updates.items():
                if key == "amount":
                    value = coerce_money(value, key, allow_zero=False)
                elif key in ("customer_name", "invoice_no"):
                    value = require_text(value, key)
                elif key in ("due_date", "paid_date"):
                    value = coerce_date(value, key)
                elif key == "status":
                    if value not in CREDIT_STATUSES:
                        raise InvalidField("status", f"Unknown status: {value}")
                else:
                    value = optional_text(value)
                setattr(credit, key, value)
            self._save(credits)
        return credit

    def mark_paid(self, credit_id: str, paid_on: date | None = None) -> CreditRecord:
        return self.update_credit(credit_id, {
            "status": CREDIT_STATUS_PAID,
            "paid_date": (paid_on or today()).isoformat(),
        })

    def delete_credit(self, credit_id: str) -> None:
        with self.store.write_lock:
            credits = self._load()
            remaining = [c for c in credits if c.id != credit_id]
            if len(remaining) == len(credits):
                raise CreditRecordNotFound(credit_id)
            self._save(remaining)

    def list_credits(self, status: str | None = None, search: str | None = None) -> list[CreditRecord]:
        """Newest first; search matches customer name, phone or invoice number."""
        credits = self._load()
        if status and status != "all":
            credits = [c for c in credits if c.status == status]
        needle = (search or "").strip().lower()
        if needle:
            credits = [
                c for c in credits
                if needle in c.customer_name.lower()
                or needle in (c.customer_phone or "").lower()
                or needle in c.invoice_no.lower()
            ]
        return sorted(credits, key=lambda c: c.date, reverse=True)

    def total_unpaid(self) -> float:
        return round_money(sum(c.amount for c in self._load() if c.status == CREDIT_STATUS_UNPAID))

    def paid_this_month(self, on: date | None = None) -> float:
        on = on or today()
        total = 0.0
        for c in self._load():
            if c.status != CREDIT_STATUS_PAID or not c.paid_date:
                continue
            paid = parse_iso_date(c.paid_date)
            if paid and paid.year == on.year and paid.month == on.month:
                total += c.amount
        return round_money(total)
