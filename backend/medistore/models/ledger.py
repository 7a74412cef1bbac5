from __future__ import annotations

from ..extensions import db
from .base import RecordRowMixin


class CreditRow(RecordRowMixin, db.Model):
    """Customer credit ("udhar") record."""
    __tablename__ = "udhar"
    RECORD_FIELDS = (
        "id", "customer_name", "customer_phone", "amount", "status", "date",
        "due_date", "paid_date", "invoice_no", "note",
    )

    id = db.Column(db.String(64), primary_key=True)
    customer_name = db.Column(db.String(200), nullable=False)
    customer_phone = db.Column(db.String(32), nullable=True)
    amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(16), nullable=False, default="unpaid", index=True)
    date = db.Column(db.String(32), nullable=False)
    due_date = db.Column(db.String(32), nullable=True)
    paid_date = db.Column(db.String(32), nullable=True)
    invoice_no = db.Column(db.String(64), nullable=False)
    note = db.Column(db.Text, nullable=True)


class ExpenseRow(RecordRowMixin, db.Model):
    __tablename__ = "expenses"
    RECORD_FIELDS = ("id", "date", "type", "amount", "note")

    id = db.Column(db.String(64), primary_key=True)
    date = db.Column(db.String(32), nullable=False)
    type = db.Column(db.String(64), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    note = db.Column(db.Text, nullable=True)
