from __future__ import annotations

from ..extensions import db
from .base import RecordRowMixin


class SaleRow(RecordRowMixin, db.Model):
    """Completed sale; line items are a JSON list on the row."""
    __tablename__ = "sales"
    RECORD_FIELDS = (
        "id", "date", "items", "subtotal", "discount", "tax", "total",
        "payment_method", "cash_received", "change_returned",
        "customer_name", "customer_phone",
    )

    id = db.Column(db.String(64), primary_key=True)
    date = db.Column(db.String(32), nullable=False, index=True)
    items = db.Column(db.JSON, nullable=False)
    subtotal = db.Column(db.Float, nullable=False)
    discount = db.Column(db.Float, nullable=False, default=0)
    tax = db.Column(db.Float, nullable=False, default=0)
    total = db.Column(db.Float, nullable=False)
    payment_method = db.Column(db.String(16), nullable=False)
    cash_received = db.Column(db.Float, nullable=True)
    change_returned = db.Column(db.Float, nullable=True)
    customer_name = db.Column(db.String(200), nullable=True)
    customer_phone = db.Column(db.String(32), nullable=True)


class RefundRow(RecordRowMixin, db.Model):
    __tablename__ = "refunds"
    RECORD_FIELDS = (
        "id", "sale_id", "invoice_no", "date", "items", "amount", "reason",
        "notes", "status", "customer_name", "customer_phone",
    )

    id = db.Column(db.String(64), primary_key=True)
    sale_id = db.Column(db.String(64), db.ForeignKey("sales.id"), nullable=True, index=True)
    invoice_no = db.Column(db.String(64), nullable=True)
    date = db.Column(db.String(32), nullable=False)
    items = db.Column(db.JSON, nullable=False)
    amount = db.Column(db.Float, nullable=False)
    reason = db.Column(db.String(32), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(16), nullable=True)
    customer_name = db.Column(db.String(200), nullable=True)
    customer_phone = db.Column(db.String(32), nullable=True)
