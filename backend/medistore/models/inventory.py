from __future__ import annotations

from ..extensions import db
from .base import RecordRowMixin


class MedicineRow(RecordRowMixin, db.Model):
    __tablename__ = "medicines"
    __table_args__ = (
        db.Index("ix_medicines_name_company", "name", "company"),
    )
    RECORD_FIELDS = (
        "id", "name", "company", "category", "cost_price", "sale_price",
        "stock", "reorder_level", "expiry", "batch_number",
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(120), nullable=True)
    cost_price = db.Column(db.Float, nullable=False, default=0)
    sale_price = db.Column(db.Float, nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    reorder_level = db.Column(db.Integer, nullable=False, default=0)
    expiry = db.Column(db.String(32), nullable=True)
    batch_number = db.Column(db.String(64), nullable=True)
