from __future__ import annotations

from ..extensions import db
from .base import RecordRowMixin


class SettingsRow(RecordRowMixin, db.Model):
    """Singleton shop configuration (one row, id=1)."""
    __tablename__ = "settings"
    RECORD_FIELDS = (
        "shop_name", "currency_symbol", "default_tax_percent",
        "default_discount_percent", "invoice_prefix", "invoice_footer",
        "show_customer_info", "enable_udhar", "low_stock_threshold",
        "expiry_alert_days", "dark_mode", "glassy_ui", "compact_sidebar",
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_name = db.Column(db.String(200), nullable=False)
    currency_symbol = db.Column(db.String(8), nullable=False)
    default_tax_percent = db.Column(db.Float, nullable=False, default=0)
    default_discount_percent = db.Column(db.Float, nullable=False, default=0)
    invoice_prefix = db.Column(db.String(32), nullable=False)
    invoice_footer = db.Column(db.String(255), nullable=True)
    show_customer_info = db.Column(db.Boolean, nullable=False, default=True)
    enable_udhar = db.Column(db.Boolean, nullable=False, default=True)
    low_stock_threshold = db.Column(db.Integer, nullable=False, default=50)
    expiry_alert_days = db.Column(db.Integer, nullable=False, default=30)
    dark_mode = db.Column(db.Boolean, nullable=False, default=False)
    glassy_ui = db.Column(db.Boolean, nullable=False, default=True)
    compact_sidebar = db.Column(db.Boolean, nullable=False, default=False)


class UserRow(RecordRowMixin, db.Model):
    """Advisory user list; no credentials are stored."""
    __tablename__ = "users"
    RECORD_FIELDS = ("id", "email", "role", "created_at_iso")

    id = db.Column(db.String(64), primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    role = db.Column(db.String(16), nullable=False, default="staff")
    created_at_iso = db.Column(db.String(32), nullable=True)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at_iso,
        }

    @classmethod
    def from_record(cls, data: dict):
        return cls(
            id=data.get("id"),
            email=data.get("email"),
            role=data.get("role"),
            created_at_iso=data.get("created_at"),
        )
