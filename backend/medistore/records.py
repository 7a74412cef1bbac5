"""
Plain records persisted by the record store.

Every entity is a flat dataclass that round-trips through `to_dict()` /
`from_dict()`; line items of sales and refunds are nested lists inside their
parent record. Stores only ever see the dict form.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import asdict, dataclass, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Any


# =============================================================================
# CONSTANTS
# =============================================================================

PAYMENT_CASH = "cash"
PAYMENT_CARD = "card"
PAYMENT_CREDIT = "credit"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD, PAYMENT_CREDIT)
# Older records call store credit "udhar"
PAYMENT_ALIASES = {"udhar": PAYMENT_CREDIT}

REFUND_REASONS = ("defective", "expired", "wrong_item", "customer_request", "other")

REFUND_STATUS_COMPLETED = "completed"
REFUND_STATUS_PENDING = "pending"
REFUND_STATUSES = (REFUND_STATUS_COMPLETED, REFUND_STATUS_PENDING)

CREDIT_STATUS_PAID = "paid"
CREDIT_STATUS_UNPAID = "unpaid"
CREDIT_STATUSES = (CREDIT_STATUS_PAID, CREDIT_STATUS_UNPAID)

ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
USER_ROLES = (ROLE_ADMIN, ROLE_STAFF)

LINE_AVAILABLE = "Available"
LINE_PARTIALLY_REFUNDED = "Partially Refunded"
LINE_FULLY_REFUNDED = "Fully Refunded"

_CENT = Decimal("0.01")


def round_money(value: float | Decimal) -> float:
    """Round to cents, half-up on the cent boundary."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def new_id(prefix: str) -> str:
    """Opaque id: <prefix>_<epoch ms>_<9 hex chars>."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def normalize_payment_method(value: str | None) -> str | None:
    if value is None:
        return None
    method = str(value).strip().lower()
    return PAYMENT_ALIASES.get(method, method)


def _known(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


class _Record:
    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        return cls(**_known(cls, data))


# =============================================================================
# INVENTORY
# =============================================================================

@dataclass
class Medicine(_Record):
    id: str
    name: str
    company: str
    category: str = ""
    cost_price: float = 0.0
    sale_price: float = 0.0
    stock: int = 0
    reorder_level: int = 0
    expiry: str = ""
    batch_number: str = ""

    def matches(self, name: str, company: str) -> bool:
        return (
            self.name.strip().lower() == name.strip().lower()
            and self.company.strip().lower() == company.strip().lower()
        )


# =============================================================================
# SALES
# =============================================================================

@dataclass
class CartLine(_Record):
    """One medicine in a cart; persisted unchanged as a sale line item."""
    medicine_id: str
    name: str
    company: str
    unit_price: float
    quantity: int
    discount_pct: float = 0.0
    batch_number: str = ""
    stock: int = 0

    @property
    def gross(self) -> float:
        return self.unit_price * self.quantity

    @property
    def discount_amount(self) -> float:
        return self.gross * self.discount_pct / 100


SaleLineItem = CartLine


@dataclass
class PaymentInfo:
    method: str = PAYMENT_CASH
    cash_received: float | None = None


@dataclass
class CustomerInfo:
    name: str | None = None
    phone: str | None = None


@dataclass
class SaleTotals(_Record):
    subtotal: float
    total_discount: float
    tax: float
    total: float
    profit: float


@dataclass
class Sale(_Record):
    """
    Completed transaction. Immutable once stored:
    total == subtotal - discount + tax, computed once at creation.
    """
    id: str
    date: str
    items: list[CartLine]
    subtotal: float
    discount: float
    tax: float
    total: float
    payment_method: str
    cash_received: float | None = None
    change_returned: float | None = None
    customer_name: str | None = None
    customer_phone: str | None = None

    @property
    def invoice_no(self) -> str:
        return self.id[:12]

    def line_for(self, medicine_id: str) -> CartLine | None:
        return next((i for i in self.items if i.medicine_id == medicine_id), None)

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        values = _known(cls, data)
        if "payment_method" not in values and "payment_type" in data:
            values["payment_method"] = data["payment_type"]
        values["payment_method"] = normalize_payment_method(values.get("payment_method"))
        values["items"] = [CartLine.from_dict(i) for i in data.get("items") or []]
        return cls(**values)


# =============================================================================
# REFUNDS
# =============================================================================

@dataclass
class RefundLineItem(_Record):
    """
    Refunded part of one sale line. Name/company/batch and price terms are
    snapshots taken at refund time; they are never re-read from the medicine.
    `discount` is a per-unit amount, not a percentage.
    """
    medicine_id: str
    medicine_name: str
    company: str
    batch_number: str
    quantity: int
    original_quantity: int
    unit_price: float
    discount: float
    total_price: float


@dataclass
class Refund(_Record):
    id: str
    sale_id: str
    invoice_no: str
    date: str
    items: list[RefundLineItem]
    amount: float
    reason: str
    notes: str | None = None
    status: str = REFUND_STATUS_COMPLETED
    customer_name: str | None = None
    customer_phone: str | None = None

    def quantity_for(self, medicine_id: str) -> int:
        return sum(i.quantity for i in self.items if i.medicine_id == medicine_id)

    @classmethod
    def from_dict(cls, data: dict) -> "Refund":
        values = _known(cls, data)
        values["items"] = [RefundLineItem.from_dict(i) for i in data.get("items") or []]
        return cls(**values)


@dataclass
class RefundCheck(_Record):
    valid: bool
    available_quantity: int
    message: str | None = None


# =============================================================================
# CREDIT, EXPENSES, SETTINGS, USERS
# =============================================================================

@dataclass
class CreditRecord(_Record):
    id: str
    customer_name: str
    amount: float
    invoice_no: str
    date: str
    status: str = CREDIT_STATUS_UNPAID
    customer_phone: str | None = None
    due_date: str | None = None
    paid_date: str | None = None
    note: str | None = None


@dataclass
class Expense(_Record):
    id: str
    date: str
    type: str
    amount: float
    note: str = ""


@dataclass
class Settings(_Record):
    shop_name: str = "MediStore Pharmacy"
    currency_symbol: str = "Rs"
    default_tax_percent: float = 5.0
    default_discount_percent: float = 0.0
    invoice_prefix: str = "INV-"
    invoice_footer: str = "Thank you for your business!"
    show_customer_info: bool = True
    enable_udhar: bool = True
    low_stock_threshold: int = 50
    expiry_alert_days: int = 30
    dark_mode: bool = False
    glassy_ui: bool = True
    compact_sidebar: bool = False


@dataclass
class User(_Record):
    id: str
    email: str
    role: str = ROLE_STAFF
    created_at: str = ""


def records_to_dicts(records: list[Any]) -> list[dict]:
    return [r.to_dict() for r in records]


__all__ = [
    "Medicine", "CartLine", "SaleLineItem", "PaymentInfo", "CustomerInfo",
    "SaleTotals", "Sale", "RefundLineItem", "Refund", "RefundCheck",
    "CreditRecord", "Expense", "Settings", "User",
    "round_money", "new_id", "normalize_payment_method", "records_to_dicts",
]
