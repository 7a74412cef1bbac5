"""
Sale Recorder

Turns a checked-out cart into an immutable Sale record and decrements stock.

Totals (computed once, stored on the sale, never recalculated):
    subtotal       = sum(unit_price * quantity)
    total_discount = sum(line gross * line discount %) + subtotal * global discount %
    tax            = (subtotal - total_discount) * default tax %
    total          = subtotal - total_discount + tax

Boundary: the recorder trusts line quantities. Capping a quantity at the
stock available when it was added to the cart is the cart-building step's job
(`build_cart_line`), not re-checked at record time. Each medicine appears on
at most one line, so that cap covers the whole quantity sold.
"""

from __future__ import annotations

import logging

from ..errors import (
    EmptyCart,
    InsufficientCash,
    InsufficientStock,
    InvalidField,
    InvalidQuantity,
    SaleNotFound,
)
from ..records import (
    PAYMENT_CASH,
    PAYMENT_METHODS,
    CartLine,
    CustomerInfo,
    PaymentInfo,
    Sale,
    SaleTotals,
    new_id,
    normalize_payment_method,
    round_money,
)
from ..storage import RecordStore
from ..time_utils import now_iso, parse_iso_date
from ..validation import coerce_money, coerce_percent
from .inventory_service import InventoryLedger
from .settings_service import SettingsService

logger = logging.getLogger(__name__)


def _check_line(line: CartLine) -> None:
    if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
        raise InvalidQuantity(line.quantity)
    coerce_money(line.unit_price, "unit_price")
    coerce_percent(line.discount_pct, "discount_pct")


def check_distinct_medicines(cart_lines: list[CartLine]) -> None:
    """A medicine may appear on only one cart line; its quantity carries the count."""
    seen = set()
    for line in cart_lines:
        if line.medicine_id in seen:
            raise InvalidField("items", f"{line.name} is already in the cart")
        seen.add(line.medicine_id)


class SaleRecorder:
    def __init__(self, store: RecordStore, ledger: InventoryLedger, settings: SettingsService):
        self.store = store
        self.ledger = ledger
        self.settings = settings

    # ------------------------------------------------------------------
    # Cart building
    # ------------------------------------------------------------------

    def build_cart_line(self, medicine_id: str, quantity: int = 1, discount_pct: float = 0) -> CartLine:
        """
        Snapshot a medicine into a cart line. Quantity may not exceed current
        stock; discount is clamped to 0-100 %.
        """
        medicine = self.ledger.get_medicine(medicine_id)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity(quantity)
        if quantity > medicine.stock:
            raise InsufficientStock(medicine_id, medicine.stock, quantity)
        return CartLine(
            medicine_id=medicine.id,
            name=medicine.name,
            company=medicine.company,
            unit_price=medicine.sale_price,
            quantity=quantity,
            discount_pct=max(0.0, min(100.0, float(discount_pct or 0))),
            batch_number=medicine.batch_number,
            stock=medicine.stock,
        )

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def calculate_totals(self, cart_lines: list[CartLine], global_discount_pct: float = 0) -> SaleTotals:
        """
        Pure totals for a cart. Profit uses the live cost price of each
        medicine and is informational only (not stored on the sale).
        """
        tax_pct = self.settings.get_settings().default_tax_percent
        costs = {m.id: m.cost_price for m in self.ledger.list_medicines()}

        subtotal = sum(line.gross for line in cart_lines)
        line_discount = sum(line.discount_amount for line in cart_lines)
        total_discount = line_discount + subtotal * global_discount_pct / 100
        tax = (subtotal - total_discount) * tax_pct / 100

        profit = 0.0
        for line in cart_lines:
            if line.medicine_id not in costs:
                continue
            line_profit = (line.unit_price - costs[line.medicine_id]) * line.quantity
            profit += line_profit - line_profit * line.discount_pct / 100

        subtotal = round_money(subtotal)
        total_discount = round_money(total_discount)
        tax = round_money(tax)
        return SaleTotals(
            subtotal=subtotal,
            total_discount=total_discount,
            tax=tax,
            total=round_money(subtotal - total_discount + tax),
            profit=round_money(profit),
        )

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_sale(
        self,
        cart_lines: list[CartLine],
        payment: PaymentInfo,
        customer: CustomerInfo | None = None,
        global_discount_pct: float = 0,
    ) -> Sale:
        """
        Persist a completed sale and take its quantities out of stock.

        Raises EmptyCart, InsufficientCash (cash payments only) or a
        validation error for malformed or repeated lines, all before anything
        is written.
        """
        if not cart_lines:
            raise EmptyCart()
        for line in cart_lines:
            _check_line(line)
        check_distinct_medicines(cart_lines)
        global_discount_pct = coerce_percent(global_discount_pct or 0, "global_discount_pct")

        method = normalize_payment_method(payment.method)
        if method not in PAYMENT_METHODS:
            raise InvalidField("payment_method", f"Unknown payment method: {payment.method}")

        customer = customer or CustomerInfo()
        totals = self.calculate_totals(cart_lines, global_discount_pct)

        cash_received = None
        change_returned = None
        if method == PAYMENT_CASH:
            cash_received = coerce_money(payment.cash_received or 0, "cash_received")
            if cash_received < totals.total:
                raise InsufficientCash(totals.total, cash_received)
            change_returned = round_money(cash_received - totals.total)

        sale = Sale(
            id=new_id("sale"),
            date=now_iso(),
            items=list(cart_lines),
            subtotal=totals.subtotal,
            discount=totals.total_discount,
            tax=totals.tax,
            total=totals.total,
            payment_method=method,
            cash_received=cash_received,
            change_returned=change_returned,
            customer_name=customer.name or None,
            customer_phone=customer.phone or None,
        )

        with self.store.write_lock:
            sales = self.store.load("sales")
            sales.append(sale.to_dict())
            self.store.save("sales", sales)
            for line in sale.items:
                self.ledger.adjust_stock(line.medicine_id, -line.quantity)

        logger.info(
            "Sale %s recorded: %d line(s), total %.2f, profit %.2f",
            sale.id, len(sale.items), sale.total, totals.profit,
        )
        return sale

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_sales(self, date_from: str | None = None, date_to: str | None = None) -> list[Sale]:
        """Sales in store order, optionally filtered by inclusive ISO date range."""
        start = parse_iso_date(date_from) if date_from else None
        end = parse_iso_date(date_to) if date_to else None
        out = []
        for data in self.store.load("sales"):
            sale = Sale.from_dict(data)
            day = parse_iso_date(sale.date)
            if start and (day is None or day < start):
                continue
            if end and (day is None or day > end):
                continue
            out.append(sale)
        return out

    def find_sale(self, sale_id: str) -> Sale | None:
        data = next((s for s in self.store.load("sales") if s.get("id") == sale_id), None)
        return Sale.from_dict(data) if data else None

    def get_sale(self, sale_id: str) -> Sale:
        sale = self.find_sale(sale_id)
        if sale is None:
            raise SaleNotFound(sale_id)
        return sale

    def get_sales_referencing_medicine(self, medicine_id: str) -> list[Sale]:
        return [s for s in self.list_sales() if s.line_for(medicine_id) is not None]

    def search_sales_by_medicine_name(self, term: str) -> list[Sale]:
        needle = (term or "").strip().lower()
        return [
            s for s in self.list_sales()
            if any(needle in line.name.lower() for line in s.items)
        ]
