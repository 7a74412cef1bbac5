"""
Refund Reconciliation

Refunds are partial returns against a stored Sale. The rules:

- Quantity conservation: for every (sale, medicine) pair the refunded
  quantities summed over all Refund records never exceed the sale line's
  quantity.
- Replay, not counters: the already-refunded quantity is always recomputed
  from the append-only refund log. Nothing is cached, so there is nothing to
  invalidate.
- Snapshot pricing: refund lines carry the unit price and per-unit discount
  of the original sale line. Current medicine prices are never consulted.
- Blended tax: the refunded amount gets the sale's overall tax rate
  (sale.tax / sale.subtotal), not a per-line tax allocation.
- Stock is restored for every refunded line, unconditionally. A line whose
  medicine has since been deleted restores nothing (ledger no-op).

LIFECYCLE:
1. validate_refund / check_refund - how much of a line can still be refunded
2. build_refund_line + compute_refund_amount - preview, no side effects
3. submit_refund - re-validate, append Refund, restore stock
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from ..errors import (
    ExceedsAvailable,
    FullyRefunded,
    InvalidField,
    InvalidQuantity,
    ItemNotInSale,
    MissingReason,
    PharmacyError,
    SaleNotFound,
)
from ..records import (
    LINE_AVAILABLE,
    LINE_FULLY_REFUNDED,
    LINE_PARTIALLY_REFUNDED,
    REFUND_REASONS,
    REFUND_STATUS_COMPLETED,
    REFUND_STATUSES,
    Refund,
    RefundCheck,
    RefundLineItem,
    Sale,
    new_id,
    round_money,
)
from ..storage import RecordStore
from ..time_utils import now_iso
from .inventory_service import InventoryLedger
from .sales_service import SaleRecorder

logger = logging.getLogger(__name__)


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


def compute_refund_amount(sale: Sale, refund_lines: list[RefundLineItem]) -> float:
    """
    Money owed for the given refund lines, rounded half-up to cents.

        line  = unit_price * quantity - discount * quantity   (discount is per unit)
        total = sum(lines) * (1 + sale.tax / sale.subtotal)   when the sale was taxed

    Pure: safe to call repeatedly for previews. Summed in Decimal so the
    half-up rounding sees the exact half cent.
    """
    amount = Decimal("0")
    for line in refund_lines:
        amount += (_decimal(line.unit_price) - _decimal(line.discount or 0)) * line.quantity

    if sale.tax > 0 and sale.subtotal > 0:
        tax_rate = _decimal(sale.tax) / _decimal(sale.subtotal)
        amount += amount * tax_rate

    return round_money(amount)


def merge_refund_lines(refund_lines: list[RefundLineItem]) -> list[RefundLineItem]:
    """One line per medicine; repeated lines for the same medicine are summed."""
    merged: dict[str, RefundLineItem] = {}
    for line in refund_lines:
        existing = merged.get(line.medicine_id)
        if existing is None:
            merged[line.medicine_id] = replace(line)
            continue
        existing.quantity += line.quantity
        existing.total_price = round_money(
            existing.unit_price * existing.quantity - (existing.discount or 0) * existing.quantity
        )
    return list(merged.values())


def classify_line(refunded: int, original: int) -> str:
    if refunded <= 0:
        return LINE_AVAILABLE
    if refunded < original:
        return LINE_PARTIALLY_REFUNDED
    return LINE_FULLY_REFUNDED


class RefundEngine:
    def __init__(self, store: RecordStore, ledger: InventoryLedger, sales: SaleRecorder):
        self.store = store
        self.ledger = ledger
        self.sales = sales

    # ------------------------------------------------------------------
    # Refund log replay
    # ------------------------------------------------------------------

    def list_refunds(self) -> list[Refund]:
        return [Refund.from_dict(r) for r in self.store.load("refunds")]

    def get_refunds_for_sale(self, sale_id: str) -> list[Refund]:
        return [r for r in self.list_refunds() if r.sale_id == sale_id]

    def get_refunded_quantity(self, sale_id: str, medicine_id: str) -> int:
        """Sum of refunded quantities of one medicine across every refund of a sale."""
        return sum(r.quantity_for(medicine_id) for r in self.get_refunds_for_sale(sale_id))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_refund(self, sale_id: str, medicine_id: str, quantity: int) -> RefundCheck:
        """
        Check that `quantity` units of a sale line can still be refunded.

        Returns RefundCheck(valid=True, available_quantity) on success.

        Raises:
            InvalidQuantity: quantity is not a whole number >= 1
            SaleNotFound / ItemNotInSale: nothing to refund against
            FullyRefunded: every unit of the line has been refunded already
            ExceedsAvailable: quantity > remaining units (carries available_quantity)
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity(quantity)

        sale = self.sales.find_sale(sale_id)
        if sale is None:
            raise SaleNotFound(sale_id)

        line = sale.line_for(medicine_id)
        if line is None:
            raise ItemNotInSale(sale_id, medicine_id)

        available = line.quantity - self.get_refunded_quantity(sale_id, medicine_id)
        if available <= 0:
            raise FullyRefunded()
        if quantity > available:
            raise ExceedsAvailable(available, quantity)

        return RefundCheck(valid=True, available_quantity=available)

    def check_refund(self, sale_id: str, medicine_id: str, quantity: int) -> RefundCheck:
        """Non-raising validate_refund for display: {valid, available_quantity, message}."""
        try:
            return self.validate_refund(sale_id, medicine_id, quantity)
        except PharmacyError as exc:
            return RefundCheck(
                valid=False,
                available_quantity=exc.details.get("available_quantity", 0),
                message=exc.message,
            )

    # ------------------------------------------------------------------
    # Line building / preview
    # ------------------------------------------------------------------

    def build_refund_line(self, sale: Sale, medicine_id: str, quantity: int) -> RefundLineItem:
        """
        Snapshot one sale line into a refund line. Price terms come from the
        sale line; descriptive fields from the medicine when it still exists.
        """
        line = sale.line_for(medicine_id)
        if line is None:
            raise ItemNotInSale(sale.id, medicine_id)

        medicine = self.ledger.find_medicine(medicine_id)
        per_unit_discount = round_money(line.unit_price * (line.discount_pct or 0) / 100)
        return RefundLineItem(
            medicine_id=medicine_id,
            medicine_name=medicine.name if medicine else line.name,
            company=medicine.company if medicine else line.company,
            batch_number=medicine.batch_number if medicine else line.batch_number,
            quantity=quantity,
            original_quantity=line.quantity,
            unit_price=line.unit_price,
            discount=per_unit_discount,
            total_price=round_money(line.unit_price * quantity - per_unit_discount * quantity),
        )

    def compute_refund_amount(self, sale: Sale, refund_lines: list[RefundLineItem]) -> float:
        return compute_refund_amount(sale, refund_lines)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_refund(
        self,
        sale: Sale,
        refund_lines: list[RefundLineItem],
        reason: str,
        note: str | None = None,
        status: str = REFUND_STATUS_COMPLETED,
    ) -> Refund:
        """
        Append a Refund for `sale` and put the refunded units back in stock.

        Every line is re-validated against a fresh read of the refund log while
        holding the store's write lock, so two submissions in this process
        cannot both consume the same remaining units. Nothing is written if
        any check fails. Repeated lines for one medicine are stored as a
        single line with the summed quantity.
        """
        if not reason:
            raise MissingReason()
        if reason not in REFUND_REASONS:
            raise MissingReason(f"Unknown refund reason: {reason}")
        if status not in REFUND_STATUSES:
            raise InvalidField("status", f"Unknown refund status: {status}")
        if not refund_lines:
            raise InvalidField("items", "Select at least one item to refund")

        for line in refund_lines:
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
                raise InvalidQuantity(line.quantity)
        refund_lines = merge_refund_lines(refund_lines)
        requested = {line.medicine_id: line.quantity for line in refund_lines}

        with self.store.write_lock:
            stored = self.sales.find_sale(sale.id)
            if stored is None:
                raise SaleNotFound(sale.id)
            for medicine_id, quantity in requested.items():
                self.validate_refund(stored.id, medicine_id, quantity)

            refund = Refund(
                id=new_id("ref"),
                sale_id=stored.id,
                invoice_no=stored.invoice_no,
                date=now_iso(),
                items=list(refund_lines),
                amount=compute_refund_amount(stored, refund_lines),
                reason=reason,
                notes=note or None,
                status=status,
                customer_name=stored.customer_name,
                customer_phone=stored.customer_phone,
            )

            refunds = self.store.load("refunds")
            refunds.append(refund.to_dict())
            self.store.save("refunds", refunds)

            for line in refund.items:
                self.ledger.adjust_stock(line.medicine_id, line.quantity)

        logger.info(
            "Refund %s for sale %s: %d unit(s), amount %.2f (%s)",
            refund.id, refund.sale_id, sum(requested.values()), refund.amount, reason,
        )
        return refund

    # ------------------------------------------------------------------
    # Line status
    # ------------------------------------------------------------------

    def line_status(self, sale_id: str, medicine_id: str) -> str:
        sale = self.sales.get_sale(sale_id)
        line = sale.line_for(medicine_id)
        if line is None:
            raise ItemNotInSale(sale_id, medicine_id)
        return classify_line(self.get_refunded_quantity(sale_id, medicine_id), line.quantity)

    def refund_summary(self, sale_id: str) -> list[dict]:
        """Per sale line: sold, refunded, still refundable and status."""
        sale = self.sales.get_sale(sale_id)
        refunds = self.get_refunds_for_sale(sale_id)
        summary = []
        for line in sale.items:
            refunded = sum(r.quantity_for(line.medicine_id) for r in refunds)
            summary.append({
                "medicine_id": line.medicine_id,
                "name": line.name,
                "company": line.company,
                "sold": line.quantity,
                "refunded": refunded,
                "available": max(0, line.quantity - refunded),
                "status": classify_line(refunded, line.quantity),
            })
        return summary
