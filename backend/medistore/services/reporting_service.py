# Overview: Read-only reports; dashboard figures and period sales summaries.

from __future__ import annotations

from datetime import date

from ..records import Medicine, Sale, round_money
from ..storage import RecordStore
from ..time_utils import days_until, month_start, parse_iso_date, today, week_ago
from .credit_service import CreditLedger
from .expense_service import ExpenseBook
from .refund_service import RefundEngine
from .sales_service import SaleRecorder
from .settings_service import SettingsService


def _sale_profit(sale: Sale, costs: dict[str, float]) -> float:
    """Gross profit at the medicines' current cost price; deleted medicines count as 0."""
    return sum(
        (line.unit_price - costs[line.medicine_id]) * line.quantity
        for line in sale.items
        if line.medicine_id in costs
    )


def _period(sales: list[Sale]) -> dict:
    return {
        "count": len(sales),
        "total": round_money(sum(s.total for s in sales)),
    }


class ReportingService:
    def __init__(
        self,
        store: RecordStore,
        sales: SaleRecorder,
        refunds: RefundEngine,
        settings: SettingsService,
        credit: CreditLedger,
        expenses: ExpenseBook,
    ):
        self.store = store
        self.sales = sales
        self.refunds = refunds
        self.settings = settings
        self.credit = credit
        self.expenses = expenses

    def _medicines(self) -> list[Medicine]:
        return [Medicine.from_dict(m) for m in self.store.load("medicines")]

    def total_unpaid_credit(self) -> float:
        return self.credit.total_unpaid()

    def dashboard(self, on: date | None = None) -> dict:
        medicines = self._medicines()
        costs = {m.id: m.cost_price for m in medicines}
        sales = self.sales.list_sales()
        refunds = self.refunds.list_refunds()
        alert_days = self.settings.get_settings().expiry_alert_days

        expiring = 0
        for m in medicines:
            left = days_until(m.expiry, on=on)
            if left is not None and 0 < left <= alert_days:
                expiring += 1

        return {
            "total_sales": round_money(sum(s.total for s in sales)),
            "total_profit": round_money(sum(_sale_profit(s, costs) for s in sales)),
            "stock_items": len(medicines),
            "total_refunds": round_money(sum(r.amount for r in refunds)),
            "refunds_count": len(refunds),
            "low_stock_count": sum(1 for m in medicines if m.stock <= m.reorder_level),
            "expiring_count": expiring,
        }

    def sales_report(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        on: date | None = None,
    ) -> dict:
        """
        Daily / weekly (last 7 days) / monthly (since the 1st) sales within the
        optional date filter, plus refunds and unpaid credit.
        """
        on = on or today()
        sales = self.sales.list_sales(date_from, date_to)

        def since(start: date) -> list[Sale]:
            out = []
            for s in sales:
                day = parse_iso_date(s.date)
                if day is not None and start <= day <= on:
                    out.append(s)
            return out

        daily = since(on)
        weekly = since(week_ago(on))
        monthly = since(month_start(on))

        sale_ids = {s.id for s in sales}
        refunded = round_money(sum(r.amount for r in self.refunds.list_refunds() if r.sale_id in sale_ids))
        gross = round_money(sum(s.total for s in sales))

        start = parse_iso_date(date_from) if date_from else None
        end = parse_iso_date(date_to) if date_to else None
        spent = 0.0
        for e in self.expenses.list_expenses():
            day = parse_iso_date(e.date)
            if start and (day is None or day < start):
                continue
            if end and (day is None or day > end):
                continue
            spent += e.amount

        return {
            "daily": _period(daily),
            "weekly": _period(weekly),
            "monthly": _period(monthly),
            "all": _period(sales),
            "refunded": refunded,
            "net_sales": round_money(gross - refunded),
            "expenses": round_money(spent),
            "unpaid_credit": self.total_unpaid_credit(),
        }
