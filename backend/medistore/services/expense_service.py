from __future__ import annotations

from ..errors import ExpenseNotFound
from ..records import Expense, new_id
from ..storage import RecordStore
from ..time_utils import today
from ..validation import coerce_date, coerce_money, optional_text, require_text


class ExpenseBook:
    """Shop running costs (rent, utilities, ...), used by the profit report."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_expenses(self) -> list[Expense]:
        return [Expense.from_dict(e) for e in self.store.load("expenses")]

    def add_expense(self, type: str, amount, note: str | None = None, on: str | None = None) -> Expense:
        expense = Expense(
            id=new_id("exp"),
            date=coerce_date(on, "date") or today().isoformat(),
            type=require_text(type, "type"),
            amount=coerce_money(amount, "amount", allow_zero=False),
            note=optional_text(note) or "",
        )
        with self.store.write_lock:
            expenses = self.store.load("expenses")
            expenses.append(expense.to_dict())
            self.store.save("expenses", expenses)
        return expense

    def delete_expense(self, expense_id: str) -> None:
        with self.store.write_lock:
            expenses = self.store.load("expenses")
            remaining = [e for e in expenses if e.get("id") != expense_id]
            if len(remaining) == len(expenses):
                raise ExpenseNotFound(expense_id)
            self.store.save("expenses", remaining)
