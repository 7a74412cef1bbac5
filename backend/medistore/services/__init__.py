"""
Service wiring.

Every service takes its collaborators in the constructor; `build_services`
assembles one set around a single record store:

    services = build_services(store)
    services.refunds.submit_refund(sale, lines, "defective")
"""

from __future__ import annotations

from dataclasses import dataclass

from ..storage import RecordStore
from .backup_service import BackupService
from .credit_service import CreditLedger
from .expense_service import ExpenseBook
from .inventory_service import InventoryLedger
from .medicine_service import MedicineCatalog
from .refund_service import RefundEngine
from .reporting_service import ReportingService
from .sales_service import SaleRecorder
from .settings_service import SettingsService
from .user_service import UserDirectory


@dataclass
class Services:
    store: RecordStore
    ledger: InventoryLedger
    catalog: MedicineCatalog
    settings: SettingsService
    sales: SaleRecorder
    refunds: RefundEngine
    credit: CreditLedger
    expenses: ExpenseBook
    users: UserDirectory
    reports: ReportingService
    backup: BackupService


def build_services(store: RecordStore) -> Services:
    ledger = InventoryLedger(store)
    settings = SettingsService(store)
    sales = SaleRecorder(store, ledger, settings)
    refunds = RefundEngine(store, ledger, sales)
    credit = CreditLedger(store)
    expenses = ExpenseBook(store)
    return Services(
        store=store,
        ledger=ledger,
        catalog=MedicineCatalog(store),
        settings=settings,
        sales=sales,
        refunds=refunds,
        credit=credit,
        expenses=expenses,
        users=UserDirectory(store),
        reports=ReportingService(store, sales, refunds, settings, credit, expenses),
        backup=BackupService(store),
    )


__all__ = [
    "Services",
    "build_services",
    "BackupService",
    "CreditLedger",
    "ExpenseBook",
    "InventoryLedger",
    "MedicineCatalog",
    "RefundEngine",
    "ReportingService",
    "SaleRecorder",
    "SettingsService",
    "UserDirectory",
]
