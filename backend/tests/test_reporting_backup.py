from datetime import date, timedelta

import pytest

from medistore.errors import InvalidField
from medistore.services import build_services
from medistore.storage import MemoryRecordStore
from medistore.time_utils import today


@pytest.fixture
def trading_day(services, medicines, make_sale):
    """One Panadol x3 sale (total 31.50) with one unit refunded (10.50)."""
    sale = make_sale((medicines["panadol"], 3))
    services.refunds.submit_refund(
        sale, [services.refunds.build_refund_line(sale, medicines["panadol"].id, 1)], "defective"
    )
    return sale


# =============================================================================
# REPORTS
# =============================================================================

def test_dashboard(services, trading_day):
    dashboard = services.reports.dashboard(on=date(2030, 3, 1))

    assert dashboard["total_sales"] == 31.50
    assert dashboard["total_profit"] == 12.00
    assert dashboard["stock_items"] == 3
    assert dashboard["total_refunds"] == 10.50
    assert dashboard["refunds_count"] == 1
    assert dashboard["low_stock_count"] == 1
    assert dashboard["expiring_count"] == 1


def test_dashboard_profit_uses_live_cost(services, medicines, trading_day):
    services.catalog.update_medicine(medicines["panadol"].id, {"cost_price": 8})
    assert services.reports.dashboard()["total_profit"] == 6.00


def test_sales_report_periods(services, trading_day):
    services.expenses.add_expense("Rent", 500)
    services.credit.add_credit({"customer_name": "Ali", "amount": 40, "invoice_no": trading_day.invoice_no})

    report = services.reports.sales_report(on=today())
    assert report["daily"] == {"count": 1, "total": 31.50}
    assert report["weekly"] == {"count": 1, "total": 31.50}
    assert report["monthly"] == {"count": 1, "total": 31.50}
    assert report["refunded"] == 10.50
    assert report["net_sales"] == 21.00
    assert report["expenses"] == 500
    assert report["unpaid_credit"] == 40


def test_sales_report_outside_periods(services, trading_day):
    later = today() + timedelta(days=40)
    report = services.reports.sales_report(on=later)
    assert report["daily"]["count"] == 0
    assert report["weekly"]["count"] == 0
    assert report["monthly"]["count"] == 0
    assert report["all"]["count"] == 1


def test_sales_report_date_filter(services, trading_day):
    tomorrow = (today() + timedelta(days=1)).isoformat()
    report = services.reports.sales_report(date_from=tomorrow)
    assert report["all"] == {"count": 0, "total": 0.0}
    assert report["refunded"] == 0
    assert report["net_sales"] == 0


# =============================================================================
# BACKUP
# =============================================================================

def test_export_document(services, trading_day):
    data = services.backup.export_data()
    assert data["version"] == "1.0"
    assert data["exportDate"].endswith("Z")
    assert len(data["medicines"]) == 3
    assert len(data["sales"]) == 1
    assert len(data["refunds"]) == 1
    assert data["udhars"] == []
    assert data["settings"]["shop_name"] == "MediStore Pharmacy"


def test_import_restores_everything(services, trading_day):
    services.settings.update_settings({"shop_name": "City Pharmacy"})
    services.users.add_user("staff@example.com")
    data = services.backup.export_data()

    restored = build_services(MemoryRecordStore())
    stats = restored.backup.import_data(data)

    assert stats == {"medicines": 3, "sales": 1, "expenses": 0, "refunds": 1, "udhars": 0, "users": 2}
    assert restored.settings.get_settings().shop_name == "City Pharmacy"
    assert restored.refunds.get_refunded_quantity(trading_day.id, trading_day.items[0].medicine_id) == 1


def test_import_requires_version(services, medicines):
    data = services.backup.export_data()
    del data["version"]
    with pytest.raises(InvalidField):
        services.backup.import_data(data)
    assert len(services.catalog.list_medicines()) == 3


def test_import_rejects_malformed_lists(services):
    with pytest.raises(InvalidField):
        services.backup.import_data({"version": "1.0", "sales": "nope"})


def test_clear_all(services, trading_day):
    services.backup.clear_all()
    assert services.backup.data_stats() == {
        "medicines": 0, "sales": 0, "expenses": 0, "refunds": 0, "udhars": 0, "users": 0,
    }
