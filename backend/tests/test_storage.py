"""
Record store backends: memory, local JSON document and SQL tables.
"""

import json
import unittest

import pytest

from medistore import create_app
from medistore.errors import StorageError
from medistore.extensions import db
from medistore.records import CustomerInfo, PaymentInfo
from medistore.services import build_services
from medistore.storage import LocalRecordStore, MemoryRecordStore, build_record_store


# =============================================================================
# MEMORY
# =============================================================================

def test_memory_store_returns_copies():
    store = MemoryRecordStore({"medicines": [{"id": "med_1", "stock": 1}]})
    records = store.load("medicines")
    records[0]["stock"] = 99
    assert store.load("medicines") == [{"id": "med_1", "stock": 1}]


def test_unknown_collection():
    with pytest.raises(KeyError):
        MemoryRecordStore().load("invoices")


def test_build_record_store_rejects_unknown_method():
    with pytest.raises(ValueError):
        build_record_store({"STORAGE_METHOD": "cloud"})


# =============================================================================
# LOCAL
# =============================================================================

def test_local_store_uses_namespaced_keys(tmp_path):
    store = LocalRecordStore(tmp_path, namespace="pharmacy")
    assert store.load("sales") == []

    store.save("sales", [{"id": "sale_1"}])
    store.save("udhar", [{"id": "udhar_1"}])

    document = json.loads((tmp_path / "pharmacy.json").read_text(encoding="utf-8"))
    assert document == {
        "pharmacy_sales": [{"id": "sale_1"}],
        "pharmacy_udhar": [{"id": "udhar_1"}],
    }
    assert LocalRecordStore(tmp_path).load("sales") == [{"id": "sale_1"}]


def test_local_store_namespaces_are_independent(tmp_path):
    LocalRecordStore(tmp_path, namespace="shop_a").save("medicines", [{"id": "a"}])
    assert LocalRecordStore(tmp_path, namespace="shop_b").load("medicines") == []


def test_local_store_corrupt_document(tmp_path):
    (tmp_path / "pharmacy.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        LocalRecordStore(tmp_path).load("medicines")


def test_local_store_full_flow(tmp_path):
    services = build_services(LocalRecordStore(tmp_path))
    medicine = services.catalog.add_medicine({"name": "Panadol", "company": "GSK", "sale_price": 10, "stock": 20})
    sale = services.sales.record_sale(
        [services.sales.build_cart_line(medicine.id, 4)],
        PaymentInfo(method="card"),
        CustomerInfo(),
    )
    services.refunds.submit_refund(sale, [services.refunds.build_refund_line(sale, medicine.id, 1)], "defective")

    reopened = build_services(LocalRecordStore(tmp_path))
    assert reopened.ledger.get_medicine(medicine.id).stock == 17
    assert reopened.refunds.get_refunded_quantity(sale.id, medicine.id) == 1


# =============================================================================
# SQL
# =============================================================================

class SqlRecordStoreTests(unittest.TestCase):
    def setUp(self):
        self.app = create_app({
            "TESTING": True,
            "STORAGE_METHOD": "sql",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "LOG_LEVEL": "WARNING",
        })
        self.ctx = self.app.app_context()
        self.ctx.push()
        db.create_all()
        self.services = self.app.extensions["medistore"]

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def test_save_replaces_collection(self):
        store = self.services.store
        store.save("expenses", [
            {"id": "exp_1", "date": "2030-01-01", "type": "Rent", "amount": 100.0, "note": ""},
            {"id": "exp_2", "date": "2030-01-02", "type": "Tea", "amount": 5.0, "note": ""},
        ])
        store.save("expenses", [
            {"id": "exp_2", "date": "2030-01-02", "type": "Tea", "amount": 7.5, "note": "two cups"},
        ])
        self.assertEqual(
            store.load("expenses"),
            [{"id": "exp_2", "date": "2030-01-02", "type": "Tea", "amount": 7.5, "note": "two cups"}],
        )

    def test_settings_singleton_round_trip(self):
        self.services.settings.update_settings({"shop_name": "City Pharmacy", "default_tax_percent": 8})
        self.services.settings.update_settings({"dark_mode": True})
        settings = self.services.settings.get_settings()
        self.assertEqual(settings.shop_name, "City Pharmacy")
        self.assertEqual(settings.default_tax_percent, 8)
        self.assertTrue(settings.dark_mode)
        self.assertEqual(len(self.services.store.load("settings")), 1)

    def test_sale_and_refund_with_json_items(self):
        medicine = self.services.catalog.add_medicine(
            {"name": "Brufen", "company": "Abbott", "sale_price": 20, "cost_price": 12, "stock": 10}
        )
        sale = self.services.sales.record_sale(
            [self.services.sales.build_cart_line(medicine.id, 3, 10)],
            PaymentInfo(method="cash", cash_received=100),
        )
        stored = self.services.sales.get_sale(sale.id)
        self.assertEqual(stored.items[0].quantity, 3)
        self.assertEqual(stored.total, sale.total)

        line = self.services.refunds.build_refund_line(stored, medicine.id, 3)
        refund = self.services.refunds.submit_refund(stored, [line], "expired")
        self.assertEqual(self.services.refunds.get_refunds_for_sale(sale.id)[0].id, refund.id)
        self.assertEqual(self.services.ledger.get_medicine(medicine.id).stock, 10)

    def test_users_keep_created_at(self):
        users = self.services.users.list_users()
        self.assertTrue(users[0].created_at.endswith("Z"))
        self.assertEqual(self.services.users.list_users()[0].created_at, users[0].created_at)
