"""
Pytest fixtures for MediStore backend tests.

Provides an app on the in-memory record store, an app on the SQL store
(sqlite in memory), the wired service container and a seeded catalogue.
"""

import pytest

from medistore import create_app
from medistore.extensions import db
from medistore.records import CustomerInfo, PaymentInfo


@pytest.fixture(scope='function')
def app():
    """Create application backed by a fresh in-memory store."""
    app = create_app({
        'TESTING': True,
        'STORAGE_METHOD': 'memory',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'LOG_LEVEL': 'WARNING',
    })
    yield app


@pytest.fixture(scope='function')
def sql_app():
    """Create application backed by the SQL record store."""
    app = create_app({
        'TESTING': True,
        'STORAGE_METHOD': 'sql',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'LOG_LEVEL': 'WARNING',
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def services(app):
    return app.extensions["medistore"]


@pytest.fixture(scope='function')
def medicines(services):
    """Three medicines: Panadol (100 @ 10), Brufen (50 @ 20), Amoxil (10 @ 50)."""
    catalog = services.catalog
    return {
        "panadol": catalog.add_medicine({
            "name": "Panadol", "company": "GSK", "category": "Tablet",
            "cost_price": 6, "sale_price": 10, "stock": 100, "reorder_level": 20,
            "expiry": "2030-12-31", "batch_number": "PN-01",
        }),
        "brufen": catalog.add_medicine({
            "name": "Brufen", "company": "Abbott", "category": "Tablet",
            "cost_price": 12, "sale_price": 20, "stock": 50, "reorder_level": 10,
            "expiry": "2030-06-30", "batch_number": "BR-07",
        }),
        "amoxil": catalog.add_medicine({
            "name": "Amoxil", "company": "GSK", "category": "Capsule",
            "cost_price": 30, "sale_price": 50, "stock": 10, "reorder_level": 15,
            "expiry": "2030-03-31", "batch_number": "AM-02",
        }),
    }


@pytest.fixture(scope='function')
def make_sale(services):
    """Record a sale from (medicine, quantity[, discount_pct]) tuples, paid by card."""
    def _make_sale(*lines, customer=None, global_discount_pct=0):
        cart = [
            services.sales.build_cart_line(line[0].id, line[1], line[2] if len(line) > 2 else 0)
            for line in lines
        ]
        return services.sales.record_sale(
            cart,
            PaymentInfo(method="card"),
            customer or CustomerInfo(name="Ali", phone="03001234567"),
            global_discount_pct,
        )
    return _make_sale
