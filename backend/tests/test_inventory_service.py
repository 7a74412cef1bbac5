from datetime import date

import pytest

from medistore.errors import InsufficientStock, InvalidQuantity, MedicineNotFound


def test_adjust_stock_applies_signed_delta(services, medicines):
    ledger = services.ledger
    ledger.adjust_stock(medicines["panadol"].id, -30)
    ledger.adjust_stock(medicines["panadol"].id, 5)
    assert ledger.get_medicine(medicines["panadol"].id).stock == 75


def test_adjust_stock_unknown_medicine_is_noop(services, medicines):
    before = [m.to_dict() for m in services.ledger.list_medicines()]
    services.ledger.adjust_stock("med_gone", 3)
    assert [m.to_dict() for m in services.ledger.list_medicines()] == before


def test_sale_then_full_refund_nets_zero(services, medicines, make_sale):
    amoxil = medicines["amoxil"]
    sale = make_sale((amoxil, 7))
    assert services.ledger.get_medicine(amoxil.id).stock == 3

    line = services.refunds.build_refund_line(sale, amoxil.id, 7)
    services.refunds.submit_refund(sale, [line], "wrong_item")
    assert services.ledger.get_medicine(amoxil.id).stock == 10


def test_restock_and_remove(services, medicines):
    ledger = services.ledger
    assert ledger.restock(medicines["amoxil"].id, 5).stock == 15
    assert ledger.remove_stock(medicines["amoxil"].id, 15).stock == 0


def test_remove_stock_cannot_go_negative(services, medicines):
    with pytest.raises(InsufficientStock):
        services.ledger.remove_stock(medicines["amoxil"].id, 11)
    assert services.ledger.get_medicine(medicines["amoxil"].id).stock == 10


@pytest.mark.parametrize("quantity", [0, -2, 2.5, "3"])
def test_manual_adjustment_needs_positive_int(services, medicines, quantity):
    with pytest.raises(InvalidQuantity):
        services.ledger.restock(medicines["panadol"].id, quantity)


def test_restock_unknown_medicine(services):
    with pytest.raises(MedicineNotFound):
        services.ledger.restock("med_missing", 1)


def test_low_stock_uses_reorder_level(services, medicines):
    # Amoxil: 10 in stock, reorder at 15
    assert [m.name for m in services.ledger.low_stock()] == ["Amoxil"]
    assert {m.name for m in services.ledger.low_stock(threshold=50)} == {"Brufen", "Amoxil"}


def test_expiring_soon_excludes_expired(services, medicines):
    on = date(2030, 3, 1)
    # Amoxil expires 2030-03-31 (30 days), Brufen 2030-06-30, Panadol 2030-12-31
    assert [m.name for m in services.ledger.expiring_soon(30, on=on)] == ["Amoxil"]
    assert services.ledger.expiring_soon(30, on=date(2030, 4, 1)) == []
    assert [m.name for m in services.ledger.expiring_soon(365, on=date(2030, 4, 1))] == ["Panadol", "Brufen"]
