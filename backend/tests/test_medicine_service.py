import pytest

from medistore.errors import DuplicateMedicine, InvalidField, MedicineNotFound


def test_add_medicine_assigns_id(services):
    medicine = services.catalog.add_medicine({"name": "Panadol", "company": "GSK", "sale_price": 10, "stock": 5})
    assert medicine.id.startswith("med_")
    assert services.catalog.get_medicine(medicine.id).stock == 5


def test_duplicate_name_and_company(services):
    services.catalog.add_medicine({"name": "Panadol", "company": "GSK"})
    with pytest.raises(DuplicateMedicine):
        services.catalog.add_medicine({"name": "Panadol", "company": "GSK"})
    with pytest.raises(DuplicateMedicine):
        services.catalog.add_medicine({"name": " panadol ", "company": "gsk"})
    assert len(services.catalog.list_medicines()) == 1


def test_same_name_other_company_is_allowed(services):
    services.catalog.add_medicine({"name": "Panadol", "company": "GSK"})
    services.catalog.add_medicine({"name": "Panadol", "company": "Haleon"})
    assert len(services.catalog.list_medicines()) == 2


@pytest.mark.parametrize("fields", [
    {"company": "GSK"},
    {"name": "Panadol", "company": "GSK", "stock": -1},
    {"name": "Panadol", "company": "GSK", "stock": "1.5"},
    {"name": "Panadol", "company": "GSK", "sale_price": "abc"},
    {"name": "Panadol", "company": "GSK", "expiry": "31/12/2030"},
    {"name": "Panadol", "company": "GSK", "colour": "white"},
])
def test_invalid_fields_rejected(services, fields):
    with pytest.raises(InvalidField):
        services.catalog.add_medicine(fields)


def test_update_medicine(services, medicines):
    updated = services.catalog.update_medicine(medicines["panadol"].id, {"sale_price": 12, "stock": 80})
    assert updated.sale_price == 12
    assert services.catalog.get_medicine(medicines["panadol"].id).stock == 80


def test_update_into_duplicate(services, medicines):
    with pytest.raises(DuplicateMedicine):
        services.catalog.update_medicine(medicines["amoxil"].id, {"name": "Panadol"})


def test_delete_medicine(services, medicines):
    services.catalog.delete_medicine(medicines["brufen"].id)
    with pytest.raises(MedicineNotFound):
        services.catalog.get_medicine(medicines["brufen"].id)
    with pytest.raises(MedicineNotFound):
        services.catalog.delete_medicine(medicines["brufen"].id)


def test_delete_keeps_sale_history(services, medicines, make_sale):
    sale = make_sale((medicines["brufen"], 2))
    services.catalog.delete_medicine(medicines["brufen"].id)
    stored = services.sales.get_sale(sale.id)
    assert stored.items[0].name == "Brufen"


def test_search(services, medicines):
    assert {m.name for m in services.catalog.search_medicines("gsk")} == {"Panadol", "Amoxil"}
    assert [m.name for m in services.catalog.search_medicines("caps")] == ["Amoxil"]
    assert len(services.catalog.search_medicines("")) == 3
