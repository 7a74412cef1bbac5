"""
HTTP surface: status codes, error payloads and the refund flow end to end.
"""


def _create_medicine(client, **overrides):
    body = {
        "name": "Panadol", "company": "GSK", "category": "Tablet",
        "cost_price": 6, "sale_price": 10, "stock": 100, "reorder_level": 20,
        "expiry": "2030-12-31", "batch_number": "PN-01",
    }
    body.update(overrides)
    resp = client.post("/api/medicines", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["medicine"]


def _record_sale(client, medicine_id, quantity=5):
    resp = client.post("/api/sales", json={
        "items": [{"medicine_id": medicine_id, "quantity": quantity}],
        "payment": {"method": "cash", "cash_received": 100},
        "customer": {"name": "Ali"},
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["sale"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "healthy"


def test_duplicate_medicine_is_409(client):
    _create_medicine(client)
    resp = client.post("/api/medicines", json={"name": "Panadol", "company": "GSK"})
    assert resp.status_code == 409
    assert resp.get_json()["kind"] == "duplicate"


def test_missing_medicine_is_404(client):
    resp = client.get("/api/medicines/med_missing")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Medicine not found", "kind": "not_found", "medicine_id": "med_missing"}


def test_stock_adjustment(client):
    medicine = _create_medicine(client, stock=5)
    resp = client.post(f"/api/medicines/{medicine['id']}/stock", json={"action": "remove", "quantity": 6})
    assert resp.status_code == 400
    assert resp.get_json()["available_stock"] == 5

    resp = client.post(f"/api/medicines/{medicine['id']}/stock", json={"action": "add", "quantity": "10"})
    assert resp.status_code == 200
    assert resp.get_json()["medicine"]["stock"] == 15


def test_low_stock_and_expiring(client):
    _create_medicine(client, stock=5)
    assert len(client.get("/api/medicines/low-stock").get_json()["medicines"]) == 1
    resp = client.get("/api/medicines/expiring?days=5")
    assert resp.status_code == 200
    assert resp.get_json()["medicines"] == []


def test_sale_totals_preview(client):
    medicine = _create_medicine(client)
    resp = client.post("/api/sales/totals", json={"items": [{"medicine_id": medicine["id"], "quantity": 2}]})
    assert resp.status_code == 200
    assert resp.get_json()["totals"]["total"] == 21.0


def test_empty_cart_and_short_cash(client):
    medicine = _create_medicine(client)
    resp = client.post("/api/sales", json={"items": [], "payment": {"method": "cash", "cash_received": 10}})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Add items to cart before checkout"

    resp = client.post("/api/sales", json={
        "items": [{"medicine_id": medicine["id"], "quantity": 5}],
        "payment": {"method": "cash", "cash_received": 10},
    })
    assert resp.status_code == 400
    assert resp.get_json()["total"] == 52.5


def test_refund_flow(client):
    medicine = _create_medicine(client)
    sale = _record_sale(client, medicine["id"], 5)
    assert sale["invoice_no"] == sale["id"][:12]

    resp = client.post("/api/refunds/check", json={
        "sale_id": sale["id"], "medicine_id": medicine["id"], "quantity": 2,
    })
    assert resp.get_json() == {"valid": True, "available_quantity": 5, "message": None}

    resp = client.post("/api/refunds/preview", json={
        "sale_id": sale["id"], "items": [{"medicine_id": medicine["id"], "quantity": 2}],
    })
    assert resp.status_code == 200
    assert resp.get_json()["amount"] == 21.0

    resp = client.post("/api/refunds", json={
        "sale_id": sale["id"],
        "items": [{"medicine_id": medicine["id"], "quantity": 2}],
        "reason": "defective",
        "note": "Seal broken",
    })
    assert resp.status_code == 201
    refund = resp.get_json()["refund"]
    assert refund["amount"] == 21.0
    assert refund["notes"] == "Seal broken"

    assert client.get(f"/api/medicines/{medicine['id']}").get_json()["medicine"]["stock"] == 97

    resp = client.post("/api/refunds", json={
        "sale_id": sale["id"],
        "items": [{"medicine_id": medicine["id"], "quantity": 4}],
        "reason": "defective",
    })
    assert resp.status_code == 400
    assert resp.get_json()["available_quantity"] == 3

    summary = client.get(f"/api/refunds/sales/{sale['id']}/summary").get_json()["lines"]
    assert summary[0]["status"] == "Partially Refunded"
    assert len(client.get(f"/api/refunds?sale_id={sale['id']}").get_json()["refunds"]) == 1


def test_refund_without_reason(client):
    medicine = _create_medicine(client)
    sale = _record_sale(client, medicine["id"], 1)
    resp = client.post("/api/refunds", json={
        "sale_id": sale["id"], "items": [{"medicine_id": medicine["id"], "quantity": 1}],
    })
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please select a reason for the refund"


def test_refund_unknown_sale(client):
    resp = client.post("/api/refunds", json={
        "sale_id": "sale_missing", "items": [{"medicine_id": "x", "quantity": 1}], "reason": "other",
    })
    assert resp.status_code == 404


def test_credit_routes(client):
    resp = client.post("/api/udhar", json={"customer_name": "Ali", "amount": 120, "invoice_no": "sale_17000"})
    assert resp.status_code == 201
    credit_id = resp.get_json()["record"]["id"]

    resp = client.post(f"/api/udhar/{credit_id}/pay", json={"paid_date": "2030-01-05"})
    assert resp.get_json()["record"]["status"] == "paid"
    assert client.get("/api/udhar/summary").get_json()["total_unpaid"] == 0

    assert client.delete(f"/api/udhar/{credit_id}").status_code == 200
    assert client.get(f"/api/udhar/{credit_id}").status_code == 404


def test_settings_and_users(client):
    resp = client.put("/api/settings", json={"default_tax_percent": 150})
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "default_tax_percent"

    resp = client.put("/api/settings", json={"shop_name": "City Pharmacy"})
    assert resp.get_json()["settings"]["shop_name"] == "City Pharmacy"

    users = client.get("/api/users").get_json()["users"]
    assert users[0]["email"] == "admin@medistore.com"
    assert client.delete(f"/api/users/{users[0]['id']}").status_code == 400
    assert client.post("/api/users", json={"email": "ADMIN@medistore.com"}).status_code == 409


def test_reports(client):
    medicine = _create_medicine(client)
    _record_sale(client, medicine["id"], 2)
    dashboard = client.get("/api/reports/dashboard").get_json()
    assert dashboard["total_sales"] == 21.0
    report = client.get("/api/reports/sales?date_from=not-a-date")
    assert report.status_code == 400


def test_export_import_round_trip(client):
    medicine = _create_medicine(client)
    _record_sale(client, medicine["id"], 1)
    backup = client.get("/api/system/export").get_json()

    assert client.post("/api/system/clear", json={}).status_code == 400
    assert client.post("/api/system/clear", json={"confirm": True}).status_code == 200
    assert client.get("/api/system/stats").get_json()["sales"] == 0

    resp = client.post("/api/system/import", json=backup)
    assert resp.status_code == 200
    assert resp.get_json()["imported"]["sales"] == 1

    resp = client.post("/api/system/import", json={"medicines": []})
    assert resp.status_code == 400


def test_repeated_cart_medicine_is_400(client):
    medicine = _create_medicine(client, stock=10)
    resp = client.post("/api/sales", json={
        "items": [
            {"medicine_id": medicine["id"], "quantity": 10},
            {"medicine_id": medicine["id"], "quantity": 10},
        ],
        "payment": {"method": "card"},
    })
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "items"
    assert client.get(f"/api/medicines/{medicine['id']}").get_json()["medicine"]["stock"] == 10


def test_non_numeric_cash_is_400(client):
    medicine = _create_medicine(client)
    resp = client.post("/api/sales", json={
        "items": [{"medicine_id": medicine["id"], "quantity": 1}],
        "payment": {"method": "cash", "cash_received": "abc"},
    })
    assert resp.status_code == 400
    assert resp.get_json() == {
        "error": "cash_received must be a number", "kind": "validation", "field": "cash_received",
    }


def test_refund_lines_for_same_medicine_are_summed(client):
    medicine = _create_medicine(client)
    sale = _record_sale(client, medicine["id"], 5)

    resp = client.post("/api/refunds", json={
        "sale_id": sale["id"],
        "items": [
            {"medicine_id": medicine["id"], "quantity": 2},
            {"medicine_id": medicine["id"], "quantity": 3},
        ],
        "reason": "defective",
    })
    assert resp.status_code == 201
    assert [item["quantity"] for item in resp.get_json()["refund"]["items"]] == [5]

    resp = client.post("/api/refunds", json={
        "sale_id": sale["id"],
        "items": [{"medicine_id": medicine["id"], "quantity": 3}],
        "reason": "defective",
    })
    assert resp.status_code == 400
    assert client.get(f"/api/medicines/{medicine['id']}").get_json()["medicine"]["stock"] == 100

    resp = client.post("/api/refunds/preview", json={
        "sale_id": sale["id"],
        "items": [{"medicine_id": medicine["id"], "quantity": 1}, {"medicine_id": medicine["id"], "quantity": 1}],
    })
    assert resp.status_code == 400
