import json


def test_medicines_add_and_list(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["medicines", "add", "--name", "Panadol", "--company", "GSK",
                                 "--price", "10", "--stock", "12"])
    assert "PASS Added medicine Panadol (GSK)" in result.output

    result = runner.invoke(args=["medicines", "add", "--name", "Panadol", "--company", "GSK"])
    assert "FAIL Medicine with same name and company already exists" in result.output

    result = runner.invoke(args=["medicines", "list"])
    assert "Panadol" in result.output
    assert "Total: 1 medicine(s)" in result.output


def test_refund_commands(app, services, medicines, make_sale):
    sale = make_sale((medicines["panadol"], 4))
    runner = app.test_cli_runner()
    panadol_id = medicines["panadol"].id

    result = runner.invoke(args=["refunds", "check", sale.id, panadol_id, "5"])
    assert "FAIL Only 4 items available for refund" in result.output

    result = runner.invoke(args=["refunds", "submit", sale.id, f"{panadol_id}:3", "--reason", "expired"])
    assert result.exit_code == 0
    assert "PASS Refund" in result.output
    assert services.ledger.get_medicine(panadol_id).stock == 99

    result = runner.invoke(args=["refunds", "summary", sale.id])
    assert "Partially Refunded" in result.output

    result = runner.invoke(args=["refunds", "submit", sale.id, f"{panadol_id}:2", "--reason", "expired"])
    assert "FAIL Only 1 items available for refund" in result.output


def test_refund_submit_needs_valid_reason(app, medicines, make_sale):
    sale = make_sale((medicines["panadol"], 1))
    result = app.test_cli_runner().invoke(
        args=["refunds", "submit", sale.id, f"{medicines['panadol'].id}:1", "--reason", "bored"]
    )
    assert result.exit_code != 0


def test_data_export_import(app, services, medicines, tmp_path):
    runner = app.test_cli_runner()
    backup = tmp_path / "backup.json"

    result = runner.invoke(args=["data", "export", "--output", str(backup)])
    assert "PASS Exported" in result.output
    assert json.loads(backup.read_text(encoding="utf-8"))["version"] == "1.0"

    result = runner.invoke(args=["data", "clear", "--yes"])
    assert services.catalog.list_medicines() == []

    result = runner.invoke(args=["data", "import", str(backup), "--yes"])
    assert "medicines=3" in result.output
    assert len(services.catalog.list_medicines()) == 3

    result = runner.invoke(args=["data", "stats"])
    assert "medicines  3" in result.output


def test_users_commands(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["users", "add", "staff@example.com"])
    assert "PASS Added staff@example.com as staff" in result.output

    result = runner.invoke(args=["users", "list"])
    assert "admin@medistore.com" in result.output
    assert "staff@example.com" in result.output
