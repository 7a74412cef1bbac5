# Overview: Flask CLI command groups for inspection, refunds and data maintenance.

# backend/medistore/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Medicines:
# - python -m flask medicines list [--search pan]
# - python -m flask medicines add --name Panadol --company GSK --cost 10 --price 15 --stock 100
# - python -m flask medicines restock <medicine_id> 20
# - python -m flask medicines low-stock [--threshold 10]
# - python -m flask medicines expiring [--days 30]
#
# Sales:
# - python -m flask sales list [--from 2024-01-01] [--to 2024-01-31]
# - python -m flask sales show <sale_id>
#
# Refunds:
# - python -m flask refunds summary <sale_id>
#   Per line: sold / refunded / available / status.
# - python -m flask refunds check <sale_id> <medicine_id> <quantity>
# - python -m flask refunds submit <sale_id> <medicine_id>:<quantity> [...] --reason defective [--note "..."]
# - python -m flask refunds list [--sale-id sale_...]
#
# Data:
# - python -m flask data stats
# - python -m flask data export [--output backup.json]
# - python -m flask data import backup.json
# - python -m flask data clear --yes
#   Delete every record in every collection.
#
# Users (advisory list, no login):
# - python -m flask users list
# - python -m flask users add staff@example.com [--role admin]

import json

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import InvalidField, PharmacyError
from .records import REFUND_REASONS, USER_ROLES


def _services():
    return current_app.extensions["medistore"]


def _parse_line(value: str) -> tuple[str, int]:
    medicine_id, sep, quantity = value.rpartition(":")
    if not sep or not medicine_id:
        raise click.BadParameter(f"expected <medicine_id>:<quantity>, got {value!r}")
    try:
        return medicine_id, int(quantity)
    except ValueError:
        raise click.BadParameter(f"quantity must be an integer in {value!r}")


# =============================================================================
# MEDICINES
# =============================================================================

@click.group('medicines')
def medicines_group():
    """Medicine catalogue and stock commands."""


@medicines_group.command('list')
@click.option('--search', default=None, help='Filter by name, company or category')
@with_appcontext
def list_medicines(search):
    """List medicines with stock and price."""
    catalog = _services().catalog
    medicines = catalog.search_medicines(search) if search else catalog.list_medicines()

    if not medicines:
        click.echo("No medicines found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<32} {'Name':<20} {'Company':<16} {'Stock':>6} {'Price':>10} {'Expiry':<12}")
    click.echo("="*100)
    for m in medicines:
        click.echo(f"{m.id:<32} {m.name[:20]:<20} {m.company[:16]:<16} {m.stock:>6} {m.sale_price:>10.2f} {m.expiry:<12}")
    click.echo("="*100)
    click.echo(f"Total: {len(medicines)} medicine(s)\n")


@medicines_group.command('add')
@click.option('--name', required=True)
@click.option('--company', required=True)
@click.option('--category', default='')
@click.option('--cost', 'cost_price', type=float, default=0.0)
@click.option('--price', 'sale_price', type=float, default=0.0)
@click.option('--stock', type=int, default=0)
@click.option('--reorder-level', type=int, default=0)
@click.option('--expiry', default=None, help='YYYY-MM-DD')
@click.option('--batch', 'batch_number', default='')
@with_appcontext
def add_medicine(name, company, category, cost_price, sale_price, stock, reorder_level, expiry, batch_number):
    """Add a medicine to the catalogue."""
    fields = {
        "name": name, "company": company, "category": category,
        "cost_price": cost_price, "sale_price": sale_price,
        "stock": stock, "reorder_level": reorder_level, "batch_number": batch_number,
    }
    if expiry:
        fields["expiry"] = expiry
    try:
        medicine = _services().catalog.add_medicine(fields)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Added medicine {medicine.name} ({medicine.company}) id={medicine.id}")


@medicines_group.command('restock')
@click.argument('medicine_id')
@click.argument('quantity', type=int)
@with_appcontext
def restock(medicine_id, quantity):
    """Add units to a medicine's stock."""
    try:
        medicine = _services().ledger.restock(medicine_id, quantity)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS {medicine.name} stock is now {medicine.stock}")


@medicines_group.command('low-stock')
@click.option('--threshold', type=int, default=None, help='Fixed threshold instead of each reorder level')
@with_appcontext
def low_stock(threshold):
    medicines = _services().ledger.low_stock(threshold)
    if not medicines:
        click.echo("No low stock medicines.")
        return
    for m in medicines:
        click.echo(f"LOW {m.name} ({m.company}): {m.stock} left, reorder at {m.reorder_level}")


@medicines_group.command('expiring')
@click.option('--days', type=int, default=30)
@with_appcontext
def expiring(days):
    medicines = _services().ledger.expiring_soon(days)
    if not medicines:
        click.echo(f"Nothing expires in the next {days} days.")
        return
    for m in medicines:
        click.echo(f"EXPIRING {m.name} ({m.company}) batch {m.batch_number or '-'}: {m.expiry}")


# =============================================================================
# SALES
# =============================================================================

@click.group('sales')
def sales_group():
    """Sale history commands."""


@sales_group.command('list')
@click.option('--from', 'date_from', default=None, help='YYYY-MM-DD (inclusive)')
@click.option('--to', 'date_to', default=None, help='YYYY-MM-DD (inclusive)')
@with_appcontext
def list_sales(date_from, date_to):
    sales = _services().sales.list_sales(date_from, date_to)
    if not sales:
        click.echo("No sales found.")
        return
    for s in sales:
        click.echo(f"{s.id:<34} {s.date:<22} {len(s.items):>3} line(s) {s.total:>10.2f} {s.payment_method}")
    click.echo(f"Total: {len(sales)} sale(s)")


@sales_group.command('show')
@click.argument('sale_id')
@with_appcontext
def show_sale(sale_id):
    try:
        sale = _services().sales.get_sale(sale_id)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"Sale {sale.id} (invoice {sale.invoice_no}) on {sale.date}")
    for line in sale.items:
        click.echo(f"  {line.name} x{line.quantity} @ {line.unit_price:.2f} (-{line.discount_pct:g}%)")
    click.echo(f"  subtotal {sale.subtotal:.2f}  discount {sale.discount:.2f}  tax {sale.tax:.2f}  total {sale.total:.2f}")


# =============================================================================
# REFUNDS
# =============================================================================

@click.group('refunds')
def refunds_group():
    """Refund reconciliation commands."""


@refunds_group.command('summary')
@click.argument('sale_id')
@with_appcontext
def refund_summary(sale_id):
    """Show how much of each sale line is still refundable."""
    try:
        lines = _services().refunds.refund_summary(sale_id)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"{'Medicine':<24} {'Sold':>5} {'Refunded':>9} {'Available':>10}  Status")
    for line in lines:
        click.echo(
            f"{line['name'][:24]:<24} {line['sold']:>5} {line['refunded']:>9} "
            f"{line['available']:>10}  {line['status']}"
        )


@refunds_group.command('check')
@click.argument('sale_id')
@click.argument('medicine_id')
@click.argument('quantity', type=int)
@with_appcontext
def check_refund(sale_id, medicine_id, quantity):
    check = _services().refunds.check_refund(sale_id, medicine_id, quantity)
    if check.valid:
        click.echo(f"PASS {quantity} of {check.available_quantity} available unit(s) can be refunded")
    else:
        click.echo(f"FAIL {check.message}")


@refunds_group.command('submit')
@click.argument('sale_id')
@click.argument('lines', nargs=-1, required=True)
@click.option('--reason', type=click.Choice(REFUND_REASONS), required=True)
@click.option('--note', default=None)
@with_appcontext
def submit_refund(sale_id, lines, reason, note):
    """Refund <medicine_id>:<quantity> pairs of a sale and restore stock."""
    services = _services()
    try:
        sale = services.sales.get_sale(sale_id)
        refund_lines = []
        for value in lines:
            medicine_id, quantity = _parse_line(value)
            refund_lines.append(services.refunds.build_refund_line(sale, medicine_id, quantity))
        refund = services.refunds.submit_refund(sale, refund_lines, reason, note=note)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Refund {refund.id} recorded: amount {refund.amount:.2f}")


@refunds_group.command('list')
@click.option('--sale-id', default=None)
@with_appcontext
def list_refunds(sale_id):
    engine = _services().refunds
    refunds = engine.get_refunds_for_sale(sale_id) if sale_id else engine.list_refunds()
    if not refunds:
        click.echo("No refunds found.")
        return
    for r in refunds:
        units = sum(i.quantity for i in r.items)
        click.echo(f"{r.id:<34} sale {r.sale_id:<34} {units:>3} unit(s) {r.amount:>10.2f} {r.reason}")


# =============================================================================
# DATA
# =============================================================================

@click.group('data')
def data_group():
    """Backup, restore and wipe commands."""


@data_group.command('stats')
@with_appcontext
def data_stats():
    for name, count in _services().backup.data_stats().items():
        click.echo(f"{name:<10} {count}")


@data_group.command('export')
@click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None)
@with_appcontext
def export_data(output):
    """Write a backup document to --output (or stdout)."""
    text = json.dumps(_services().backup.export_data(), indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
        click.echo(f"PASS Exported data to {output}")
    else:
        click.echo(text)


@data_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def import_data(path, yes):
    """Replace all data with a backup document."""
    if not yes:
        click.confirm("WARN Importing replaces existing data. Continue?", abort=True)
    with open(path, encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as e:
            click.echo(f"FAIL {path} is not valid JSON: {e}")
            return
    try:
        stats = _services().backup.import_data(payload)
    except InvalidField as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Imported: {', '.join(f'{k}={v}' for k, v in stats.items())}")


@data_group.command('clear')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def clear_data(yes):
    """DANGER: delete every record in every collection."""
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)
    _services().backup.clear_all()
    click.echo("PASS All data cleared.")


# =============================================================================
# USERS
# =============================================================================

@click.group('users')
def users_group():
    """Advisory user list commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    for user in _services().users.list_users():
        click.echo(f"{user.id:<34} {user.email:<32} {user.role}")


@users_group.command('add')
@click.argument('email')
@click.option('--role', type=click.Choice(USER_ROLES), default='staff')
@with_appcontext
def add_user(email, role):
    try:
        user = _services().users.add_user(email, role)
    except PharmacyError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Added {user.email} as {user.role}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(medicines_group)
    app.cli.add_command(sales_group)
    app.cli.add_command(refunds_group)
    app.cli.add_command(data_group)
    app.cli.add_command(users_group)
