# Overview: Flask CLI command groups for stock, sales, point-of-sale and maintenance.

# backend/saree_pos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to saree_pos (PowerShell: $env:FLASK_APP="saree_pos").
# - Use: python -m flask <group> <command> [options]
#
# Stock:
# - python -m flask stock list [--status available]
# - python -m flask stock add --code SAR101 --name "Red Floral Silk" --type Paithani --mrp 500 --asp 400
# - python -m flask stock import stock.csv
# - python -m flask stock export [--out DIR]
#
# Sales:
# - python -m flask sales list
# - python -m flask sales export [--out DIR]
#
# Point of sale:
# - python -m flask pos sell SAR101 [--payment UPI]
# - python -m flask pos return SAR101
#
# System:
# - python -m flask system init-db
# - python -m flask system summary
# - python -m flask system reset --pin 1234
#   Wipes all stock and sales (asks for confirmation).

from pathlib import Path

import click
from flask.cli import with_appcontext

from .extensions import db, get_ledger
from .models import PAYMENT_CASH, VALID_PAYMENT_METHODS
from .services.exceptions import LedgerError
from .services.import_service import decode_table
from .services.ledger_service import COLLECTION_INVENTORY, COLLECTION_SALES
from .services.reporting_service import dashboard_summary


def _fail(exc: Exception):
    raise click.ClickException(str(exc))


def _write_export(collection: str, out_dir: str) -> None:
    ledger = get_ledger()
    try:
        filename, text = ledger.export(collection)
    except LedgerError as e:
        _fail(e)
    path = Path(out_dir) / filename
    path.write_text(text, encoding="utf-8")
    click.echo(f"PASS Wrote {path}")


# =============================================================================
# STOCK
# =============================================================================

@click.group('stock')
def stock_group():
    """Stock registration, import and export."""


@stock_group.command('list')
@click.option('--status', type=click.Choice(['available', 'sold']), default=None)
@with_appcontext
def list_stock(status):
    items = get_ledger().list_items(status=status)
    if not items:
        click.echo("No sarees in inventory")
        return
    for item in items:
        click.echo(f"{item.code:<16} {item.status:<10} {item.listPrice:>8}  {item.name} ({item.type})")
    click.echo(f"{len(items)} item(s)")


@stock_group.command('add')
@click.option('--code', default='', help='Item code (generated from type when omitted)')
@click.option('--name', default='')
@click.option('--type', 'item_type', default='')
@click.option('--shop-name', default='')
@click.option('--shop-code', default='')
@click.option('--cost', default='0')
@click.option('--mrp', default='0')
@click.option('--asp', default='0')
@with_appcontext
def add_stock(code, name, item_type, shop_name, shop_code, cost, mrp, asp):
    ledger = get_ledger()
    try:
        item = ledger.add_item({
            "code": code,
            "name": name,
            "type": item_type,
            "shopName": shop_name,
            "shopCode": shop_code,
            "costPrice": cost,
            "listPrice": mrp,
            "altPrice": asp,
        })
    except LedgerError as e:
        _fail(e)
    ledger.flush()
    click.echo(f"PASS Saree added! Code: {item.code}")


@stock_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_stock(path):
    ledger = get_ledger()
    try:
        plan = ledger.import_table(decode_table(Path(path).read_bytes()))
    except LedgerError as e:
        _fail(e)
    ledger.flush()
    click.echo(
        f"PASS Imported {plan.added} saree(s); {plan.duplicates} duplicate(s), {plan.blank} blank code(s) skipped"
    )


@stock_group.command('export')
@click.option('--out', 'out_dir', default='.', type=click.Path(file_okay=False))
@with_appcontext
def export_stock(out_dir):
    _write_export(COLLECTION_INVENTORY, out_dir)


# =============================================================================
# SALES
# =============================================================================

@click.group('sales')
def sales_group():
    """Sales log inspection and export."""


@sales_group.command('list')
@with_appcontext
def list_sales():
    sales = get_ledger().list_sales()
    if not sales:
        click.echo("No sales recorded")
        return
    for sale in sales:
        click.echo(f"{sale.saleDate:<22} {sale.sareeCode:<16} {sale.paymentMethod:<5} {sale.salePrice:>8}")
    click.echo(f"{len(sales)} sale(s)")


@sales_group.command('export')
@click.option('--out', 'out_dir', default='.', type=click.Path(file_okay=False))
@with_appcontext
def export_sales(out_dir):
    _write_export(COLLECTION_SALES, out_dir)


# =============================================================================
# POINT OF SALE
# =============================================================================

@click.group('pos')
def pos_group():
    """Sell and return individual items."""


@pos_group.command('sell')
@click.argument('code')
@click.option('--payment', type=click.Choice(list(VALID_PAYMENT_METHODS)), default=PAYMENT_CASH)
@with_appcontext
def sell_item(code, payment):
    ledger = get_ledger()
    try:
        sale = ledger.sell(code, payment)
    except LedgerError as e:
        _fail(e)
    ledger.flush()
    click.echo(f"PASS {sale.sareeCode} sold for {sale.salePrice} ({sale.paymentMethod})")


@pos_group.command('return')
@click.argument('code')
@with_appcontext
def return_item(code):
    ledger = get_ledger()
    try:
        item = ledger.process_return(code)
    except LedgerError as e:
        _fail(e)
    ledger.flush()
    click.echo(f"PASS {item.code} returned to stock")


# =============================================================================
# SYSTEM
# =============================================================================

@click.group('system')
def system_group():
    """Database bootstrap and maintenance commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    db.create_all()
    click.echo("PASS Database tables ready")


@system_group.command('summary')
@with_appcontext
def summary():
    for key, value in dashboard_summary(get_ledger()).items():
        click.echo(f"{key}: {value}")


@system_group.command('reset')
@click.option('--pin', prompt=True, hide_input=True, help='Factory reset PIN')
@click.confirmation_option(prompt='This erases ALL stock and sales on this device. Continue?')
@with_appcontext
def reset(pin):
    ledger = get_ledger()
    try:
        ledger.factory_reset(pin)
    except LedgerError as e:
        _fail(e)
    ledger.flush()
    click.echo("PASS All data has been reset")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(stock_group)
    app.cli.add_command(sales_group)
    app.cli.add_command(pos_group)
    app.cli.add_command(system_group)
