# Overview: Flask CLI command groups for bootstrap, demo data and console reports.

# backend/restoledger/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv and `pip install -e .`
# - Use: flask --app restoledger <group> <command> [options]
#
# System bootstrap/repair:
# - flask --app restoledger system init-db
#   Create any missing tables (idempotent).
# - flask --app restoledger system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - flask --app restoledger system seed
#   Load three demo branches, five menu items and five stock items (skipped if data exists).
#
# Organization management:
# - flask --app restoledger orgs list
# - flask --app restoledger orgs create --name "Harbor Branch" --address "1 Quay St"
#
# Reports:
# - flask --app restoledger reports summary [--org-id 1] [--start 2024-01-01 --end 2024-01-31]
#   Print revenue, cost, profit, losses and net profit. The date range applies only when both bounds are given.
# - flask --app restoledger reports transactions [--org-id 1] [--type sales|losses] [--limit 20]
#   Print the merged sales/losses ledger, newest first.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Organization
from .services import analytics_service, feed_service, menu_service, organization_service, stock_service
from .validation import ValidationError


def _money(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    return f"{sign}{abs(cents) / 100:,.2f}"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database schema is in place.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'flask --app restoledger system seed' for demo data.")


SEED_ORGANIZATIONS = [
    {"name": "Downtown Branch", "address": "123 Main St, Downtown"},
    {"name": "Uptown Branch", "address": "456 Oak Ave, Uptown"},
    {"name": "Westside Branch", "address": "789 Pine Rd, Westside"},
]

SEED_MENU_ITEMS = [
    {"name": "Margherita Pizza", "category": "Main Course", "cost_price_cents": 850, "selling_price_cents": 1599},
    {"name": "Chicken Tacos", "category": "Main Course", "cost_price_cents": 625, "selling_price_cents": 1299},
    {"name": "Caesar Salad", "category": "Appetizers", "cost_price_cents": 475, "selling_price_cents": 999},
    {"name": "Chocolate Cake", "category": "Desserts", "cost_price_cents": 350, "selling_price_cents": 799},
    {"name": "Coca Cola", "category": "Beverages", "cost_price_cents": 125, "selling_price_cents": 299},
]

# (org index, item)
SEED_STOCK_ITEMS = [
    (0, {"name": "Tomatoes", "category": "Vegetables", "unit": "kg", "cost_per_unit_cents": 350, "current_stock": 25}),
    (0, {"name": "Chicken Breast", "category": "Meat", "unit": "kg", "cost_per_unit_cents": 899, "current_stock": 15}),
    (0, {"name": "Mozzarella Cheese", "category": "Dairy", "unit": "kg", "cost_per_unit_cents": 1250, "current_stock": 8}),
    (1, {"name": "Flour", "category": "Other", "unit": "kg", "cost_per_unit_cents": 225, "current_stock": 50}),
    (1, {"name": "Olive Oil", "category": "Other", "unit": "liters", "cost_per_unit_cents": 1599, "current_stock": 12}),
]


@system_group.command('seed')
@with_appcontext
def seed():
    """Load demo branches, menu and stock. Does nothing if organizations already exist."""
    if db.session.query(Organization).first():
        click.echo("SKIP Organizations already exist; not seeding.")
        return

    orgs = [organization_service.create_organization(patch=data) for data in SEED_ORGANIZATIONS]
    click.echo(f"PASS Created {len(orgs)} organizations")

    for data in SEED_MENU_ITEMS:
        menu_service.create_menu_item(patch=data)
    click.echo(f"PASS Created {len(SEED_MENU_ITEMS)} menu items")

    for org_index, data in SEED_STOCK_ITEMS:
        stock_service.create_stock_item(patch={**data, "organization_id": orgs[org_index].id})
    click.echo(f"PASS Created {len(SEED_STOCK_ITEMS)} stock items")


@click.group('orgs')
def orgs_group():
    """Organization (branch) management."""


@orgs_group.command('list')
@with_appcontext
def list_orgs():
    """List all organizations."""
    orgs = organization_service.list_organizations()
    if not orgs:
        click.echo("No organizations found.")
        return
    for org in orgs:
        click.echo(f"{org.id:>4}  {org.name}  {org.address or ''}".rstrip())


@orgs_group.command('create')
@click.option('--name', required=True, help='Organization name')
@click.option('--address', default=None, help='Street address')
@with_appcontext
def create_org(name, address):
    """Create a new organization."""
    org = organization_service.create_organization(patch={"name": name, "address": address})
    click.echo(f"PASS Created organization: {org.name} (ID: {org.id})")


@click.group('reports')
def reports_group():
    """Console financial reports."""


@reports_group.command('summary')
@click.option('--org-id', type=int, default=None, help='Only this organization')
@click.option('--start', default=None, help='ISO-8601 start (needs --end too)')
@click.option('--end', default=None, help='ISO-8601 end (needs --start too)')
@with_appcontext
def summary(org_id, start, end):
    """Print the financial summary for a selection."""
    try:
        summary_filter = analytics_service.build_summary_filter(organization_id=org_id, start=start, end=end)
    except ValidationError as exc:
        raise click.BadParameter(str(exc))

    if (start or end) and not summary_filter.has_date_range:
        click.echo("NOTE Only one date bound given; no date filter applied.")

    result = analytics_service.get_summary(summary_filter)
    click.echo(f"Revenue      {_money(result.total_revenue_cents):>14}")
    click.echo(f"Cost         {_money(result.total_cost_cents):>14}")
    click.echo(f"Gross profit {_money(result.total_profit_cents):>14}")
    click.echo(f"Losses       {_money(result.total_loss_cents):>14}")
    click.echo(f"Net profit   {_money(result.net_profit_cents):>14}")
    click.echo(f"Sales: {result.sales_count}  Losses: {result.loss_count}")


@reports_group.command('transactions')
@click.option('--org-id', type=int, default=None, help='Only this organization')
@click.option('--type', 'kind', type=click.Choice(feed_service.FEED_KINDS), default=None)
@click.option('--start', default=None, help='ISO-8601 lower bound on the transaction date')
@click.option('--end', default=None, help='ISO-8601 upper bound on the transaction date')
@click.option('--limit', type=int, default=20, show_default=True)
@with_appcontext
def transactions(org_id, kind, start, end, limit):
    """Print the merged sales/losses ledger, newest first."""
    try:
        feed_filter = feed_service.build_feed_filter(organization_id=org_id, start=start, end=end, kind=kind)
    except ValidationError as exc:
        raise click.BadParameter(str(exc))

    lines = feed_service.get_transaction_feed(feed_filter)
    if not lines:
        click.echo("No transactions found.")
        return
    for line in lines[:limit]:
        click.echo(
            f"{line.date:%Y-%m-%d %H:%M}  {line.kind:<4}  {_money(line.amount_cents):>12}  "
            f"x{line.quantity:<4} {line.item_name}  [{line.organization_name or '-'}]"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(orgs_group)
    app.cli.add_command(reports_group)
