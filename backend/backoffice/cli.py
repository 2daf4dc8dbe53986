# Overview: Flask CLI command groups for bootstrap, user management and stock inspection.

# backend/backoffice/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py.
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--owner "Owner Name"] [--owner-code default]
#   Idempotent bootstrap: creates the default owner and an admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users create --owner-id 1 --username clerk --email clerk@backoffice.local --password "Password123!"
# - python -m flask users list [--owner-id 1]
#
# Stock inspection:
# - python -m flask stock low [--owner-id 1]
#   Variants currently below their minimum stock level.
# - python -m flask stock movements --product-id 1 --variant-id 1 [--limit 50]
#   Ledger history of one variant, newest first.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Owner, Product, User
from .services.auth_service import create_owner, create_user, PasswordValidationError
from .services import ledger_service, products_service


DEFAULT_PASSWORD = "Password123!"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--owner', 'owner_name', default='Default Owner', help='Owner name')
@click.option('--owner-code', default='default', help='Owner code')
@with_appcontext
def init_system(owner_name, owner_code):
    """
    Create the default owner and an admin user if they are missing.

    The admin password defaults to "Password123!". Change it in production.
    """
    click.echo("START Initializing back office...")

    owner = db.session.query(Owner).filter_by(code=owner_code.strip().lower()).first()
    if not owner:
        owner = create_owner(owner_name, owner_code)
        click.echo(f"PASS Created owner: {owner.name} (ID: {owner.id}, Code: {owner.code})")
    else:
        click.echo(f"PASS Using existing owner: {owner.name} (ID: {owner.id})")

    admin = db.session.query(User).filter_by(owner_id=owner.id, username="admin").first()
    if not admin:
        admin = create_user(
            username="admin",
            email="admin@backoffice.local",
            password=DEFAULT_PASSWORD,
            owner_id=owner.id,
            name="Administrator",
        )
        click.echo(f"PASS Created user: {admin.username} (password: {DEFAULT_PASSWORD})")
    else:
        click.echo(f"PASS User already exists: {admin.username}")

    click.echo("DONE System initialized.")


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

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--owner-id', type=int, help='Owner ID (uses default if not specified)')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--name', default=None, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(owner_id, username, email, name, password):
    """
    Create a new user under an owner.

    Password must have 8+ chars with uppercase, lowercase, digit and special char.
    """
    if owner_id:
        owner = db.session.query(Owner).filter_by(id=owner_id).first()
        if not owner:
            raise click.ClickException(f"Owner ID {owner_id} not found")
    else:
        owner = db.session.query(Owner).order_by(Owner.id.asc()).first()
        if not owner:
            raise click.ClickException("No owner found. Run 'python -m flask system init' first.")

    try:
        user = create_user(
            username=username,
            email=email,
            password=password,
            owner_id=owner.id,
            name=name,
        )
    except PasswordValidationError as e:
        raise click.ClickException(f"Password validation failed: {e}")
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user: {user.username} ({user.email})")
    click.echo(f"     Owner: {owner.name} (ID: {owner.id})")


@users_group.command('list')
@click.option('--owner-id', type=int, help='Filter by owner ID')
@with_appcontext
def list_users(owner_id):
    """List users with owner and active status."""
    q = db.session.query(User)
    if owner_id:
        q = q.filter_by(owner_id=owner_id)
    users = q.order_by(User.owner_id.asc(), User.username.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    for user in users:
        status = "active" if user.is_active else "inactive"
        click.echo(f"{user.id:>5}  owner={user.owner_id:<4} {user.username:<24} {user.email:<32} {status}")


@click.group('stock')
def stock_group():
    """Stock inspection commands."""


@stock_group.command('low')
@click.option('--owner-id', type=int, help='Limit to one owner')
@with_appcontext
def low_stock_cli(owner_id):
    """List variants below their minimum stock level."""
    variants = products_service.list_low_stock_variants(owner_id)
    if not variants:
        click.echo("PASS No variants below minimum stock level.")
        return

    for variant in variants:
        click.echo(
            f"{variant.stock_status:<13} product={variant.product_id:<5} variant={variant.id:<5} "
            f"{variant.product.name} {variant.packing_size}: {variant.quantity} (min {variant.min_stock_level})"
        )


@stock_group.command('movements')
@click.option('--product-id', type=int, required=True, help='Product ID')
@click.option('--variant-id', type=int, required=True, help='Variant ID')
@click.option('--limit', type=int, default=50, show_default=True)
@with_appcontext
def stock_movements_cli(product_id, variant_id, limit):
    """Show the stock ledger of one variant, newest first."""
    product = db.session.query(Product).filter_by(id=product_id).first()
    if not product:
        raise click.ClickException(f"Product ID {product_id} not found")

    movements = ledger_service.list_stock_movements(
        owner_id=product.owner_id,
        product_id=product_id,
        variant_id=variant_id,
        limit=limit,
    )
    if not movements:
        click.echo("No stock movements recorded.")
        return

    for m in movements:
        reference = f"{m.reference_type}#{m.reference_id}" if m.reference_type else "-"
        click.echo(
            f"{m.created_at}  {m.movement_type:<16} qty={m.quantity:<6} "
            f"balance={m.balance_after:<6} {reference}  {m.note or ''}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(stock_group)
