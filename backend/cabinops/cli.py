# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/cabinops/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates missing tables, the nine cabins and the default admin.
# - python -m flask system check
#   Verify every required table exists; prints the remedy when some are missing.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system schema-sql
#   Print the CREATE TABLE statements for manual provisioning.
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with roles and last login.
# - python -m flask users create --username anna --password "Password123!" --role RECEPTION
#   Create a user (prompts if options are omitted).
#
# Cabins:
# - python -m flask cabins list
#   List cabins with status and derived stay/issue/cleaning references.
#
# Maintenance:
# - python -m flask maintenance cleanup-stays
#   End stays past their checkout date on cabins that are no longer occupied.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .constants import VALID_ROLES
from .models import User
from .services import entity_store, maintenance_service, setup_service
from .services.auth_service import build_user, PasswordValidationError
from .services.entity_store import SchemaNotProvisionedError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize CabinOps: schema, cabins and the default administrator.

    Creates:
    - Any missing tables
    - The nine fixed cabins, each EMPTY_CLEAN
    - The admin account from DEFAULT_ADMIN_USERNAME / DEFAULT_ADMIN_PASSWORD

    SECURITY: Change the admin password immediately in production!
    """
    click.echo("START Initializing CabinOps...")

    setup_service.provision_schema()
    click.echo("PASS Schema provisioned")

    created = setup_service.seed_cabins()
    click.echo(f"PASS Cabins seeded ({created} created)")

    try:
        admin = setup_service.ensure_admin()
    except PasswordValidationError as e:
        click.echo(f"FAIL Default admin password rejected: {str(e)}")
        return

    username = current_app.config["DEFAULT_ADMIN_USERNAME"]
    if admin:
        click.echo(f"PASS Created admin user: {username}")
    else:
        click.echo(f"WARN  User '{username}' already exists, skipping...")

    click.echo("\n" + "="*60)
    click.echo("DONE CabinOps Initialized Successfully!")
    click.echo("="*60)


@system_group.command('check')
@with_appcontext
def check_system():
    """Verify the database is reachable and every required table exists."""
    try:
        reachable = entity_store.check_connection()
    except SchemaNotProvisionedError as e:
        click.echo(f"FAIL Missing tables: {', '.join(e.missing_tables)}")
        click.echo("Run 'python -m flask system init' or apply the output of 'python -m flask system schema-sql'.")
        raise SystemExit(1)

    if not reachable:
        click.echo("FAIL Database unreachable (see log for details)")
        raise SystemExit(1)

    click.echo(f"PASS All {len(entity_store.REQUIRED_TABLES)} tables present")


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


@system_group.command('schema-sql')
@with_appcontext
def schema_sql():
    """Print DDL for the seven tables."""
    click.echo(setup_service.schema_sql())


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(VALID_ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """
    Create a new user.

    Password must meet strength requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """
    if db.session.query(User).filter_by(username=username).first():
        click.echo(f"FAIL User '{username}' already exists")
        return

    try:
        user = build_user(username, password, role)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
        return
    except ValueError as e:
        click.echo(f"FAIL Failed to create user: {str(e)}")
        return

    db.session.add(user)
    db.session.commit()
    click.echo(f"PASS Created user: {username} with role '{role}'")
    click.echo("SECURITY Password securely hashed with bcrypt")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = entity_store.get_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<38} {'Username':<20} {'Role':<14} {'Last login'}")
    click.echo("="*90)

    for user in users:
        last_login = user["last_login_at"] or "never"
        click.echo(f"{user['id']:<38} {user['username']:<20} {user['role']:<14} {last_login}")

    click.echo("="*90 + "\n")


@click.group('cabins')
def cabins_group():
    """Cabin inspection commands."""


@cabins_group.command('list')
@with_appcontext
def list_cabins():
    """List cabins with status and derived references."""
    entity_store.check_connection()
    cabins = entity_store.get_cabins()

    if not cabins:
        click.echo("No cabins found. Run 'python -m flask system init' first.")
        return

    click.echo(f"{'Name':<12} {'Status':<18} {'Ver':<4} {'Stay':<6} {'Issue':<6} {'Cleaning'}")
    for cabin in cabins:
        click.echo(
            f"{cabin['name']:<12} {cabin['status']:<18} {cabin['version_id']:<4} "
            f"{'yes' if cabin['current_stay_id'] else '-':<6} "
            f"{'yes' if cabin['active_issue_id'] else '-':<6} "
            f"{'pending' if cabin['pending_cleaning_id'] else '-'}"
        )


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-stays')
@with_appcontext
def cleanup_stays_cli():
    """
    End stays past their checkout date.

    Stays on cabins that are still OCCUPIED are kept.
    """
    ended = maintenance_service.cleanup_stays()
    click.echo(f"Ended {ended} stays past their checkout date.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(cabins_group)
    app.cli.add_command(maintenance_group)
