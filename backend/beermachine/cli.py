# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/beermachine/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--username admin --password "secret"]
#   Idempotent bootstrap: creates tables and a default admin if none exists.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
#   List all accounts with type, credits and active status.
# - python -m flask users create-staff --username bar --password "secret" --user-type seller
#   Create an admin or seller (prompts if options are omitted).
#
# Maintenance:
# - python -m flask sessions cleanup
#   Delete expired and revoked sessions older than 30 days.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import User, STAFF_TYPES
from .services import session_service
from .services.auth_service import create_staff_user
from .validation import ConflictError, ValidationError

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--username', default=DEFAULT_ADMIN_USERNAME, help='Default admin username')
@click.option('--password', default=DEFAULT_ADMIN_PASSWORD, help='Default admin password')
@with_appcontext
def init_system(username, password):
    """
    Create the schema and a default admin account.

    Safe to run repeatedly: tables are only created when missing and the
    admin is only created when no admin exists yet.

    SECURITY: Change the default password immediately in production!
    """
    click.echo("START Initializing beer machine...")
    db.create_all()

    existing_admin = db.session.query(User).filter_by(user_type="admin").first()
    if existing_admin:
        click.echo(f"PASS Admin already exists: {existing_admin.username}")
        return

    try:
        admin = create_staff_user(username, password, "admin")
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created admin: {admin.username} (ID: {admin.id})")


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
    """Account inspection and staff bootstrap."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all accounts."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Username':<25} {'Type':<12} {'Credits':<10} {'Active'}")
    click.echo("="*70)

    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.username:<25} {user.user_type:<12} {user.credits:<10} {active_str}")

    click.echo("="*70 + "\n")


@users_group.command('create-staff')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--user-type', type=click.Choice(STAFF_TYPES), default='seller', show_default=True, help='Staff type')
@with_appcontext
def create_staff_cli(username, password, user_type):
    """Create an admin or seller account."""
    try:
        user = create_staff_user(username, password, user_type)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created {user.user_type}: {user.username} (ID: {user.id})")


@click.group('sessions')
def sessions_group():
    """Session maintenance."""


@sessions_group.command('cleanup')
@with_appcontext
def cleanup_sessions():
    """Delete expired and revoked sessions older than 30 days."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} old session(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(sessions_group)
