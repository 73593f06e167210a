"""
Operator commands, registered under ``flask admin``.
"""

import click
from flask.cli import AppGroup

from backoffice.errors import ValidationFailed
from backoffice.services import sessions, users

admin_cli = AppGroup('admin', help='Manage admin users and sessions.')


@admin_cli.command('create-user')
@click.argument('email')
@click.password_option(help='Password for the new admin user.')
def create_user_command(email, password):
    """Provision an admin user."""
    try:
        user = users.create_user({'email': email, 'password': password})
    except ValidationFailed as e:
        raise click.ClickException(e.full_messages())
    click.echo(f'Created admin user {user.email} (id {user.id})')


@admin_cli.command('prune-sessions')
def prune_sessions_command():
    """Delete expired admin sessions."""
    deleted = sessions.prune_expired()
    click.echo(f'Removed {deleted} expired session(s)')
