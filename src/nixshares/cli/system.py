import click

from nixshares.cli.utils import echo_error
from nixshares.exceptions import NixSharesError


@click.group()
def system():
    """Host information and configuration activation."""
    pass


@system.command()
def users():
    """List local user accounts usable as share owners."""
    from nixshares.system.users import get_system_users
    for name in get_system_users():
        click.echo(name)


@system.command()
def groups():
    """List local groups usable as share owners."""
    from nixshares.system.users import get_system_groups
    for name in get_system_groups():
        click.echo(name)


@system.command()
@click.option("--command", "command", default=None, help="Override the rebuild command")
def rebuild(command):
    """Apply the configuration (nixos-rebuild switch)."""
    from nixshares.system.rebuild import rebuild_system
    click.echo("Rebuilding system configuration...")
    try:
        rebuild_system(command)
        click.echo("System configuration applied.")
    except NixSharesError as e:
        echo_error("rebuilding system", e)
