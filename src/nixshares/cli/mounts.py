import click

from nixshares.cli.utils import config_source, echo_error
from nixshares.exceptions import NixSharesError


@click.group()
def mounts():
    """Mount and unmount remote CIFS shares."""
    pass


@mounts.command(name="list")
@click.pass_context
def list_mounts(ctx):
    """List configured and currently mounted CIFS shares."""
    from nixshares.mounts.state import list_all_shares
    from nixshares.shares.remote import RemoteShareManager
    manager = RemoteShareManager(config_source(ctx))
    try:
        configured = manager.list_shares()
    except NixSharesError as e:
        echo_error("reading configured shares", e)
        configured = []

    shares = list_all_shares(configured, manager.fs_type)
    if not shares:
        click.echo("No remote shares found.")
        return

    for share in shares:
        state = "mounted" if share.is_mounted else "not mounted"
        click.echo(f"{share.target}: {share.source} ({state})")
        if share.options:
            click.echo(f"  Options: {share.options}")


@mounts.command(name="status")
@click.argument("mount_point")
def mount_status(mount_point):
    """Show whether MOUNT_POINT is currently mounted."""
    from nixshares.mounts.state import is_mounted
    if is_mounted(mount_point):
        click.echo(f"{mount_point} is mounted.")
    else:
        click.echo(f"{mount_point} is not mounted.")


@mounts.command(name="mount")
@click.argument("remote_url")
@click.argument("mount_point")
@click.option("--username", prompt=True, help="User to authenticate as")
@click.option("--password", prompt=True, hide_input=True, help="Password for the user")
@click.option("--uid", type=int, default=None, help="Owner uid of the mounted files (default: current user)")
@click.option("--gid", type=int, default=None, help="Owner gid of the mounted files (default: current group)")
@click.option("-o", "--option", "extra_options", multiple=True, help="Additional mount option, may be repeated")
def mount_share(remote_url, mount_point, username, password, uid, gid, extra_options):
    """Mount REMOTE_URL (//server/share) on MOUNT_POINT."""
    from nixshares.mounts.cifs import CifsMountManager
    from nixshares.shares.models import MountOptions
    options = MountOptions(uid=uid, gid=gid)
    options.additional_opts.extend(extra_options)
    try:
        CifsMountManager().mount(remote_url, mount_point, username, password, options)
        click.echo(f"Mounted {remote_url} on {mount_point}.")
    except NixSharesError as e:
        echo_error("mounting share", e)


@mounts.command(name="unmount")
@click.argument("mount_point")
def unmount_share(mount_point):
    """Unmount the share mounted on MOUNT_POINT."""
    from nixshares.mounts.cifs import CifsMountManager
    try:
        CifsMountManager().unmount(mount_point)
        click.echo(f"Unmounted {mount_point}.")
    except NixSharesError as e:
        echo_error("unmounting share", e)
