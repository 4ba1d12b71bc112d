import click

from nixshares.cli.utils import config_source, echo_error
from nixshares.exceptions import NixSharesError


@click.group()
def shares():
    """Manage shares."""
    pass


@shares.group()
def local():
    """Manage Samba shares exported by this machine."""
    pass


@local.command(name="list")
@click.pass_context
def list_local_shares(ctx):
    """List Samba shares."""
    from nixshares.shares.local import LocalShareManager
    manager = LocalShareManager(config_source(ctx))
    try:
        found = manager.list_shares()
    except NixSharesError as e:
        echo_error("listing shares", e)
        return
    if not found:
        click.echo("No shares found.")
        return

    for share in found:
        click.echo(f"Name: {share.name}")
        click.echo(f"  Path: {share.path}")
        click.echo(f"  Browsable: {share.browsable}")
        click.echo(f"  Read Only: {share.read_only}")
        click.echo(f"  Guest OK: {share.guest_ok}")
        if share.force_user:
            click.echo(f"  Force User: {share.force_user}")
        if share.force_group:
            click.echo(f"  Force Group: {share.force_group}")
        click.echo("-" * 20)


@local.command(name="create")
@click.argument("name")
@click.argument("path")
@click.option("--browsable/--no-browsable", default=True, help="Set browsable")
@click.option("--read-only", is_flag=True, help="Set read only")
@click.option("--guest-ok", is_flag=True, help="Allow guest access")
@click.option("--force-user", default="", help="User all file operations are performed as")
@click.option("--force-group", default="", help="Group all file operations are performed as")
@click.pass_context
def create_local_share(ctx, name, path, browsable, read_only, guest_ok, force_user, force_group):
    """Create a Samba share."""
    from nixshares.shares.local import LocalShareManager
    from nixshares.shares.models import LocalShare
    manager = LocalShareManager(config_source(ctx))
    try:
        manager.create_share(LocalShare(
            name=name,
            path=path,
            browsable=browsable,
            read_only=read_only,
            guest_ok=guest_ok,
            force_user=force_user,
            force_group=force_group,
        ))
        click.echo(f"Share '{name}' created.")
    except NixSharesError as e:
        echo_error("creating share", e)


@local.command(name="update")
@click.argument("name")
@click.option("--rename", default=None, help="New share name")
@click.option("--path", default=None, help="New shared path")
@click.option("--browsable/--no-browsable", default=None, help="Set browsable")
@click.option("--read-only/--read-write", default=None, help="Set read only")
@click.option("--guest-ok/--no-guest", default=None, help="Allow guest access")
@click.option("--force-user", default=None, help="User all file operations are performed as")
@click.option("--force-group", default=None, help="Group all file operations are performed as")
@click.pass_context
def update_local_share(ctx, name, rename, path, browsable, read_only, guest_ok, force_user, force_group):
    """Update a Samba share. Options that are not given keep their value."""
    from nixshares.shares.local import LocalShareManager
    from nixshares.shares.models import LocalShare
    manager = LocalShareManager(config_source(ctx))
    try:
        current = manager.get_share(name)
        updated = LocalShare(
            name=rename or current.name,
            path=path if path is not None else current.path,
            browsable=current.browsable if browsable is None else browsable,
            read_only=current.read_only if read_only is None else read_only,
            guest_ok=current.guest_ok if guest_ok is None else guest_ok,
            force_user=current.force_user if force_user is None else force_user,
            force_group=current.force_group if force_group is None else force_group,
        )
        manager.update_share(name, updated)
        click.echo(f"Share '{name}' updated.")
    except NixSharesError as e:
        echo_error("updating share", e)


@local.command(name="delete")
@click.argument("name")
@click.pass_context
def delete_local_share(ctx, name):
    """Delete a Samba share."""
    from nixshares.shares.local import LocalShareManager
    manager = LocalShareManager(config_source(ctx))
    try:
        manager.delete_share(name)
        click.echo(f"Share '{name}' deleted.")
    except NixSharesError as e:
        echo_error("deleting share", e)


@shares.group()
def remote():
    """Manage CIFS shares mounted from other machines."""
    pass


@remote.command(name="list")
@click.pass_context
def list_remote_shares(ctx):
    """List configured remote shares."""
    from nixshares.shares.remote import RemoteShareManager
    manager = RemoteShareManager(config_source(ctx))
    try:
        found = manager.list_shares()
    except NixSharesError as e:
        echo_error("listing remote shares", e)
        return
    if not found:
        click.echo("No remote shares found.")
        return

    for share in found:
        click.echo(f"Mount Point: {share.name}")
        click.echo(f"  Remote: {share.remote_path}")
        click.echo(f"  Credentials: {share.credentials or '-'}")
        click.echo(f"  UID/GID: {share.force_user}/{share.force_group}")
        click.echo("-" * 20)


@remote.command(name="create")
@click.argument("mount_point")
@click.argument("remote_path")
@click.option("--credentials", default="", help="Path to a credentials file")
@click.option("--uid", default="1000", help="Owner uid of the mounted files")
@click.option("--gid", default="100", help="Owner gid of the mounted files")
@click.pass_context
def create_remote_share(ctx, mount_point, remote_path, credentials, uid, gid):
    """Add a CIFS mount to the configuration."""
    from nixshares.shares.models import RemoteShare
    from nixshares.shares.remote import RemoteShareManager
    manager = RemoteShareManager(config_source(ctx))
    try:
        manager.create_share(RemoteShare(
            name=mount_point,
            remote_path=remote_path,
            fs_type=manager.fs_type,
            credentials=credentials,
            force_user=uid,
            force_group=gid,
        ))
        click.echo(f"Remote share '{mount_point}' created.")
    except NixSharesError as e:
        echo_error("creating remote share", e)


@remote.command(name="update")
@click.argument("mount_point")
@click.option("--mount-point", "new_mount_point", default=None, help="New mount point")
@click.option("--remote-path", default=None, help="New remote address (//server/share)")
@click.option("--credentials", default=None, help="Path to a credentials file")
@click.option("--uid", default=None, help="Owner uid of the mounted files")
@click.option("--gid", default=None, help="Owner gid of the mounted files")
@click.pass_context
def update_remote_share(ctx, mount_point, new_mount_point, remote_path, credentials, uid, gid):
    """Update a CIFS mount. Options that are not given keep their value."""
    from nixshares.shares.models import RemoteShare
    from nixshares.shares.remote import RemoteShareManager
    manager = RemoteShareManager(config_source(ctx))
    try:
        current = manager.get_share(mount_point)
        manager.update_share(mount_point, RemoteShare(
            name=new_mount_point or current.name,
            remote_path=remote_path or current.remote_path,
            fs_type=current.fs_type,
            credentials=current.credentials if credentials is None else credentials,
            force_user=uid or current.force_user,
            force_group=gid or current.force_group,
        ))
        click.echo(f"Remote share '{mount_point}' updated.")
    except NixSharesError as e:
        echo_error("updating remote share", e)


@remote.command(name="delete")
@click.argument("mount_point")
@click.pass_context
def delete_remote_share(ctx, mount_point):
    """Remove a CIFS mount from the configuration."""
    from nixshares.shares.remote import RemoteShareManager
    manager = RemoteShareManager(config_source(ctx))
    try:
        manager.delete_share(mount_point)
        click.echo(f"Remote share '{mount_point}' deleted.")
    except NixSharesError as e:
        echo_error("deleting remote share", e)
