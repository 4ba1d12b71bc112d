import click


def config_source(ctx: click.Context):
    """File source for the configuration path chosen on the command line."""
    from nixshares.config.source import FileConfigSource

    obj = ctx.find_root().obj or {}
    return FileConfigSource(obj.get("config_path"))


def echo_error(action: str, error: Exception):
    click.echo(f"Error {action}: {error}", err=True)
