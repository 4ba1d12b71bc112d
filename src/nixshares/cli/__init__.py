import click

from nixshares.cli.mounts import mounts
from nixshares.cli.shares import shares
from nixshares.cli.system import system


@click.group()
@click.option("--config", "config_path", help="Path to the NixOS configuration file.")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR).")
@click.pass_context
def main(ctx, config_path, log_level):
    """NixOS share manager CLI"""
    from nixshares.logging_config import setup_logging

    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(shares)
main.add_command(mounts)
main.add_command(system)


@main.command()
@click.option('--host', default='127.0.0.1', help='The host to bind to.')
@click.option('--port', default=8000, help='The port to bind to.')
def server(host, port):
    """Run the FastAPI server."""
    import uvicorn

    from nixshares.api.server import app
    uvicorn.run(app, host=host, port=port)
