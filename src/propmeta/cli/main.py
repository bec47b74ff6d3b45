"""propmeta CLI - propmeta command."""

import click

from propmeta import __version__
from propmeta.cli.query import complete_command, hover_command, list_command, show_command
from propmeta.cli.watch import watch_command
from propmeta.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="propmeta")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """propmeta - configuration metadata lookup for .properties files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(list_command, name="list")
cli.add_command(show_command, name="show")
cli.add_command(hover_command, name="hover")
cli.add_command(complete_command, name="complete")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
