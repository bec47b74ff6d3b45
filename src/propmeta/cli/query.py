"""One-shot query commands: list, show, hover, complete."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from propmeta.cli.utils import build_once, workspace_argument
from propmeta.editor import CompletionSource, HoverSource


@click.command()
@workspace_argument
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_command(workspace: Path, as_json: bool) -> None:
    """List every property found on the workspace classpath.

    WORKSPACE holds the classpath file (default: current directory).
    """
    facade = build_once(workspace, quiet=as_json)
    descriptors = facade.list_all()

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in descriptors], indent=2, default=str))
        return

    if not descriptors:
        click.echo("No properties found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Property")
    table.add_column("Type")
    table.add_column("Default")
    for d in descriptors:
        name = f"[strike]{d.name}[/strike]" if d.is_deprecated else d.name
        default = "" if d.default_value is None else str(d.default_value)
        table.add_row(name, d.type or "", default)
    Console().print(table)


@click.command()
@click.argument("name")
@workspace_argument
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_command(name: str, workspace: Path, as_json: bool) -> None:
    """Show the metadata of one property NAME."""
    facade = build_once(workspace, quiet=as_json)
    descriptor = facade.lookup(name)
    if descriptor is None:
        raise click.ClickException(f"Unknown property: {name}")

    if as_json:
        click.echo(json.dumps(descriptor.to_dict(), indent=2, default=str))
        return

    click.echo(descriptor.name)
    click.echo(f"  Type:        {descriptor.type or '-'}")
    click.echo(f"  Default:     {descriptor.default_value if descriptor.default_value is not None else '-'}")
    click.echo(f"  Description: {descriptor.description or '-'}")
    if descriptor.origin:
        click.echo(f"  Source:      {descriptor.origin}")


@click.command()
@click.argument("line")
@workspace_argument
def hover_command(line: str, workspace: Path) -> None:
    """Print hover documentation for a .properties LINE."""
    hover = HoverSource(build_once(workspace, quiet=True)).provide(line)
    if hover is None:
        raise click.ClickException("No documentation for this line.")
    click.echo(hover.contents)


@click.command()
@click.argument("prefix", default="")
@workspace_argument
def complete_command(prefix: str, workspace: Path) -> None:
    """Print completion candidates for the line text PREFIX before the cursor."""
    items = CompletionSource(build_once(workspace, quiet=True)).provide(prefix)
    if items is None:
        return
    for item in items:
        if item.label.startswith(prefix.strip()):
            click.echo(item.label)
