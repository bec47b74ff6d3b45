"""CLI utilities."""

import asyncio
from pathlib import Path

import click

from propmeta.config.loader import load_config
from propmeta.config.models import PropMetaConfig
from propmeta.core.errors import ConfigError
from propmeta.core.progress import pluralize, spinner
from propmeta.index.classpath import read_path_list
from propmeta.index.ops import IndexCoordinator
from propmeta.index.query import QueryFacade

workspace_argument = click.argument(
    "workspace",
    default=".",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)


def load_workspace_config(workspace: Path) -> PropMetaConfig:
    """Load config for ``workspace``, turning config errors into CLI errors."""
    try:
        return load_config(workspace)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def build_once(workspace: Path, *, quiet: bool = False) -> QueryFacade:
    """Build and publish a single generation from the workspace classpath file."""
    workspace = workspace.resolve()
    config = load_workspace_config(workspace)
    classpath_file = config.classpath.resolve(workspace)

    paths = read_path_list(classpath_file)
    facade = QueryFacade()
    coordinator = IndexCoordinator.from_config(facade, config.indexer)
    try:
        if quiet:
            asyncio.run(coordinator.rebuild(paths))
        else:
            with spinner(f"Indexing {pluralize(len(paths), 'archive')}"):
                asyncio.run(coordinator.rebuild(paths))
    finally:
        coordinator.builder.close()
    return facade
