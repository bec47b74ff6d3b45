"""propmeta watch command - keep the index current while the classpath changes."""

import asyncio
import contextlib
import signal
from pathlib import Path

import click

from propmeta.cli.utils import load_workspace_config, workspace_argument
from propmeta.config.models import PropMetaConfig
from propmeta.core.logging import configure_logging
from propmeta.core.progress import pluralize, status
from propmeta.daemon.indexer import BackgroundIndexer
from propmeta.daemon.watcher import ClasspathWatcher
from propmeta.index.builder import BuildResult
from propmeta.index.ops import IndexCoordinator
from propmeta.index.query import QueryFacade


async def _print_result(result: BuildResult) -> None:
    stats = result.stats
    summary = f"generation {stats.generation}: {pluralize(stats.properties, 'property', 'properties')}"
    summary += f" from {pluralize(stats.archives_total, 'archive')}"
    if stats.archives_failed:
        summary += f" ({stats.archives_failed} unreadable)"
    status(f"{summary} in {stats.duration_seconds:.2f}s", style="success")


async def run_watch(workspace: Path, config: PropMetaConfig) -> None:
    """Initial build, then rebuild on every classpath change until cancelled."""
    classpath_file = config.classpath.resolve(workspace)
    coordinator = IndexCoordinator.from_config(QueryFacade(), config.indexer)
    indexer = BackgroundIndexer(
        coordinator=coordinator,
        classpath_file=classpath_file,
        debounce_seconds=config.indexer.debounce_sec,
    )
    indexer.set_on_complete(_print_result)
    watcher = ClasspathWatcher(
        classpath_file,
        on_change=indexer.trigger,
        debounce_ms=config.watcher.debounce_ms,
        step_ms=config.watcher.step_ms,
        force_polling=config.watcher.force_polling,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    indexer.start()
    indexer.trigger()
    await watcher.start()
    status(f"Watching {classpath_file}", style="info")
    try:
        await stop.wait()
    finally:
        await watcher.stop()
        await indexer.stop()
        coordinator.builder.close()


@click.command()
@workspace_argument
def watch_command(workspace: Path) -> None:
    """Watch the classpath file and rebuild the index on every change."""
    workspace = workspace.resolve()
    config = load_workspace_config(workspace)
    root = click.get_current_context().find_root()
    if not (root.obj or {}).get("verbose"):
        # Long-running: honour the configured log outputs
        configure_logging(config=config.logging)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_watch(workspace, config))
