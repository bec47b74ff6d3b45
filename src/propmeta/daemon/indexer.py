"""Background indexer: turns classpath change triggers into rebuilds."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from propmeta.daemon.watcher import ClasspathChange
    from propmeta.index.builder import BuildResult, BuildStats
    from propmeta.index.ops import IndexCoordinator

logger = structlog.get_logger()


class IndexerState(Enum):
    """Background indexer state."""

    IDLE = "idle"
    INDEXING = "indexing"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class IndexerStatus:
    """Current indexer status."""

    state: IndexerState
    in_flight: int
    published_generation: int
    last_stats: BuildStats | None = None
    last_error: str | None = None


@dataclass
class BackgroundIndexer:
    """
    Runs one rebuild per trigger without blocking the caller.

    Design:
    - trigger() is synchronous so it can be used directly as a watcher callback
    - Each trigger starts its own build task; builds may overlap
    - The coordinator's generation check makes the newest trigger win
    - Optional debounce collapses triggers that arrive within the window
    """

    coordinator: IndexCoordinator
    classpath_file: Path
    debounce_seconds: float = 0.0

    _state: IndexerState = field(default=IndexerState.STOPPED, init=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)
    _last_error: str | None = field(default=None, init=False)
    _on_complete: Callable[[BuildResult], Awaitable[None]] | None = field(default=None, init=False)

    def start(self) -> None:
        """Start accepting triggers."""
        if self._state in (IndexerState.IDLE, IndexerState.INDEXING):
            return
        self._state = IndexerState.IDLE
        logger.info("background_indexer_started", classpath=str(self.classpath_file))

    async def stop(self) -> None:
        """Stop accepting triggers and wait for in-flight builds."""
        self._state = IndexerState.STOPPING

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task

        await self.wait_idle()
        self._state = IndexerState.STOPPED
        logger.info("background_indexer_stopped")

    def trigger(self, change: ClasspathChange | None = None) -> None:
        """Request a full rebuild from the current classpath file contents."""
        if self._state not in (IndexerState.IDLE, IndexerState.INDEXING):
            logger.debug("trigger_ignored", state=self._state.value)
            return

        reason = change.value if change is not None else "manual"
        logger.debug("rebuild_triggered", reason=reason)

        if self.debounce_seconds <= 0:
            self._spawn(self._run(reason))
            return

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounced(reason))

    async def _debounced(self, reason: str) -> None:
        try:
            await asyncio.sleep(self.debounce_seconds)
        except asyncio.CancelledError:
            return
        self._spawn(self._run(reason))

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, reason: str) -> None:
        self._state = IndexerState.INDEXING
        try:
            result = await self.coordinator.reindex_from_file(self.classpath_file)
            self._last_error = None
            if result is not None:
                logger.info(
                    "rebuild_complete",
                    reason=reason,
                    generation=result.index.generation,
                    properties=result.stats.properties,
                )
                if self._on_complete is not None:
                    await self._on_complete(result)
        except Exception as e:
            self._last_error = str(e)
            logger.error("rebuild_failed", reason=reason, error=str(e))
        finally:
            if self._state == IndexerState.INDEXING and len(self._tasks) <= 1:
                self._state = IndexerState.IDLE

    async def wait_idle(self) -> None:
        """Wait until every build started so far has finished."""
        if self._debounce_task is not None and not self._debounce_task.done():
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def set_on_complete(self, callback: Callable[[BuildResult], Awaitable[None]]) -> None:
        """Set callback to invoke after a generation is published."""
        self._on_complete = callback

    @property
    def status(self) -> IndexerStatus:
        return IndexerStatus(
            state=self._state,
            in_flight=len(self._tasks),
            published_generation=self.coordinator.facade.generation,
            last_stats=self.coordinator.last_stats,
            last_error=self._last_error,
        )
