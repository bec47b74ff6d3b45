"""Classpath file watcher using watchfiles.

Watches the directory holding the classpath file (non-recursively) and
reports create/modify/delete of that one file. watchfiles already groups
raw events into debounced batches; each batch touching the file becomes a
single notification, classified by the file's state after the batch.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog
from watchfiles import Change, awatch

logger = structlog.get_logger()


class ClasspathChange(Enum):
    """Kind of change seen on the classpath file."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


def classify_changes(changes: set[tuple[Change, str]], target: Path) -> ClasspathChange | None:
    """Reduce a watchfiles batch to one change of ``target``, or None if untouched."""
    kinds = {change for change, path in changes if Path(path) == target}
    if not kinds:
        return None
    if not target.exists():
        return ClasspathChange.DELETED
    if Change.added in kinds or Change.deleted in kinds:
        # deleted + added in one batch is an atomic replace (editors, build tools)
        return ClasspathChange.CREATED
    return ClasspathChange.MODIFIED


@dataclass
class ClasspathWatcher:
    """Notifies ``on_change`` whenever the classpath file changes.

    Usage::

        watcher = ClasspathWatcher(Path("/ws/classpath.txt"), on_change=indexer.trigger)
        await watcher.start()
        ...
        await watcher.stop()
    """

    classpath_file: Path
    on_change: Callable[[ClasspathChange], None]
    debounce_ms: int = 300
    step_ms: int = 100
    force_polling: bool = False

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    def __post_init__(self) -> None:
        self.classpath_file = self.classpath_file.resolve()

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for changes."""
        if self._watch_task is not None:
            return
        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "classpath_watcher_started",
            path=str(self.classpath_file),
            debounce_ms=self.debounce_ms,
            polling=self.force_polling,
        )

    async def stop(self) -> None:
        """Stop watching."""
        self._stop_event.set()
        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None
        logger.info("classpath_watcher_stopped")

    def _accepts(self, _change: Change, path: str) -> bool:
        return Path(path) == self.classpath_file

    async def _wait_for_dir(self) -> bool:
        """Poll until the classpath file's directory exists. False if stopped first."""
        watch_dir = self.classpath_file.parent
        if watch_dir.is_dir():
            return True
        logger.warning("classpath_dir_missing", path=str(watch_dir))
        while not watch_dir.is_dir():
            if self._stop_event.is_set():
                return False
            await asyncio.sleep(self.step_ms / 1000)
        logger.info("classpath_dir_appeared", path=str(watch_dir))
        if self.classpath_file.exists():
            # Written before awatch could see it
            self._dispatch(ClasspathChange.CREATED)
        return True

    async def _watch_loop(self) -> None:
        watch_dir = self.classpath_file.parent
        while not self._stop_event.is_set():
            if not await self._wait_for_dir():
                return
            try:
                async for changes in awatch(
                    watch_dir,
                    watch_filter=self._accepts,
                    debounce=self.debounce_ms,
                    step=self.step_ms,
                    stop_event=self._stop_event,
                    recursive=False,
                    force_polling=self.force_polling,
                    ignore_permission_denied=True,
                ):
                    self._handle_changes(changes)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if self._stop_event.is_set():
                    return
                logger.error("watcher_error", error=str(e))
                # Brief backoff before retry
                await asyncio.sleep(1.0)

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        kind = classify_changes(changes, self.classpath_file)
        if kind is not None:
            self._dispatch(kind)

    def _dispatch(self, kind: ClasspathChange) -> None:
        logger.info("classpath_changed", kind=kind.value, path=str(self.classpath_file))
        self.on_change(kind)
