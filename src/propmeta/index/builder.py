"""Build one PropertyIndex from a list of archives.

Archive reads run concurrently in worker threads, but every read of a
generation is awaited before anything is merged. Merging then walks the
results in archive-list order (and known-entry order inside an archive),
so the first-wins tie-break follows the input list, whatever order the
reads finish in.

Failures are contained per archive and per entry: the builder always
returns an index, possibly empty.
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import structlog

from propmeta.config.constants import METADATA_ENTRY_NAMES
from propmeta.core.errors import ArchiveOpenError, InternalError, MetadataParseError
from propmeta.index.archive import ArchiveContents, read_metadata_entries
from propmeta.index.parser import parse_metadata
from propmeta.index.store import PropertyIndex

logger = structlog.get_logger()

ArchiveReader = Callable[[Path, Iterable[str]], ArchiveContents]


@dataclass
class BuildStats:
    """Counters for one build generation."""

    generation: int
    archives_total: int = 0
    archives_failed: int = 0
    entries_read: int = 0
    entries_failed: int = 0
    descriptors_merged: int = 0
    properties: int = 0
    duration_seconds: float = 0.0


@dataclass
class BuildResult:
    """A finished, not yet published, generation."""

    index: PropertyIndex
    stats: BuildStats


class IndexBuilder:
    """Drives archive reading and metadata parsing for a build generation.

    Archive reads run on a private pool of ``max_concurrency`` threads. A read
    that outlives ``archive_timeout_sec`` is abandoned by the build but keeps
    its worker until it returns, so hung reads can delay later ones but never
    push the thread count past ``max_concurrency``.
    """

    def __init__(
        self,
        entry_names: Sequence[str] = METADATA_ENTRY_NAMES,
        *,
        max_concurrency: int = 8,
        archive_timeout_sec: float | None = None,
        reader: ArchiveReader = read_metadata_entries,
    ) -> None:
        self.entry_names = tuple(entry_names)
        self.max_concurrency = max_concurrency
        self.archive_timeout_sec = archive_timeout_sec
        self._reader = reader
        self._executor: ThreadPoolExecutor | None = None

    def close(self) -> None:
        """Release the worker threads. A later build starts a fresh pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_concurrency,
                thread_name_prefix="propmeta-archive",
            )
        return self._executor

    async def build(self, paths: Sequence[Path], generation: int = 0) -> BuildResult:
        start = time.perf_counter()
        stats = BuildStats(generation=generation, archives_total=len(paths))
        index = PropertyIndex(generation)

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(*(self._read_archive(p, semaphore) for p in paths))

        for contents in results:
            if contents is None:
                stats.archives_failed += 1
                continue
            stats.entries_failed += contents.failed_entries
            for entry_name, text in contents.entries:
                origin = f"{contents.path}!/{entry_name}"
                try:
                    descriptors = parse_metadata(text, origin=origin)
                except MetadataParseError as e:
                    logger.warning("metadata_parse_failed", origin=origin, reason=e.details["reason"])
                    stats.entries_failed += 1
                    continue
                stats.entries_read += 1
                for descriptor in descriptors:
                    index.insert_or_merge(descriptor)
                    stats.descriptors_merged += 1

        stats.properties = len(index)
        stats.duration_seconds = time.perf_counter() - start
        logger.info(
            "index_built",
            archives=stats.archives_total,
            archives_failed=stats.archives_failed,
            entries=stats.entries_read,
            entries_failed=stats.entries_failed,
            properties=stats.properties,
            duration_s=round(stats.duration_seconds, 3),
        )
        return BuildResult(index=index, stats=stats)

    async def _read_archive(
        self, path: Path, semaphore: asyncio.Semaphore
    ) -> ArchiveContents | None:
        """Read one archive off the event loop. Returns None if it contributes nothing."""
        async with semaphore:
            # Carry contextvars (the bound generation) into the worker thread
            call = functools.partial(
                contextvars.copy_context().run, self._reader, path, self.entry_names
            )
            read = asyncio.get_running_loop().run_in_executor(self._pool(), call)
            try:
                if self.archive_timeout_sec is None:
                    return await read
                return await asyncio.wait_for(read, timeout=self.archive_timeout_sec)
            except ArchiveOpenError as e:
                logger.warning("archive_open_failed", path=str(path), reason=e.details["reason"])
            except asyncio.TimeoutError:
                err = ArchiveOpenError.timed_out(str(path), self.archive_timeout_sec or 0.0)
                logger.warning("archive_timeout", path=str(path), error=str(err))
            except Exception as e:
                err = InternalError.unexpected(str(e), path=str(path))
                logger.error("archive_read_crashed", path=str(path), error=str(err))
        return None
