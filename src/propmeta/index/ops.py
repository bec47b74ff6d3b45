"""Index coordinator: build generations and their publication.

Every rebuild request gets a new, monotonically increasing generation id.
A generation is published only if no newer one was requested while it was
building; otherwise its result is dropped. The newest trigger therefore
always wins, even when an older build finishes later.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from propmeta.config.models import IndexerConfig
from propmeta.core.logging import bound_generation
from propmeta.index.builder import BuildResult, BuildStats, IndexBuilder
from propmeta.index.classpath import read_path_list
from propmeta.index.query import QueryFacade

logger = structlog.get_logger()


class IndexCoordinator:
    """Owns the generation counter and publishes finished builds to a facade."""

    def __init__(self, facade: QueryFacade, builder: IndexBuilder | None = None) -> None:
        self.facade = facade
        self.builder = builder or IndexBuilder()
        self._latest_generation = 0
        self._last_stats: BuildStats | None = None

    @classmethod
    def from_config(cls, facade: QueryFacade, config: IndexerConfig) -> IndexCoordinator:
        builder = IndexBuilder(
            max_concurrency=config.max_concurrency,
            archive_timeout_sec=config.archive_timeout_sec,
        )
        return cls(facade, builder)

    @property
    def latest_generation(self) -> int:
        """Most recently requested generation (may still be building)."""
        return self._latest_generation

    @property
    def last_stats(self) -> BuildStats | None:
        """Stats of the most recently published generation."""
        return self._last_stats

    async def rebuild(self, paths: Sequence[Path]) -> BuildResult | None:
        """Build a fresh index from ``paths`` and publish it if still current.

        Returns the published result, or None if a newer generation was
        requested before this one finished.
        """
        self._latest_generation += 1
        generation = self._latest_generation

        with bound_generation(generation):
            logger.info("build_started", archives=len(paths))
            result = await self.builder.build(paths, generation)

            if generation != self._latest_generation:
                logger.info("stale_generation_discarded", latest=self._latest_generation)
                return None
            if not self.facade.publish(result.index):
                return None

            self._last_stats = result.stats
            logger.info("index_published", properties=result.stats.properties)
            return result

    async def reindex_from_file(self, classpath_file: Path) -> BuildResult | None:
        """Re-read the classpath file and rebuild from its archive list."""
        return await self.rebuild(read_path_list(classpath_file))
