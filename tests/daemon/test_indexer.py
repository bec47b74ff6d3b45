"""Tests for BackgroundIndexer."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from propmeta.daemon.indexer import BackgroundIndexer, IndexerState
from propmeta.daemon.watcher import ClasspathChange
from propmeta.index.builder import BuildResult
from propmeta.index.ops import IndexCoordinator
from propmeta.index.query import QueryFacade


@pytest.fixture
def classpath(tmp_path: Path) -> Path:
    return tmp_path / "classpath.txt"


class TestBackgroundIndexer:
    """Tests for BackgroundIndexer."""

    def test_given_new_indexer_when_status_then_stopped(self, classpath: Path) -> None:
        """Indexer is stopped until started."""
        # Given
        indexer = BackgroundIndexer(coordinator=IndexCoordinator(QueryFacade()), classpath_file=classpath)

        # When
        status = indexer.status

        # Then
        assert status.state == IndexerState.STOPPED
        assert status.in_flight == 0
        assert status.published_generation == 0
        assert status.last_stats is None
        assert status.last_error is None

    @pytest.mark.asyncio
    async def test_given_started_indexer_when_trigger_then_index_published(
        self, classpath: Path, make_jar: Any
    ) -> None:
        """A trigger re-reads the classpath file and publishes a generation."""
        # Given
        jar = make_jar("a.jar", primary=[{"name": "a"}])
        classpath.write_text(str(jar))
        facade = QueryFacade()
        indexer = BackgroundIndexer(coordinator=IndexCoordinator(facade), classpath_file=classpath)
        indexer.start()

        # When
        indexer.trigger(ClasspathChange.CREATED)
        await indexer.wait_idle()

        # Then
        assert [d.name for d in facade.list_all()] == ["a"]
        assert indexer.status.state == IndexerState.IDLE
        assert indexer.status.published_generation == 1
        await indexer.stop()
        assert indexer.status.state == IndexerState.STOPPED

    @pytest.mark.asyncio
    async def test_given_stopped_indexer_when_trigger_then_ignored(self, classpath: Path) -> None:
        coordinator = MagicMock()
        coordinator.reindex_from_file = AsyncMock()
        indexer = BackgroundIndexer(coordinator=coordinator, classpath_file=classpath)

        indexer.trigger(ClasspathChange.MODIFIED)
        await indexer.wait_idle()

        coordinator.reindex_from_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_given_each_trigger_when_no_debounce_then_one_rebuild_each(
        self, classpath: Path
    ) -> None:
        coordinator = IndexCoordinator(QueryFacade())
        indexer = BackgroundIndexer(coordinator=coordinator, classpath_file=classpath)
        indexer.start()

        for change in (ClasspathChange.CREATED, ClasspathChange.MODIFIED, ClasspathChange.DELETED):
            indexer.trigger(change)
        await indexer.wait_idle()

        assert coordinator.latest_generation == 3
        assert coordinator.facade.generation == 3

    @pytest.mark.asyncio
    async def test_given_debounce_when_burst_of_triggers_then_single_rebuild(
        self, classpath: Path
    ) -> None:
        coordinator = IndexCoordinator(QueryFacade())
        indexer = BackgroundIndexer(
            coordinator=coordinator, classpath_file=classpath, debounce_seconds=0.05
        )
        indexer.start()

        indexer.trigger(ClasspathChange.MODIFIED)
        indexer.trigger(ClasspathChange.MODIFIED)
        indexer.trigger(ClasspathChange.MODIFIED)
        await indexer.wait_idle()

        assert coordinator.latest_generation == 1
        await indexer.stop()

    @pytest.mark.asyncio
    async def test_given_classpath_changes_when_triggered_then_latest_list_wins(
        self, classpath: Path, make_jar: Any
    ) -> None:
        a = make_jar("a.jar", primary=[{"name": "a"}])
        b = make_jar("b.jar", primary=[{"name": "b"}])
        facade = QueryFacade()
        indexer = BackgroundIndexer(coordinator=IndexCoordinator(facade), classpath_file=classpath)
        indexer.start()

        classpath.write_text(str(a))
        indexer.trigger(ClasspathChange.CREATED)
        await indexer.wait_idle()
        classpath.write_text(f"{b}{os.pathsep}")
        indexer.trigger(ClasspathChange.MODIFIED)
        await indexer.wait_idle()

        assert [d.name for d in facade.list_all()] == ["b"]

    @pytest.mark.asyncio
    async def test_given_callback_when_published_then_invoked_with_result(
        self, classpath: Path
    ) -> None:
        seen: list[BuildResult] = []

        async def on_complete(result: BuildResult) -> None:
            seen.append(result)

        indexer = BackgroundIndexer(
            coordinator=IndexCoordinator(QueryFacade()), classpath_file=classpath
        )
        indexer.set_on_complete(on_complete)
        indexer.start()

        indexer.trigger()
        await indexer.wait_idle()

        assert len(seen) == 1
        assert seen[0].index.generation == 1

    @pytest.mark.asyncio
    async def test_given_coordinator_failure_when_triggered_then_error_recorded(
        self, classpath: Path
    ) -> None:
        coordinator = MagicMock()
        coordinator.reindex_from_file = AsyncMock(side_effect=RuntimeError("disk gone"))
        indexer = BackgroundIndexer(coordinator=coordinator, classpath_file=classpath)
        indexer.start()

        indexer.trigger()
        await indexer.wait_idle()

        assert indexer._last_error == "disk gone"
        assert indexer._state == IndexerState.IDLE

    @pytest.mark.asyncio
    async def test_given_pending_debounce_when_stop_then_no_rebuild(self, classpath: Path) -> None:
        coordinator = MagicMock()
        coordinator.reindex_from_file = AsyncMock()
        indexer = BackgroundIndexer(
            coordinator=coordinator, classpath_file=classpath, debounce_seconds=10.0
        )
        indexer.start()

        indexer.trigger()
        await asyncio.sleep(0)
        await indexer.stop()

        coordinator.reindex_from_file.assert_not_called()
