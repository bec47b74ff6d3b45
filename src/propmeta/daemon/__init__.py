"""propmeta daemon - classpath watching and background rebuilds."""

from propmeta.daemon.indexer import BackgroundIndexer, IndexerState, IndexerStatus
from propmeta.daemon.watcher import ClasspathChange, ClasspathWatcher

__all__ = [
    "BackgroundIndexer",
    "ClasspathChange",
    "ClasspathWatcher",
    "IndexerState",
    "IndexerStatus",
]
