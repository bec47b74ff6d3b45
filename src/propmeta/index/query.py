"""Read-only access to the currently published property index."""

from __future__ import annotations

import structlog

from propmeta.index.models import PropertyDescriptor
from propmeta.index.store import PropertyIndex

logger = structlog.get_logger()


class QueryFacade:
    """Serves queries from whichever index was published last.

    Publication replaces a single reference, so readers never observe a
    partially built index and need no lock. Every read takes the reference
    once and works on that snapshot.
    """

    def __init__(self) -> None:
        self._current: PropertyIndex | None = None

    def publish(self, index: PropertyIndex) -> bool:
        """Swap in ``index``. Older generations than the current one are refused."""
        current = self._current
        if current is not None and index.generation < current.generation:
            logger.info(
                "publish_refused",
                generation=index.generation,
                published=current.generation,
            )
            return False
        index.freeze()
        self._current = index
        return True

    def list_all(self) -> list[PropertyDescriptor]:
        current = self._current
        return current.list_all() if current is not None else []

    def lookup(self, name: str) -> PropertyDescriptor | None:
        current = self._current
        return current.lookup(name) if current is not None else None

    @property
    def generation(self) -> int:
        """Generation of the published index, 0 before the first publish."""
        current = self._current
        return current.generation if current is not None else 0

    @property
    def is_ready(self) -> bool:
        return self._current is not None

    def __len__(self) -> int:
        current = self._current
        return len(current) if current is not None else 0
