"""In-memory property index for one build generation."""

from __future__ import annotations

from collections.abc import Iterator

from propmeta.index.models import PropertyDescriptor


class PropertyIndex:
    """Mapping of property name to exactly one descriptor.

    Merge policy for a repeated name: a descriptor with a description
    replaces one without; otherwise the entry inserted first is kept.
    Listing follows first-insertion order of names.

    The index is writable until ``freeze()``; published indexes are frozen.
    """

    def __init__(self, generation: int = 0) -> None:
        self.generation = generation
        self._entries: dict[str, PropertyDescriptor] = {}
        self._frozen = False

    def insert_or_merge(self, descriptor: PropertyDescriptor) -> bool:
        """Add ``descriptor`` or merge it with the stored one.

        Returns True if the stored entry for the name changed.
        """
        if self._frozen:
            raise RuntimeError(f"PropertyIndex generation {self.generation} is frozen")
        existing = self._entries.get(descriptor.name)
        if existing is None or (descriptor.has_description and not existing.has_description):
            self._entries[descriptor.name] = descriptor
            return True
        return False

    def list_all(self) -> list[PropertyDescriptor]:
        return list(self._entries.values())

    def lookup(self, name: str) -> PropertyDescriptor | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._entries.values())

    def __repr__(self) -> str:
        return f"PropertyIndex(generation={self.generation}, size={len(self)})"
