"""Read metadata entries out of JAR (zip) archives.

Opening is strict: a missing, non-zip or corrupt file raises
ArchiveOpenError. Reading a named entry distinguishes "absent" (returns
None) from "present but unreadable" (raises ArchiveReadError).

Everything here is blocking; the builder runs it in worker threads.
"""

from __future__ import annotations

import zipfile
import zlib
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

import structlog

from propmeta.core.errors import ArchiveOpenError, ArchiveReadError

logger = structlog.get_logger()

_UTF8_BOM = "\ufeff"


@dataclass
class ArchiveContents:
    """Metadata entries pulled from one archive, in lookup order."""

    path: Path
    entries: list[tuple[str, str]] = field(default_factory=list)
    failed_entries: int = 0


class ArchiveHandle:
    """An open archive. Use as a context manager so the zip handle is closed."""

    def __init__(self, path: Path, zf: zipfile.ZipFile) -> None:
        self.path = path
        self._zf = zf
        self._names = set(zf.namelist())

    def __enter__(self) -> ArchiveHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._zf.close()

    def list_entries(self) -> list[str]:
        return self._zf.namelist()

    def has_entry(self, name: str) -> bool:
        return name in self._names

    def read_entry_text(self, name: str) -> str | None:
        """Return the UTF-8 text of ``name``, or None if the entry is absent."""
        if name not in self._names:
            return None
        try:
            raw = self._zf.read(name)
        except (zipfile.BadZipFile, zlib.error, OSError, NotImplementedError, RuntimeError) as e:
            # RuntimeError: encrypted entry; NotImplementedError: unsupported compression
            raise ArchiveReadError.cannot_read(str(self.path), name, str(e)) from e
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ArchiveReadError.cannot_read(str(self.path), name, f"not UTF-8: {e}") from e
        return text.removeprefix(_UTF8_BOM)


def open_archive(path: Path | str) -> ArchiveHandle:
    """Open ``path`` as a zip container.

    Raises:
        ArchiveOpenError: File is missing, unreadable, or not a valid zip.
    """
    path = Path(path)
    try:
        zf = zipfile.ZipFile(path)
    except FileNotFoundError as e:
        raise ArchiveOpenError.cannot_open(str(path), "file not found") from e
    except IsADirectoryError as e:
        raise ArchiveOpenError.cannot_open(str(path), "is a directory") from e
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
        raise ArchiveOpenError.cannot_open(str(path), str(e) or type(e).__name__) from e
    return ArchiveHandle(path, zf)


def read_metadata_entries(path: Path | str, entry_names: Iterable[str]) -> ArchiveContents:
    """Open one archive and collect the text of every present metadata entry.

    Entries keep ``entry_names`` order. Unreadable entries are logged,
    counted and skipped; absent entries are skipped silently.

    Raises:
        ArchiveOpenError: The archive itself cannot be opened.
    """
    contents = ArchiveContents(path=Path(path))
    with open_archive(path) as archive:
        for name in entry_names:
            try:
                text = archive.read_entry_text(name)
            except ArchiveReadError as e:
                logger.warning("archive_entry_read_failed", **e.details)
                contents.failed_entries += 1
                continue
            if text is None:
                continue
            logger.debug("archive_entry_read", path=str(path), entry=name, size=len(text))
            contents.entries.append((name, text))
    return contents
