"""Archive path-list source.

The classpath file holds archive paths separated by ``os.pathsep``
(``:`` on POSIX, ``;`` on Windows), as written by build tool classpath
exports.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

logger = structlog.get_logger()


def split_path_list(text: str, base_dir: Path | None = None) -> list[Path]:
    """Split path-list text into archive paths.

    Segments are whitespace-trimmed and empty ones dropped. Relative paths
    are resolved against ``base_dir`` when given. Order is preserved.
    """
    paths: list[Path] = []
    for segment in text.split(os.pathsep):
        segment = segment.strip()
        if not segment:
            continue
        path = Path(segment).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        paths.append(path)
    return paths


def read_path_list(classpath_file: Path) -> list[Path]:
    """Read the classpath file. Missing or unreadable files yield ``[]``."""
    try:
        text = classpath_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("classpath_file_missing", path=str(classpath_file))
        return []
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("classpath_file_unreadable", path=str(classpath_file), error=str(e))
        return []
    paths = split_path_list(text, base_dir=classpath_file.parent)
    logger.debug("classpath_read", path=str(classpath_file), archives=len(paths))
    return paths
