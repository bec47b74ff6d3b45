"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides archive-building fixtures shared across test packages.
"""

import json
import logging
import sys
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local propmeta package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

PRIMARY = "META-INF/spring-configuration-metadata.json"
ADDITIONAL = "META-INF/additional-spring-configuration-metadata.json"

JarFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global config file out of every test."""
    monkeypatch.setattr("propmeta.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any configure_logging() a test performed."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def metadata_json(*properties: dict[str, Any]) -> str:
    return json.dumps({"groups": [], "properties": list(properties)})


@pytest.fixture
def make_jar(tmp_path: Path) -> JarFactory:
    """Build a jar in tmp_path.

    ``make_jar("a.jar", primary=[...], additional=[...], raw={name: text})``
    where primary/additional are lists of property dicts.
    """

    def _make(
        name: str,
        *,
        primary: list[dict[str, Any]] | None = None,
        additional: list[dict[str, Any]] | None = None,
        raw: dict[str, str | bytes] | None = None,
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
            if primary is not None:
                zf.writestr(PRIMARY, metadata_json(*primary))
            if additional is not None:
                zf.writestr(ADDITIONAL, metadata_json(*additional))
            for entry, content in (raw or {}).items():
                zf.writestr(entry, content)
        return path

    return _make
