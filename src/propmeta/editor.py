"""Editor capabilities for .properties files.

Completion and hover are independent: each only needs a QueryFacade and
the current line text, so an editor integration can register either one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from propmeta.config.constants import KEY_VALUE_DELIMITERS
from propmeta.index.query import QueryFacade

# Words in .properties files: numbers, or runs of characters that are not
# punctuation used as delimiters (dots are allowed so keys stay whole).
WORD_PATTERN = re.compile(
    r"(-?\d*\.\d\w*)|([^`~!@#%^&*()=+\[{\]}\\|;:'\",<>/?\s]+)"
)

_DELIMITER_RE = re.compile("|".join(re.escape(d) for d in KEY_VALUE_DELIMITERS))


def is_value_position(line_prefix: str) -> bool:
    """True if the cursor is past the key, i.e. the prefix holds ``=`` or ``:``."""
    return _DELIMITER_RE.search(line_prefix) is not None


def property_key(line: str) -> str:
    """Key part of a properties line: text before the first delimiter.

    Surrounding whitespace is trimmed and a trailing ``.`` removed so that a
    half-typed key such as ``server.`` resolves to ``server``.
    """
    key = _DELIMITER_RE.split(line, maxsplit=1)[0].strip()
    return key.removesuffix(".")


@dataclass(frozen=True)
class CompletionItem:
    label: str
    detail: str
    documentation: str | None
    deprecated: bool = False


@dataclass(frozen=True)
class Hover:
    name: str
    contents: str


class CompletionSource:
    """Property-name completion."""

    def __init__(self, facade: QueryFacade) -> None:
        self._facade = facade

    def provide(self, line_prefix: str) -> list[CompletionItem] | None:
        """Candidates for the text before the cursor, or None in a value position."""
        if is_value_position(line_prefix):
            return None
        return [
            CompletionItem(
                label=d.name,
                detail=d.detail,
                documentation=d.description,
                deprecated=d.is_deprecated,
            )
            for d in self._facade.list_all()
        ]


class HoverSource:
    """Hover documentation for the property named on a line."""

    def __init__(self, facade: QueryFacade) -> None:
        self._facade = facade

    def provide(self, line: str) -> Hover | None:
        name = property_key(line)
        if not name:
            return None
        descriptor = self._facade.lookup(name)
        if descriptor is None:
            return None
        return Hover(name=name, contents=descriptor.documentation)
