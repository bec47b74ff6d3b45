"""Value types for configuration property metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

DeprecationLevel = Literal["warning", "error"]


@dataclass(frozen=True, slots=True)
class Deprecation:
    """Deprecation marker attached to a property."""

    replacement: str | None = None
    reason: str | None = None
    level: DeprecationLevel = "warning"


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One documented configuration key.

    Built once from a single metadata JSON object. ``description`` already
    carries the deprecation suffix for deprecated properties.
    """

    name: str
    type: str | None = None
    default_value: Any = None
    description: str | None = None
    deprecation: Deprecation | None = None
    source_type: str | None = None
    origin: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("PropertyDescriptor.name must be non-empty")

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation is not None

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def detail(self) -> str:
        """Short one-line summary: ``<default>  [<type>]``."""
        return f"{_render_value(self.default_value)}  [{_render_value(self.type)}]"

    @property
    def documentation(self) -> str:
        """Hover text: description (if any) followed by the default/type line."""
        default_line = f"Default: {self.detail}"
        if not self.description:
            return default_line
        return f"{self.description}\n{default_line}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "defaultValue": self.default_value,
            "description": self.description,
            "deprecated": self.is_deprecated,
            "replacement": self.deprecation.replacement if self.deprecation else None,
            "sourceType": self.source_type,
            "origin": self.origin,
        }


def _render_value(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(_render_value(v) for v in value)
    return str(value)
