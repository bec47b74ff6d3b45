"""Parse configuration metadata JSON into PropertyDescriptor values.

Expected shape::

    {"properties": [{"name": "server.port", "type": "java.lang.Integer",
                     "defaultValue": 8080, "description": "...",
                     "deprecation": {"replacement": "..."}}, ...]}

Only invalid JSON is an error. A document without a ``properties`` list
yields nothing, and a bad entry is skipped without affecting its siblings.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from propmeta.core.errors import MetadataParseError
from propmeta.index.models import Deprecation, PropertyDescriptor

logger = structlog.get_logger()

DEPRECATED_MARKER = " DEPRECATED"
REPLACEMENT_HINT = " use {replacement}"


def parse_metadata(text: str, origin: str | None = None) -> list[PropertyDescriptor]:
    """Decode one metadata document.

    Args:
        text: Raw JSON text of a metadata entry.
        origin: Where the text came from, recorded on each descriptor.

    Raises:
        MetadataParseError: ``text`` is not valid JSON or cannot be decoded.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and oversized integer literals
        raise MetadataParseError.invalid_json(origin, str(e)) from e

    if not isinstance(data, dict):
        logger.debug("metadata_not_an_object", origin=origin, kind=type(data).__name__)
        return []
    properties = data.get("properties")
    if not isinstance(properties, list):
        logger.debug("metadata_without_properties", origin=origin)
        return []

    descriptors: list[PropertyDescriptor] = []
    for position, entry in enumerate(properties):
        try:
            descriptors.append(_parse_property(entry, origin))
        except ValueError as e:
            logger.warning(
                "metadata_entry_skipped",
                origin=origin,
                position=position,
                reason=str(e),
            )
    return descriptors


def _parse_property(entry: Any, origin: str | None) -> PropertyDescriptor:
    if not isinstance(entry, dict):
        raise ValueError(f"entry is {type(entry).__name__}, expected object")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("missing property name")

    deprecation = _parse_deprecation(entry)
    description = _optional_str(entry.get("description"))
    if deprecation is not None:
        description = _deprecated_description(description, deprecation)

    return PropertyDescriptor(
        name=name,
        type=_optional_str(entry.get("type")),
        default_value=entry.get("defaultValue"),
        description=description,
        deprecation=deprecation,
        source_type=_optional_str(entry.get("sourceType")),
        origin=origin,
    )


def _parse_deprecation(entry: dict[str, Any]) -> Deprecation | None:
    raw = entry.get("deprecation")
    if isinstance(raw, dict):
        level = raw.get("level")
        return Deprecation(
            replacement=_optional_str(raw.get("replacement")) or None,
            reason=_optional_str(raw.get("reason")),
            level="error" if level == "error" else "warning",
        )
    if raw is not None or entry.get("deprecated") is True:
        return Deprecation()
    return None


def _deprecated_description(description: str | None, deprecation: Deprecation) -> str:
    text = (description + DEPRECATED_MARKER) if description else DEPRECATED_MARKER.lstrip()
    if deprecation.replacement:
        text += REPLACEMENT_HINT.format(replacement=deprecation.replacement)
    return text


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
