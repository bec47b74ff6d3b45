"""Tests for the metadata parser."""

import json

import pytest
from structlog.testing import capture_logs

from propmeta.core.errors import MetadataParseError
from propmeta.index.parser import parse_metadata


def _doc(*properties: object) -> str:
    return json.dumps({"properties": list(properties)})


class TestParseMetadata:
    """Document-level behaviour."""

    def test_given_full_entry_when_parse_then_all_fields_mapped(self) -> None:
        # Given
        text = _doc(
            {
                "name": "server.port",
                "type": "java.lang.Integer",
                "defaultValue": 8080,
                "description": "Server HTTP port.",
                "sourceType": "org.example.ServerProperties",
            }
        )

        # When
        [descriptor] = parse_metadata(text, origin="a.jar!/meta.json")

        # Then
        assert descriptor.name == "server.port"
        assert descriptor.type == "java.lang.Integer"
        assert descriptor.default_value == 8080
        assert descriptor.description == "Server HTTP port."
        assert descriptor.source_type == "org.example.ServerProperties"
        assert descriptor.origin == "a.jar!/meta.json"
        assert descriptor.deprecation is None

    def test_given_invalid_json_when_parse_then_metadata_parse_error(self) -> None:
        with pytest.raises(MetadataParseError) as exc_info:
            parse_metadata("{not json", origin="x")
        assert exc_info.value.details["origin"] == "x"

    @pytest.mark.parametrize(
        "text",
        ["[]", '"just a string"', "{}", '{"groups": []}', '{"properties": {"name": "a"}}'],
    )
    def test_given_unexpected_shape_when_parse_then_empty(self, text: str) -> None:
        assert parse_metadata(text) == []

    def test_given_missing_optional_fields_when_parse_then_none(self) -> None:
        [descriptor] = parse_metadata(_doc({"name": "bare"}))
        assert descriptor.type is None
        assert descriptor.default_value is None
        assert descriptor.description is None
        assert descriptor.source_type is None

    def test_given_bad_entries_when_parse_then_siblings_survive(self) -> None:
        # Given
        text = _doc({"name": "a"}, "oops", {"type": "x"}, {"name": ""}, {"name": "b"})

        # When
        with capture_logs() as logs:
            descriptors = parse_metadata(text)

        # Then
        assert [d.name for d in descriptors] == ["a", "b"]
        skipped = [e for e in logs if e["event"] == "metadata_entry_skipped"]
        assert [e["position"] for e in skipped] == [1, 2, 3]

    def test_given_duplicate_names_in_one_document_when_parse_then_both_returned(self) -> None:
        descriptors = parse_metadata(_doc({"name": "a"}, {"name": "a", "description": "d"}))
        assert len(descriptors) == 2


class TestDeprecation:
    """Deprecation text augmentation."""

    def test_given_replacement_without_description_when_parse_then_marker_names_it(self) -> None:
        [d] = parse_metadata(
            _doc({"name": "server.host", "deprecation": {"replacement": "server.address"}})
        )
        assert d.description is not None
        assert d.description.endswith("DEPRECATED use server.address")
        assert d.deprecation is not None
        assert d.deprecation.replacement == "server.address"

    def test_given_description_when_deprecated_then_marker_appended_once(self) -> None:
        [d] = parse_metadata(
            _doc(
                {
                    "name": "a",
                    "description": "Old knob.",
                    "deprecation": {"replacement": "b", "reason": "renamed", "level": "error"},
                }
            )
        )
        assert d.description == "Old knob. DEPRECATED use b"
        assert d.description.count("DEPRECATED") == 1
        assert d.deprecation is not None
        assert d.deprecation.reason == "renamed"
        assert d.deprecation.level == "error"

    def test_given_empty_deprecation_object_when_parse_then_marker_only(self) -> None:
        [d] = parse_metadata(_doc({"name": "a", "description": "Doc.", "deprecation": {}}))
        assert d.description == "Doc. DEPRECATED"
        assert d.is_deprecated

    def test_given_deprecated_flag_when_parse_then_deprecated(self) -> None:
        [d] = parse_metadata(_doc({"name": "a", "deprecated": True}))
        assert d.description == "DEPRECATED"
        assert d.is_deprecated

    def test_given_unknown_level_when_parse_then_warning(self) -> None:
        [d] = parse_metadata(_doc({"name": "a", "deprecation": {"level": "loud"}}))
        assert d.deprecation is not None
        assert d.deprecation.level == "warning"
