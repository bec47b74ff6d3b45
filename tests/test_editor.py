"""Tests for completion and hover."""

from __future__ import annotations

import pytest

from propmeta.editor import (
    WORD_PATTERN,
    CompletionSource,
    HoverSource,
    is_value_position,
    property_key,
)
from propmeta.index.models import Deprecation, PropertyDescriptor
from propmeta.index.query import QueryFacade
from propmeta.index.store import PropertyIndex


def _facade(*descriptors: PropertyDescriptor) -> QueryFacade:
    index = PropertyIndex(generation=1)
    for d in descriptors:
        index.insert_or_merge(d)
    facade = QueryFacade()
    facade.publish(index)
    return facade


PORT = PropertyDescriptor(
    name="server.port", type="java.lang.Integer", default_value=8080, description="Port"
)
OLD = PropertyDescriptor(
    name="server.old",
    type="java.lang.String",
    description="Old. DEPRECATED use server.new",
    deprecation=Deprecation(replacement="server.new"),
)


class TestLinePositions:
    @pytest.mark.parametrize(
        ("prefix", "expected"),
        [
            ("", False),
            ("server.po", False),
            ("server.port=", True),
            ("server.port = 80", True),
            ("server.port:", True),
        ],
    )
    def test_is_value_position(self, prefix: str, expected: bool) -> None:
        assert is_value_position(prefix) is expected

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("server.port=8080", "server.port"),
            ("  server.port = 8080", "server.port"),
            ("server.port: 8080", "server.port"),
            ("server.", "server"),
            ("", ""),
        ],
    )
    def test_property_key(self, line: str, expected: str) -> None:
        assert property_key(line) == expected

    def test_word_pattern_keeps_dotted_keys_whole(self) -> None:
        match = WORD_PATTERN.search("spring.datasource.url=jdbc")
        assert match is not None
        assert match.group(0) == "spring.datasource.url"


class TestCompletionSource:
    def test_key_position_offers_every_property(self) -> None:
        # Given
        source = CompletionSource(_facade(PORT, OLD))

        # When
        items = source.provide("ser")

        # Then
        assert items is not None
        assert [i.label for i in items] == ["server.port", "server.old"]
        port = items[0]
        assert port.detail == "8080  [java.lang.Integer]"
        assert port.documentation == "Port"
        assert not port.deprecated
        assert items[1].deprecated

    def test_value_position_offers_nothing(self) -> None:
        source = CompletionSource(_facade(PORT))
        assert source.provide("server.port=") is None

    def test_empty_index_offers_empty_list(self) -> None:
        assert CompletionSource(QueryFacade()).provide("") == []


class TestHoverSource:
    def test_hover_shows_description_and_default(self) -> None:
        hover = HoverSource(_facade(PORT)).provide("server.port=9090")

        assert hover is not None
        assert hover.name == "server.port"
        assert hover.contents == "Port\nDefault: 8080  [java.lang.Integer]"

    def test_hover_without_description_or_default(self) -> None:
        bare = PropertyDescriptor(name="a.b")
        hover = HoverSource(_facade(bare)).provide("a.b=1")

        assert hover is not None
        assert hover.contents == "Default: none  [none]"

    def test_hover_on_unknown_key(self) -> None:
        assert HoverSource(_facade(PORT)).provide("server.host=x") is None

    def test_hover_on_blank_line(self) -> None:
        assert HoverSource(_facade(PORT)).provide("   ") is None

    def test_hover_before_first_publish(self) -> None:
        assert HoverSource(QueryFacade()).provide("server.port=1") is None
