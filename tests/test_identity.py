"""Tests for docgraph.identity and docgraph.kinds."""

from __future__ import annotations

import pytest

from docgraph.errors import UnknownKindError
from docgraph.identity import GlobalKey
from docgraph.kinds import ReflectionKind, kind_label, kind_name, kind_weight, parse_kind


def test_global_key_round_trips_through_string_form() -> None:
    key = GlobalKey("@scope/core", 42)

    assert str(key) == "@scope/core:42"
    assert GlobalKey.parse("@scope/core:42") == key
    assert GlobalKey.parse(key) is key


@pytest.mark.parametrize("value", ["core", ":12", "core:abc", ""])
def test_global_key_parse_rejects_malformed(value: str) -> None:
    assert GlobalKey.parse(value) is None


def test_same_local_id_in_two_packages_gives_distinct_keys() -> None:
    assert GlobalKey("core", 5) != GlobalKey("plugins", 5)


def test_parse_kind_accepts_known_codes() -> None:
    assert parse_kind(0x80) is ReflectionKind.CLASS
    assert kind_label(ReflectionKind.TYPE_ALIAS) == "Type Alias"
    assert kind_name(ReflectionKind.ENUM_MEMBER) == "enumMember"


@pytest.mark.parametrize("value", [3, 0x1000000, "128", True, None])
def test_parse_kind_rejects_unknown_codes(value: object) -> None:
    with pytest.raises(UnknownKindError):
        parse_kind(value)


def test_class_outranks_function_and_variable() -> None:
    assert kind_weight(ReflectionKind.CLASS) > kind_weight(ReflectionKind.FUNCTION)
    assert kind_weight(ReflectionKind.FUNCTION) > kind_weight(ReflectionKind.VARIABLE)
