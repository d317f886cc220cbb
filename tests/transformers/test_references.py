"""Tests for docgraph.transformers.references."""

from __future__ import annotations

from docgraph.identity import GlobalKey
from docgraph.transformers import TransformContext, map_reference


def test_numeric_target_is_scoped_to_the_current_package(context: TransformContext) -> None:
    reference = map_reference(context, {"name": "Client", "target": 4, "externalUrl": "https://ignored"})

    assert reference is not None
    assert reference.target_key == GlobalKey("core", 4)
    assert reference.external_url is None


def test_string_target_becomes_qualified_name(context: TransformContext) -> None:
    reference = map_reference(context, {"name": "opts", "target": "Holder.opts"})

    assert reference is not None
    assert reference.qualified_name == "Holder.opts"
    assert reference.target_key is None


def test_explicit_qualified_name_beats_string_target(context: TransformContext) -> None:
    reference = map_reference(context, {"name": "opts", "qualifiedName": "Holder.opts", "target": "Other.opts"})

    assert reference is not None
    assert reference.qualified_name == "Holder.opts"


def test_object_target_supplies_qualified_name_and_package(context: TransformContext) -> None:
    raw = {
        "name": "Opts",
        "package": "@scope/legacy",
        "target": {"qualifiedName": "Options", "packageName": "@scope/core"},
    }

    reference = map_reference(context, raw)

    assert reference is not None
    assert reference.qualified_name == "Options"
    assert reference.package_name == "@scope/core"


def test_object_target_package_key_overrides_reference_package(context: TransformContext) -> None:
    reference = map_reference(context, {"name": "Opts", "package": "web", "target": {"package": "core"}})

    assert reference is not None
    assert reference.package_name == "core"
    assert reference.qualified_name is None


def test_nameless_reference_is_dropped(context: TransformContext) -> None:
    assert map_reference(context, {"target": 3}) is None
    assert map_reference(context, "Client") is None
