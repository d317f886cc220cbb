"""Tests for docgraph.transformers.node_transformer."""

from __future__ import annotations

import pytest

from docgraph.errors import MalformedReflectionError, UnknownKindError
from docgraph.identity import GlobalKey, IdentityRegistry
from docgraph.kinds import ReflectionKind
from docgraph.models import DocManifestPackage
from docgraph.transformers import NodeTransformer, TransformContext, create_transform_context
from tests._fixtures.reflection_builder import (
    ReflectionBuilder,
    block_tag,
    comment,
    intrinsic,
    literal,
    ref,
    source,
)


def _widget_project(builder: ReflectionBuilder) -> dict:
    size = builder.prop("size", intrinsic("number"), flags={"isOptional": True})
    render = builder.method(
        "render",
        builder.signature("render", builder.parameter("target", ref("Element")), returns=intrinsic("void")),
    )
    widget = builder.klass(
        "Widget",
        size,
        render,
        comment=comment("A widget.", block_tag("@example", "new Widget()")),
        sources=[source("src/widget.ts", 4, "https://example.com/widget.ts#L4")],
        extendedTypes=[ref("Base", external_url="https://example.com/base")],
    )
    mode = builder.node(
        "Mode",
        ReflectionKind.ENUM,
        builder.node("Fast", ReflectionKind.ENUM_MEMBER, type=literal("fast")),
        builder.node("Level", ReflectionKind.ENUM_MEMBER, type=literal(2)),
    )
    return builder.project("core", widget, mode)


def test_paths_slugs_and_registry(context: TransformContext, builder: ReflectionBuilder) -> None:
    root = NodeTransformer(context).transform(_widget_project(builder))

    widget = root.children[0]
    size = widget.children[0]
    assert root.kind is ReflectionKind.PROJECT
    assert root.path == [] and root.name == "core"
    assert widget.path == ["Widget"] and widget.slug == "widget"
    assert size.qualified_name == "Widget.size"
    assert size.slug == "widget/size"
    assert size.flags.is_optional
    assert context.registry.get(GlobalKey("core", size.id)) is size
    assert len(context.registry) == len(list(root.walk()))


def test_declaration_details(context: TransformContext, builder: ReflectionBuilder) -> None:
    root = NodeTransformer(context).transform(_widget_project(builder))

    widget = root.children[0]
    assert widget.header_text == "class Widget extends Base"
    assert widget.source_url == "https://example.com/widget.ts#L4"
    assert widget.comment is not None and widget.comment.summary == "A widget."
    assert widget.comment.examples[0].content == "new Widget()"
    assert widget.source_package.name == "core"

    render = widget.children[1]
    assert [signature.render_text for signature in render.signatures] == ["render(target: Element): void"]

    fast, level = root.children[1].children
    assert fast.default_value == '"fast"'
    assert level.default_value == "2"


def test_groups_hold_child_keys(context: TransformContext, builder: ReflectionBuilder) -> None:
    root = NodeTransformer(context).transform(_widget_project(builder))

    widget = root.children[0]
    titles = {group.title: group.child_keys for group in widget.groups}
    assert titles["Properties"] == [widget.children[0].key]
    assert titles["Methods"] == [widget.children[1].key]


def test_colliding_names_get_suffixed_slugs(context: TransformContext, builder: ReflectionBuilder) -> None:
    project = builder.project(
        "core",
        builder.function("parse", builder.signature("parse")),
        builder.node("Parse", ReflectionKind.NAMESPACE),
    )

    root = NodeTransformer(context).transform(project)

    assert [child.slug for child in root.children] == ["parse", "parse-2"]


def test_reference_node_records_alias_target(context: TransformContext, builder: ReflectionBuilder) -> None:
    widget = builder.klass("Widget")
    alias = builder.reference("Gadget", widget["id"])

    root = NodeTransformer(context).transform(builder.project("core", widget, alias))

    gadget = root.children[1]
    assert gadget.kind is ReflectionKind.REFERENCE
    assert gadget.alias_of is not None
    assert gadget.alias_of.target_key == GlobalKey("core", widget["id"])


def test_source_package_inferred_from_dependency_path(builder: ReflectionBuilder) -> None:
    packages = [
        DocManifestPackage(name="@scope/plugins", version="1.0.0"),
        DocManifestPackage(name="@scope/core", version="3.2.1"),
    ]
    context = create_transform_context(packages[0], IdentityRegistry(), known_packages=packages)
    foo = builder.klass("Foo", sources=[source("node_modules/@scope/core/src/foo.ts")])
    local = builder.klass("Local", sources=[source("src/local.ts")])

    root = NodeTransformer(context).transform(builder.project("@scope/plugins", foo, local))

    assert root.children[0].source_package.name == "@scope/core"
    assert root.children[0].source_package.version == "3.2.1"
    assert root.children[1].source_package.name == "@scope/plugins"


def test_unknown_kind_raises(context: TransformContext, builder: ReflectionBuilder) -> None:
    project = builder.project("core", {"id": 50, "name": "Odd", "kind": 3})

    with pytest.raises(UnknownKindError):
        NodeTransformer(context).transform(project)


def test_missing_id_raises(context: TransformContext, builder: ReflectionBuilder) -> None:
    project = builder.project("core")
    project["children"] = [{"name": "NoId", "kind": int(ReflectionKind.CLASS)}]

    with pytest.raises(MalformedReflectionError):
        NodeTransformer(context).transform(project)


def test_nodes_registered_before_failure_stay_queryable(
    context: TransformContext, builder: ReflectionBuilder
) -> None:
    good = builder.klass("Good")
    project = builder.project("core", good)
    project["children"].append({"id": 99, "name": "Bad", "kind": 0x3})

    with pytest.raises(UnknownKindError):
        NodeTransformer(context).transform(project)
    assert GlobalKey("core", good["id"]) in context.registry
