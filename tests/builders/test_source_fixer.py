"""Tests for docgraph.builders.source_fixer."""

from __future__ import annotations

from typing import Optional

from docgraph.builders.source_fixer import node_identity, propagate_source_information
from docgraph.identity import GlobalKey
from docgraph.kinds import ReflectionKind
from docgraph.models import DocFlags, DocNode, SourcePackage
from tests._fixtures.reflection_builder import DocsWorkspace, ReflectionBuilder, intrinsic, source

CORE_URL = "https://example.com/core/src/parser.ts#L10"


def _parser_class(builder: ReflectionBuilder, *, with_urls: bool) -> dict:
    def _sources(line: int) -> list:
        url = f"https://example.com/core/src/parser.ts#L{line}" if with_urls else None
        return [source("src/parser.ts", line, url)]

    parse = builder.method(
        "parse",
        builder.signature("parse", builder.parameter("text", intrinsic("string")), sources=_sources(12)),
        builder.signature(
            "parse",
            builder.parameter("text", intrinsic("string")),
            builder.parameter("strict", intrinsic("boolean")),
            sources=_sources(13),
        ),
    )
    return builder.klass("Parser", parse, sources=_sources(10))


def test_missing_urls_filled_from_identical_declaration(docs_workspace: DocsWorkspace) -> None:
    core = ReflectionBuilder()
    plugins = ReflectionBuilder()
    docs_workspace.add_package("core", core.project("core", _parser_class(core, with_urls=True)))
    docs_workspace.add_package("plugins", plugins.project("plugins", _parser_class(plugins, with_urls=False)))

    engine = docs_workspace.engine()

    parser = engine.get_node_by_qualified_name("plugins", "Parser")
    assert parser is not None
    assert parser.source_url == CORE_URL


def test_overloads_filled_from_their_own_bucket(docs_workspace: DocsWorkspace) -> None:
    core = ReflectionBuilder()
    plugins = ReflectionBuilder()
    docs_workspace.add_package("core", core.project("core", _parser_class(core, with_urls=True)))
    docs_workspace.add_package("plugins", plugins.project("plugins", _parser_class(plugins, with_urls=False)))

    engine = docs_workspace.engine()

    parse = engine.get_node_by_qualified_name("plugins", "Parser.parse")
    assert parse is not None
    assert [signature.source_url for signature in parse.signatures] == [
        "https://example.com/core/src/parser.ts#L12",
        "https://example.com/core/src/parser.ts#L13",
    ]


def test_existing_urls_are_never_overwritten(docs_workspace: DocsWorkspace) -> None:
    core = ReflectionBuilder()
    plugins = ReflectionBuilder()
    own_url = "https://example.com/plugins/src/parser.ts#L1"
    plugin_parser = plugins.klass("Parser", sources=[source("src/parser.ts", 1, own_url)])
    docs_workspace.add_package("core", core.project("core", _parser_class(core, with_urls=True)))
    docs_workspace.add_package("plugins", plugins.project("plugins", plugin_parser))

    engine = docs_workspace.engine()

    assert engine.get_node_by_qualified_name("plugins", "Parser").source_url == own_url
    assert engine.get_node_by_qualified_name("core", "Parser").source_url == CORE_URL


def test_group_without_any_url_stays_empty(docs_workspace: DocsWorkspace) -> None:
    core = ReflectionBuilder()
    plugins = ReflectionBuilder()
    docs_workspace.add_package("core", core.project("core", _parser_class(core, with_urls=False)))
    docs_workspace.add_package("plugins", plugins.project("plugins", _parser_class(plugins, with_urls=False)))

    engine = docs_workspace.engine()

    assert engine.get_node_by_qualified_name("core", "Parser").source_url is None
    assert engine.get_node_by_qualified_name("plugins", "Parser").source_url is None


def _bare_node(package: str, node_id: int, name: str, url: Optional[str] = None) -> DocNode:
    return DocNode(
        id=node_id,
        key=GlobalKey(package, node_id),
        package_name=package,
        name=name,
        path=[],
        qualified_name="",
        slug="",
        kind=ReflectionKind.VARIABLE,
        kind_label="Variable",
        flags=DocFlags(),
        source_package=SourcePackage(package),
        source_url=url,
    )


def test_identity_falls_back_to_bare_name() -> None:
    first = _bare_node("core", 1, "config", "https://example.com/config.ts")
    second = _bare_node("plugins", 1, "config")

    assert node_identity(first) == node_identity(second) == (ReflectionKind.VARIABLE, "config")

    stats = propagate_source_information([first, second])

    assert second.source_url == "https://example.com/config.ts"
    assert stats.nodes_filled == 1
