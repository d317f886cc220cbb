"""CLI parser and command output tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from docgraph.cli import _build_parser, main
from tests._fixtures.reflection_builder import DocsWorkspace, ReflectionBuilder, comment, intrinsic, source


def _write_docs(docs_workspace: DocsWorkspace) -> Path:
    builder = ReflectionBuilder()
    client = builder.klass(
        "Client",
        builder.method(
            "send",
            builder.signature("send", builder.parameter("body", intrinsic("string")), returns=intrinsic("boolean")),
        ),
        comment=comment("Sends requests."),
        sources=[source("src/client.ts", 3, "https://example.com/client.ts#L3")],
    )
    docs_workspace.add_package("core", builder.project("core", client))
    docs_workspace.add_package("broken", "{oops")
    docs_workspace.write_manifest()
    return docs_workspace.root


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "packages"])
    assert args.verbose is True
    assert args.command == "packages"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["search", "client", "--verbose"])
    assert args.verbose is True
    assert args.command == "search"
    assert args.query == "client"


def test_cli_parses_serve_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["serve", "--port", "9001"])
    assert args.command == "serve"
    assert args.port == 9001
    assert args.host is None


def test_packages_command_lists_built_and_skipped(
    docs_workspace: DocsWorkspace, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _write_docs(docs_workspace)

    main(["packages", str(root), "--entities"])

    out = capsys.readouterr().out
    assert "core@1.0.0" in out
    assert "classes: Client" in out
    assert "skipped broken:" in out


def test_search_command_prints_matches(docs_workspace: DocsWorkspace, capsys: pytest.CaptureFixture[str]) -> None:
    root = _write_docs(docs_workspace)

    main(["search", "--root", str(root), "send"])

    out = capsys.readouterr().out
    assert "core/client/send  Client.send  [method]" in out


def test_search_command_reports_no_results(
    docs_workspace: DocsWorkspace, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _write_docs(docs_workspace)

    main(["search", "--root", str(root), "zzz"])

    assert "No results" in capsys.readouterr().out


def test_search_command_rejects_unknown_package(docs_workspace: DocsWorkspace) -> None:
    root = _write_docs(docs_workspace)

    with pytest.raises(SystemExit) as excinfo:
        main(["search", "--root", str(root), "send", "--package", "nope"])
    assert excinfo.value.code == 1


def test_show_command_prints_header_and_source(
    docs_workspace: DocsWorkspace, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _write_docs(docs_workspace)

    main(["show", "--root", str(root), "core", "client/send"])
    send = capsys.readouterr().out
    main(["show", "--root", str(root), "core", "client"])
    client = capsys.readouterr().out

    assert "send(body: string): boolean" in send
    assert client.splitlines()[0] == "class Client"
    assert "Sends requests." in client
    assert "Source: https://example.com/client.ts#L3" in client


def test_show_command_exits_for_missing_symbol(docs_workspace: DocsWorkspace) -> None:
    root = _write_docs(docs_workspace)

    with pytest.raises(SystemExit) as excinfo:
        main(["show", "--root", str(root), "core", "nothing"])
    assert excinfo.value.code == 1


def test_missing_docs_exit_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["packages", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "docgraph packages failed" in capsys.readouterr().err
