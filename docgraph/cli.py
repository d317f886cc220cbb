"""CLI entrypoints for docgraph commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigError, DocGraphConfig, load_config
from .engine import DocsEngine
from .errors import DocGraphError
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Directory holding .docgraph.yml or the generated docs (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docgraph",
        description="Build and query a cross-referenced documentation graph from reflection output.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    packages_parser = subparsers.add_parser(
        "packages",
        help="List the packages that built successfully and any that were skipped.",
    )
    _add_verbose_option(packages_parser, suppress_default=True)
    packages_parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory holding .docgraph.yml or the generated docs (defaults to current directory).",
    )
    packages_parser.add_argument(
        "--entities",
        action="store_true",
        help="Also list each package's classes, interfaces, enums, types, functions and variables.",
    )

    search_parser = subparsers.add_parser("search", help="Search symbols across packages.")
    _add_verbose_option(search_parser, suppress_default=True)
    _add_root_option(search_parser)
    search_parser.add_argument("query", help="Text to search for.")
    search_parser.add_argument("--package", help="Restrict results to one package.")
    search_parser.add_argument("--limit", type=int, default=None, help="Maximum number of results.")

    show_parser = subparsers.add_parser("show", help="Show one symbol by package and slug.")
    _add_verbose_option(show_parser, suppress_default=True)
    _add_root_option(show_parser)
    show_parser.add_argument("package", help="Package name or alias.")
    show_parser.add_argument("slug", help="Slug of the symbol within the package.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_root_option(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to config).")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (defaults to config).")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docgraph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.root))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        _serve(config, host=args.host, port=args.port)
        return

    try:
        engine = DocsEngine.from_config(config)
    except DocGraphError as exc:
        parser.exit(1, f"docgraph {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if args.command == "packages":
        _print_packages(engine, entities=bool(args.entities))
    elif args.command == "search":
        limit = args.limit if args.limit is not None else config.search.max_results
        package = engine.resolve_package_name(args.package) if args.package else None
        if args.package and package is None:
            parser.exit(1, f"Unknown package: {args.package}\n")
        results = engine.search(args.query, package=package, limit=limit)
        if not results:
            print("No results")
        for entry in results:
            print(f"{entry.package_name}/{entry.slug}  {entry.qualified_name}  [{entry.kind.name.lower()}]")
    elif args.command == "show":
        package = engine.resolve_package_name(args.package)
        node = engine.get_node_by_slug(package, args.slug) if package else None
        if node is None:
            parser.exit(1, f"No symbol '{args.slug}' in package '{args.package}'\n")
        print(node.header_text or node.qualified_name)
        if node.comment is not None and node.comment.summary:
            print()
            print(node.comment.summary)
        for signature in node.signatures:
            print(f"  {signature.render_text}")
        if node.source_url:
            print(f"Source: {node.source_url}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_packages(engine: DocsEngine, *, entities: bool) -> None:
    for package in engine.collection.packages:
        version = f"@{package.manifest.version}" if package.manifest.version else ""
        print(f"{package.name}{version}  ({len(package.nodes)} nodes)")
        if entities:
            for category, names in package.directory.snapshot().items():
                if names:
                    print(f"  {category}: {', '.join(names)}")
    for warning in engine.warnings():
        print(f"skipped {warning.package}: {warning.message}")


def _serve(config: DocGraphConfig, *, host: Optional[str], port: Optional[int]) -> None:  # pragma: no cover
    from .service.app import run_service

    run_service(host or config.service.host, port or config.service.port, config=config)


if __name__ == "__main__":
    main(sys.argv[1:])
