"""Staged build of the immutable documentation collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional

from ..errors import MalformedReflectionError, PackageTransformError
from ..identity import GlobalKey, IdentityRegistry
from ..logging import get_logger, log_stage
from ..manifest_reader import PackageLocator, load_reflection_trees
from ..models import DocCollection, DocManifest, DocNode, DocPackageModel, PackageWarning, global_slug
from ..resolution import ReferenceResolver, ResolutionStats
from ..search import SearchIndex, SearchIndexBuilder
from ..search.indexer import DEFAULT_SUMMARY_BUDGET
from ..transformers import NodeTransformer, create_transform_context
from .package_builder import build_package_model
from .source_fixer import PropagationStats, propagate_source_information

logger = get_logger("build")


@dataclass
class BuildOptions:
    home_package: Optional[str] = None
    summary_budget: int = DEFAULT_SUMMARY_BUDGET
    read_workers: int = 4


@dataclass
class BuildResult:
    """Everything the engine keeps from one build."""

    collection: DocCollection
    resolver: ReferenceResolver
    search_index: SearchIndex
    registry: IdentityRegistry
    resolution_stats: ResolutionStats = field(default_factory=ResolutionStats)
    propagation_stats: PropagationStats = field(default_factory=PropagationStats)


def default_home_package(manifest: DocManifest, requested: Optional[str]) -> Optional[str]:
    """The configured home package when it is listed, otherwise the first package."""
    names = [package.name for package in manifest.packages]
    if requested and requested in names:
        return requested
    if requested:
        logger.warning("Home package '%s' is not in the run summary; using manifest order", requested)
    return names[0] if names else None


def build_collection(
    manifest: DocManifest,
    locator: PackageLocator,
    options: Optional[BuildOptions] = None,
    *,
    registry: Optional[IdentityRegistry] = None,
) -> BuildResult:
    """Run read, transform, resolve, search and propagate in strict order."""
    options = options or BuildOptions()
    registry = registry if registry is not None else IdentityRegistry()
    warnings: List[PackageWarning] = []
    home_package = default_home_package(manifest, options.home_package)

    def skip(error: PackageTransformError) -> None:
        logger.warning("Skipping package %s: %s", error.package, error.reason)
        warnings.append(PackageWarning(error.package, error.reason))

    with log_stage(logger, "read"):
        loaded = load_reflection_trees(manifest.packages, locator, max_workers=options.read_workers)

    packages: List[DocPackageModel] = []
    with log_stage(logger, "transform"):
        seen = set()
        for entry, tree in zip(manifest.packages, loaded):
            if isinstance(tree, PackageTransformError):
                skip(tree)
                continue
            if entry.name in seen:
                skip(PackageTransformError(entry.name, "package is listed more than once"))
                continue
            seen.add(entry.name)
            if not entry.succeeded:
                logger.warning("Package %s reported extraction failures; building what was written", entry.name)
            context = create_transform_context(entry, registry, known_packages=manifest.packages)
            try:
                root = NodeTransformer(context).transform(tree)
            except MalformedReflectionError as exc:
                skip(PackageTransformError(entry.name, str(exc)))
                continue
            packages.append(build_package_model(entry, root, context.nodes))
            logger.debug("Built package %s with %d nodes", entry.name, len(context.nodes))

    by_key: Dict[GlobalKey, DocNode] = {}
    by_global_slug: Dict[str, DocNode] = {}
    for package in packages:
        for key in registry.keys_for(package.name):
            node = registry.get(key)
            if node is not None:
                by_key[key] = node
        for slug, node in package.indexes.by_slug.items():
            by_global_slug[global_slug(package.name, slug)] = node

    with log_stage(logger, "resolve"):
        resolver = ReferenceResolver(by_key, packages, home_package=home_package)
        resolution_stats = resolver.resolve_all(packages)

    with log_stage(logger, "search"):
        builder = SearchIndexBuilder(summary_budget=options.summary_budget)
        for package in packages:
            package.indexes.search = builder.build_package(package)
        search_index = SearchIndex(
            {package.name: package.indexes.search for package in packages},
            package_order=[package.name for package in packages],
            home_package=home_package,
        )

    with log_stage(logger, "propagate"):
        propagation_stats = propagate_source_information(package.root for package in packages)

    collection = DocCollection(
        manifest=manifest,
        packages=tuple(packages),
        by_key=MappingProxyType(by_key),
        by_global_slug=MappingProxyType(by_global_slug),
        warnings=tuple(warnings),
    )
    logger.info(
        "Built %d of %d packages (%d nodes, %d skipped)",
        len(packages),
        len(manifest.packages),
        len(by_key),
        len(warnings),
    )
    return BuildResult(
        collection=collection,
        resolver=resolver,
        search_index=search_index,
        registry=registry,
        resolution_stats=resolution_stats,
        propagation_stats=propagation_stats,
    )


__all__ = ["BuildOptions", "BuildResult", "build_collection", "default_home_package"]
