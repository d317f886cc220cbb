"""Read-only facade over a built documentation collection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .builders import BuildOptions, BuildResult, build_collection
from .config import MANIFEST_FILENAME, DocGraphConfig
from .directory import CATEGORIES, PackageDirectory
from .identity import GlobalKey
from .logging import get_logger
from .manifest_reader import ManifestReader, PackageLocator, find_workspace_root
from .models import (
    DocCollection,
    DocManifest,
    DocNode,
    DocPackageModel,
    DocReference,
    DocSearchEntry,
    PackageWarning,
    ReferenceResolution,
    global_slug,
)
from .search.indexer import DEFAULT_SUMMARY_BUDGET
from .transformers import compute_aliases

logger = get_logger("engine")


@dataclass
class EngineOptions:
    """Where to find the run summary and how to build from it."""

    generated_root: Path
    manifest_path: Optional[Path] = None
    workspace_root: Optional[Path] = None
    home_package: Optional[str] = None
    summary_budget: int = DEFAULT_SUMMARY_BUDGET
    read_workers: int = 4
    manifest: Optional[DocManifest] = None

    @classmethod
    def from_config(cls, config: DocGraphConfig) -> "EngineOptions":
        return cls(
            generated_root=config.resolved_generated_dir(),
            manifest_path=config.resolved_manifest_path(),
            workspace_root=config.workspace_root,
            home_package=config.home_package,
            summary_budget=config.search.summary_budget,
            read_workers=config.read_workers,
        )


class DocsEngine:
    """Lookups, reference resolution and search over one frozen build."""

    def __init__(self, result: BuildResult) -> None:
        self._result = result
        self._collection = result.collection

    @classmethod
    def create(cls, options: EngineOptions) -> "DocsEngine":
        """Run the whole pipeline; raises ``InputError`` when the run summary is unusable."""
        generated_root = Path(options.generated_root)
        manifest_path = options.manifest_path or generated_root / MANIFEST_FILENAME
        manifest = options.manifest or ManifestReader(manifest_path).read()
        workspace_root = options.workspace_root or find_workspace_root(manifest_path.parent)

        locator = PackageLocator(
            manifest_dir=manifest_path.parent,
            manifest_output_dir=manifest.output_dir,
            generated_root=generated_root,
            workspace_root=workspace_root,
        )
        logger.info("Building documentation graph from %s", manifest_path)
        result = build_collection(
            manifest,
            locator,
            BuildOptions(
                home_package=options.home_package,
                summary_budget=options.summary_budget,
                read_workers=options.read_workers,
            ),
        )
        return cls(result)

    @classmethod
    def from_config(cls, config: DocGraphConfig) -> "DocsEngine":
        return cls.create(EngineOptions.from_config(config))

    # ------------------------------------------------------------------
    # Packages

    @property
    def collection(self) -> DocCollection:
        return self._collection

    @property
    def home_package(self) -> Optional[str]:
        return self._result.search_index.home_package

    def get_manifest(self) -> DocManifest:
        return self._collection.manifest

    def list_packages(self) -> List[str]:
        return self._collection.package_names()

    def get_package(self, name: str) -> Optional[DocPackageModel]:
        return self._collection.package(name)

    def get_package_directory(self, name: str) -> Optional[PackageDirectory]:
        package = self.get_package(name)
        return package.directory if package is not None else None

    def list_package_entities(self, name: str, category: Optional[str] = None) -> List[DocNode]:
        """Directory entities of one package, optionally limited to one category."""
        directory = self.get_package_directory(name)
        if directory is None:
            return []
        categories = [category] if category else CATEGORIES
        return [node for item in categories for node in directory.list(item)]

    def warnings(self) -> Tuple[PackageWarning, ...]:
        return self._collection.warnings

    def resolve_package_name(self, requested: Optional[str]) -> Optional[str]:
        """Map a user-supplied package name or alias (``core``, ``@scope/core``) to a listed package."""
        if not requested or not requested.strip():
            return None
        wanted = requested.strip().lower()
        for name in self.list_packages():
            if wanted == name.lower() or wanted in compute_aliases(name):
                return name
        return None

    # ------------------------------------------------------------------
    # Node lookups

    def get_node_by_key(self, key: Union[GlobalKey, str]) -> Optional[DocNode]:
        parsed = GlobalKey.parse(key)
        if parsed is None:
            return None
        return self._collection.by_key.get(parsed)

    def get_node_by_slug(self, package: str, slug: str) -> Optional[DocNode]:
        model = self.get_package(package)
        return model.indexes.by_slug.get(slug) if model is not None else None

    def get_node_by_qualified_name(self, package: str, qualified_name: str) -> Optional[DocNode]:
        model = self.get_package(package)
        return model.indexes.by_qualified_name.get(qualified_name) if model is not None else None

    def get_node_by_global_slug(self, package: str, slug: str) -> Optional[DocNode]:
        return self._collection.by_global_slug.get(global_slug(package, slug))

    # ------------------------------------------------------------------
    # Resolution and search

    def resolve_reference(self, package: str, reference: Optional[DocReference]) -> ReferenceResolution:
        return self._result.resolver.resolve(package, reference)

    def search(
        self,
        query: str,
        package: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[DocSearchEntry]:
        return self._result.search_index.search(query, package=package, limit=limit)


__all__ = ["DocsEngine", "EngineOptions"]
