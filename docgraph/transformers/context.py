"""Per-package state threaded explicitly through the reflection walk."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..identity import GlobalKey, IdentityRegistry
from ..models import DocManifestPackage, DocNode, SourcePackage
from ..slugger import Slugger
from .comments import CommentTransformer

_PNPM_STORE = re.compile(r"node_modules/\.pnpm/((?:@[^/+]+\+)?[^/@]+)@([^/_]+)")
_NODE_MODULES = re.compile(r"node_modules/((?:@[^/]+/)?[^/.][^/]*)/")
_WORKSPACE_PACKAGE = re.compile(r"(?:^|/)packages/([^/]+)/")


def compute_aliases(name: str) -> List[str]:
    """Names a package may appear under in paths (``@scope/pkg`` -> ``pkg``...)."""
    aliases: List[str] = []
    candidates = [name]
    if name.startswith("@") and "/" in name:
        candidates.append(name.split("/", 1)[1])
    candidates.append(name.rsplit("/", 1)[-1])
    for candidate in candidates:
        for form in (candidate, candidate.lower()):
            if form and form not in aliases:
                aliases.append(form)
    return aliases


@dataclass
class TransformContext:
    """Everything the transformer needs for one package; created once per package."""

    manifest: DocManifestPackage
    registry: IdentityRegistry
    slugger: Slugger = field(default_factory=Slugger)
    comments: CommentTransformer = field(default_factory=CommentTransformer)
    nodes: Dict[int, DocNode] = field(default_factory=dict)
    packages_by_alias: Dict[str, SourcePackage] = field(default_factory=dict)

    @property
    def package_name(self) -> str:
        return self.manifest.name

    @property
    def package_version(self) -> Optional[str]:
        return self.manifest.version or None

    def key_for(self, local_id: int) -> GlobalKey:
        return GlobalKey(self.manifest.name, local_id)

    def own_package(self) -> SourcePackage:
        return SourcePackage(self.manifest.name, self.manifest.version)

    def lookup_package(self, alias: str) -> Optional[SourcePackage]:
        return self.packages_by_alias.get(alias) or self.packages_by_alias.get(alias.lower())

    def infer_source_package(self, file_names: Iterable[str], hint: Optional[str] = None) -> SourcePackage:
        """Work out which package a declaration physically lives in.

        Source paths win over the reference hint; anything unrecognized
        belongs to the package being transformed.
        """
        for file_name in file_names:
            found = self._package_from_path(file_name.replace("\\", "/"))
            if found is not None:
                return found
        if hint:
            known = self.lookup_package(hint)
            return known if known is not None else SourcePackage(hint)
        return self.own_package()

    def _package_from_path(self, path: str) -> Optional[SourcePackage]:
        match = _PNPM_STORE.search(path)
        if match:
            name = match.group(1).replace("+", "/")
            known = self.lookup_package(name)
            return known if known is not None else SourcePackage(name, match.group(2))

        match = _NODE_MODULES.search(path)
        if match:
            name = match.group(1)
            known = self.lookup_package(name)
            return known if known is not None else SourcePackage(name)

        match = _WORKSPACE_PACKAGE.search(path)
        if match:
            return self.lookup_package(match.group(1))
        return None


def create_transform_context(
    manifest: DocManifestPackage,
    registry: IdentityRegistry,
    *,
    known_packages: Iterable[DocManifestPackage] = (),
    slugger: Optional[Slugger] = None,
    comments: Optional[CommentTransformer] = None,
) -> TransformContext:
    by_alias: Dict[str, SourcePackage] = {}
    for package in [manifest, *known_packages]:
        entry = SourcePackage(package.name, package.version)
        for alias in compute_aliases(package.name):
            by_alias.setdefault(alias, entry)
    return TransformContext(
        manifest=manifest,
        registry=registry,
        slugger=slugger or Slugger(),
        comments=comments or CommentTransformer(),
        packages_by_alias=by_alias,
    )


def register_node(context: TransformContext, node: DocNode) -> None:
    context.nodes[node.id] = node
    context.registry.register(node)


__all__ = [
    "TransformContext",
    "compute_aliases",
    "create_transform_context",
    "register_node",
]
