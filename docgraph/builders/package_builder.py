"""Assembly of one package model from a transformed node tree."""

from __future__ import annotations

from typing import Dict

from ..directory import PackageDirectory
from ..models import DocIndexes, DocManifestPackage, DocNode, DocPackageModel


def build_indexes(root: DocNode) -> DocIndexes:
    indexes = DocIndexes()
    for node in root.walk():
        indexes.by_id[node.id] = node
        indexes.by_slug[node.slug] = node
        if node.qualified_name:
            indexes.by_qualified_name.setdefault(node.qualified_name, node)
        indexes.by_kind.setdefault(node.kind, []).append(node)
        if len(node.path) == 1:
            indexes.exports.setdefault(node.name, node)
    return indexes


def build_package_model(
    manifest: DocManifestPackage,
    root: DocNode,
    nodes: Dict[int, DocNode],
) -> DocPackageModel:
    """Index a transformed tree; search entries are filled in by a later stage."""
    indexes = build_indexes(root)
    return DocPackageModel(
        manifest=manifest,
        root=root,
        nodes=dict(nodes),
        indexes=indexes,
        directory=PackageDirectory(manifest.name, indexes.by_id.values()),
    )


__all__ = ["build_indexes", "build_package_model"]
