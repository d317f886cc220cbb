"""Per-package entity directory grouped by display category."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .kinds import ReflectionKind
from .models import DocNode

CATEGORY_KINDS: Dict[str, ReflectionKind] = {
    "classes": ReflectionKind.CLASS,
    "interfaces": ReflectionKind.INTERFACE,
    "enums": ReflectionKind.ENUM,
    "types": ReflectionKind.TYPE_ALIAS,
    "functions": ReflectionKind.FUNCTION,
    "variables": ReflectionKind.VARIABLE,
}

CATEGORIES = tuple(CATEGORY_KINDS)


class PackageDirectory:
    """Slug-keyed listing of a package's top-level entity categories."""

    def __init__(self, package: str, nodes: Iterable[DocNode]) -> None:
        self.package = package
        self._entries: Dict[str, Dict[str, DocNode]] = {category: {} for category in CATEGORIES}
        by_kind = {kind: category for category, kind in CATEGORY_KINDS.items()}
        for node in nodes:
            category = by_kind.get(node.kind)
            if category is not None:
                self._entries[category][node.slug] = node

    def get(self, category: str, slug: str) -> Optional[DocNode]:
        return self._entries.get(category, {}).get(slug)

    def list(self, category: str) -> List[DocNode]:
        nodes = self._entries.get(category, {}).values()
        return sorted(nodes, key=lambda node: (node.name.lower(), node.slug))

    def list_names(self, category: str) -> List[str]:
        return [node.name for node in self.list(category)]

    def snapshot(self) -> Dict[str, List[str]]:
        """Sorted names per category, e.g. for listings and CLI output."""
        return {category: self.list_names(category) for category in CATEGORIES}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


__all__ = ["CATEGORIES", "CATEGORY_KINDS", "PackageDirectory"]
