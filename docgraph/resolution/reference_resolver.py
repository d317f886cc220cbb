"""Second-pass resolution of ``DocReference`` values across packages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..identity import GlobalKey
from ..kinds import ReflectionKind
from ..logging import get_logger
from ..models import (
    DocNode,
    DocPackageModel,
    DocReference,
    DocSignature,
    InlineType,
    ReferenceResolution,
    RenderedDeclarationHeader,
    RenderedSignature,
    RenderedTypeParameter,
    ResolutionStatus,
)

# Re-export chains longer than this are treated as cycles.
_MAX_ALIAS_HOPS = 8

logger = get_logger("resolve")


@dataclass
class ResolutionStats:
    total: int = 0
    internal: int = 0
    external: int = 0
    unresolved: int = 0

    def record(self, resolution: ReferenceResolution) -> None:
        self.total += 1
        if resolution.status is ResolutionStatus.INTERNAL:
            self.internal += 1
        elif resolution.status is ResolutionStatus.EXTERNAL:
            self.external += 1
        else:
            self.unresolved += 1


class ReferenceResolver:
    """Resolves references to an in-graph node, an external URL, or unresolved.

    Lookups run in a fixed order: embedded key, declaring package by
    qualified name then bare name, exported names across packages (home
    package first), external URL hint. ``resolve_all`` memoizes every graph
    reference per ``(package, reference)``; later ``resolve`` calls read that
    memo without adding to it. The resolver never raises.
    """

    def __init__(
        self,
        by_key: Mapping[GlobalKey, DocNode],
        packages: Sequence[DocPackageModel],
        *,
        home_package: Optional[str] = None,
    ) -> None:
        self._by_key = by_key
        self._packages: Dict[str, DocPackageModel] = {pkg.name: pkg for pkg in packages}
        self._order: List[str] = [pkg.name for pkg in packages]
        self.home_package = home_package
        self._memo: Dict[Tuple[str, DocReference], ReferenceResolution] = {}

    def resolve(self, package: str, reference: Optional[DocReference]) -> ReferenceResolution:
        if reference is None:
            return ReferenceResolution.unresolved()
        cached = self._memo.get((package, reference))
        if cached is not None:
            return cached
        return self._resolve(package, reference)

    def _resolve(self, package: str, reference: DocReference) -> ReferenceResolution:
        if reference.target_key is not None:
            node = self._follow_alias(self._by_key.get(reference.target_key))
            if node is not None:
                return ReferenceResolution.internal(node.package_name, node.slug)

        declaring = self._packages.get(package)
        if declaring is not None:
            node = self._lookup_qualified(declaring, reference)
            if node is not None:
                return ReferenceResolution.internal(node.package_name, node.slug)

        node = self._lookup_exported(reference)
        if node is not None:
            return ReferenceResolution.internal(node.package_name, node.slug)

        if reference.external_url:
            return ReferenceResolution.external(reference.external_url)
        return ReferenceResolution.unresolved()

    def _lookup_qualified(self, package: DocPackageModel, reference: DocReference) -> Optional[DocNode]:
        by_qualified_name = package.indexes.by_qualified_name
        if reference.qualified_name:
            node = self._follow_alias(by_qualified_name.get(reference.qualified_name))
            if node is not None:
                return node
        return self._follow_alias(by_qualified_name.get(reference.name))

    def _lookup_exported(self, reference: DocReference) -> Optional[DocNode]:
        names = [reference.name]
        if reference.qualified_name:
            names.append(reference.qualified_name.rsplit(".", 1)[-1])

        for package_name in self._search_order(reference.package_name):
            package = self._packages[package_name]
            for name in names:
                node = self._follow_alias(package.indexes.exports.get(name))
                if node is not None:
                    return node
            if reference.qualified_name:
                node = self._follow_alias(package.indexes.by_qualified_name.get(reference.qualified_name))
                if node is not None:
                    return node
        return None

    def _search_order(self, hint: Optional[str]) -> List[str]:
        ordered: List[str] = []
        for name in (self.home_package, hint, *self._order):
            if name and name in self._packages and name not in ordered:
                ordered.append(name)
        return ordered

    def _follow_alias(self, node: Optional[DocNode]) -> Optional[DocNode]:
        """Step through re-export reference nodes to the declaration they point at.

        A re-export whose target is missing, or a chain that does not end
        within the hop limit, yields None so the caller's next lookup runs.
        """
        hops = 0
        while node is not None and node.kind is ReflectionKind.REFERENCE:
            if hops >= _MAX_ALIAS_HOPS:
                return None
            target_key = node.alias_of.target_key if node.alias_of is not None else None
            node = self._by_key.get(target_key) if target_key is not None else None
            hops += 1
        return node

    def resolve_all(self, packages: Sequence[DocPackageModel]) -> ResolutionStats:
        """Resolve every reference in the graph once, filling the memo."""
        stats = ResolutionStats()
        for package in packages:
            for node in package.root.walk():
                for reference in iter_node_references(node):
                    memo_key = (package.name, reference)
                    if memo_key not in self._memo:
                        self._memo[memo_key] = self._resolve(package.name, reference)
                    stats.record(self._memo[memo_key])
        logger.info(
            "Resolved %d references: %d internal, %d external, %d unresolved",
            stats.total,
            stats.internal,
            stats.external,
            stats.unresolved,
        )
        return stats


# ----------------------------------------------------------------------
# Reference collection


def _inline_refs(inline: Optional[InlineType]) -> Iterator[DocReference]:
    if inline is None:
        return
    for part in inline.parts:
        if part.kind == "ref" and part.ref is not None:
            yield part.ref


def _type_param_refs(params: Sequence[RenderedTypeParameter]) -> Iterator[DocReference]:
    for param in params:
        yield from _inline_refs(param.constraint)
        yield from _inline_refs(param.default)


def _header_refs(header: Optional[RenderedDeclarationHeader]) -> Iterator[DocReference]:
    if header is None:
        return
    yield from _type_param_refs(header.type_params)
    for inline in (*header.extends, *header.implements, header.type, header.value):
        yield from _inline_refs(inline)


def _render_refs(render: Optional[RenderedSignature]) -> Iterator[DocReference]:
    if render is None:
        return
    yield from _type_param_refs(render.type_params)
    for parameter in render.parameters:
        yield from _inline_refs(parameter.type)
    yield from _inline_refs(render.return_type)


def _signature_refs(signature: DocSignature) -> Iterator[DocReference]:
    for reference in (signature.overwrites, signature.inherited_from, signature.implementation_of):
        if reference is not None:
            yield reference
    yield from _render_refs(signature.render)


def iter_node_references(node: DocNode) -> Iterator[DocReference]:
    """Every reference a node carries directly (not its children's)."""
    for reference in (node.overwrites, node.inherited_from, node.implementation_of, node.alias_of):
        if reference is not None:
            yield reference
    yield from _inline_refs(node.type_render)
    for inline in (
        *node.inheritance.extends,
        *node.inheritance.implements,
        *node.inheritance.extended_by,
        *node.inheritance.implemented_by,
    ):
        yield from _inline_refs(inline)
    yield from _header_refs(node.header)
    for signature in node.signatures:
        yield from _signature_refs(signature)


__all__ = ["ReferenceResolver", "ResolutionStats", "iter_node_references"]
