"""Back-fill of missing source URLs across duplicate declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from ..kinds import ReflectionKind
from ..logging import get_logger
from ..models import DocNode, DocSignature

logger = get_logger("sources")

NodeIdentity = Tuple[ReflectionKind, str]
SignatureIdentity = Tuple[ReflectionKind, str, int, Tuple[str, ...], Tuple[str, ...]]


@dataclass
class PropagationStats:
    node_groups: int = 0
    nodes_filled: int = 0
    signatures_filled: int = 0


def node_identity(node: DocNode) -> NodeIdentity:
    """``(kind, qualified name)``, else ``(kind, dotted path)``, else ``(kind, name)``.

    The name fallback can merge unrelated declarations that share a bare
    name; it is kept as a best-effort match.
    """
    if node.qualified_name:
        return (node.kind, node.qualified_name)
    if node.path:
        return (node.kind, ".".join(node.path))
    return (node.kind, node.name)


def signature_identity(signature: DocSignature) -> SignatureIdentity:
    return (
        signature.kind,
        signature.name,
        signature.overload_index,
        tuple(param.name for param in signature.type_parameters),
        tuple(param.name for param in signature.parameters),
    )


def _signature_url(signature: DocSignature) -> Optional[str]:
    if signature.source_url:
        return signature.source_url
    for source in signature.sources:
        if source.url:
            return source.url
    return None


def _group_url(members: List[DocNode]) -> Optional[str]:
    for node in members:
        if node.source_url:
            return node.source_url
    for node in members:
        for source in node.sources:
            if source.url:
                return source.url
    for node in members:
        for signature in node.signatures:
            url = _signature_url(signature)
            if url:
                return url
    return None


def _bucket(items: Iterable, identity) -> Dict[Hashable, list]:
    buckets: Dict[Hashable, list] = {}
    for item in items:
        buckets.setdefault(identity(item), []).append(item)
    return buckets


def propagate_source_information(roots: Iterable[DocNode]) -> PropagationStats:
    """Fill empty ``source_url`` fields from structurally identical declarations.

    Runs once over the whole forest. Only empty values are written; a group
    with no known URL stays empty.
    """
    stats = PropagationStats()
    all_nodes = [node for root in roots for node in root.walk()]
    groups = _bucket(all_nodes, node_identity)
    stats.node_groups = len(groups)

    for members in groups.values():
        url = _group_url(members)
        if url is not None:
            for node in members:
                if not node.source_url:
                    node.source_url = url
                    stats.nodes_filled += 1

        signatures = [signature for node in members for signature in node.signatures]
        for bucket in _bucket(signatures, signature_identity).values():
            signature_url = next((found for found in map(_signature_url, bucket) if found), None)
            if signature_url is None:
                continue
            for signature in bucket:
                if not signature.source_url:
                    signature.source_url = signature_url
                    stats.signatures_filled += 1

    logger.info(
        "Propagated source URLs to %d nodes and %d signatures across %d groups",
        stats.nodes_filled,
        stats.signatures_filled,
        stats.node_groups,
    )
    return stats


__all__ = [
    "PropagationStats",
    "node_identity",
    "propagate_source_information",
    "signature_identity",
]
