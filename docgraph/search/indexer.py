"""Search entry construction for documentation nodes."""

from __future__ import annotations

import posixpath
import re
from typing import Dict, Iterable, List, Optional, Sequence

from ..kinds import ReflectionKind
from ..models import DocManifestPackage, DocNode, DocPackageModel, DocSearchEntry

_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_TOKEN_SPLIT = re.compile(r"[^a-zA-Z0-9]+")
_ALIAS_TAGS = ("@alias", "@label")
_ELLIPSIS = "..."

DEFAULT_SUMMARY_BUDGET = 200


def tokenize(text: str) -> List[str]:
    """Split on case and non-alphanumeric boundaries: ``getHTTPClient2`` -> ``get``, ``httpclient2``."""
    spaced = _CASE_BOUNDARY.sub(r"\1 \2", text)
    return [token.lower() for token in _TOKEN_SPLIT.split(spaced) if token]


def cap_summary(summary: str, budget: int) -> str:
    collapsed = " ".join(summary.split())
    if len(collapsed) <= budget:
        return collapsed
    cut = collapsed[: max(0, budget - len(_ELLIPSIS))].rstrip()
    return f"{cut}{_ELLIPSIS}"


def _unique(values: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


class SearchIndexBuilder:
    """Derives one ``DocSearchEntry`` per indexable node."""

    def __init__(self, *, summary_budget: int = DEFAULT_SUMMARY_BUDGET) -> None:
        self.summary_budget = max(0, summary_budget)

    def build_entry(
        self,
        node: DocNode,
        manifest: DocManifestPackage,
        aliases: Sequence[str] = (),
    ) -> DocSearchEntry:
        alias_list = _unique([*aliases, *self._tag_aliases(node)])
        alias_list = [alias for alias in alias_list if alias != node.name]

        tokens = _unique(
            token
            for text in (node.name, *node.path, node.qualified_name, *alias_list)
            for token in tokenize(text)
        )

        summary: Optional[str] = None
        if node.comment is not None and node.comment.summary:
            summary = cap_summary(node.comment.summary, self.summary_budget)

        return DocSearchEntry(
            slug=node.slug,
            name=node.name,
            qualified_name=node.qualified_name,
            package_name=manifest.name,
            package_version=manifest.version or None,
            kind=node.kind,
            tokens=tokens,
            summary=summary,
            aliases=alias_list,
            file=posixpath.basename(node.sources[0].file_name) if node.sources else None,
            source_package=node.source_package.name,
        )

    def build_package(self, package: DocPackageModel) -> List[DocSearchEntry]:
        """Entries for every node of a package except the root and re-export references."""
        reexports = self._reexport_aliases(package)
        entries: List[DocSearchEntry] = []
        for node in package.root.walk():
            if not node.path or node.kind is ReflectionKind.REFERENCE:
                continue
            entries.append(self.build_entry(node, package.manifest, reexports.get(node.id, ())))
        return entries

    def _reexport_aliases(self, package: DocPackageModel) -> Dict[int, List[str]]:
        aliases: Dict[int, List[str]] = {}
        for node in package.indexes.by_kind.get(ReflectionKind.REFERENCE, []):
            target = node.alias_of.target_key if node.alias_of is not None else None
            if target is None or target.package != package.name or target.local_id not in package.nodes:
                continue
            aliases.setdefault(target.local_id, []).append(node.name)
        return aliases

    @staticmethod
    def _tag_aliases(node: DocNode) -> List[str]:
        comments = [node.comment, *(signature.comment for signature in node.signatures)]
        found: List[str] = []
        for comment in comments:
            if comment is None:
                continue
            for tag_name in _ALIAS_TAGS:
                found.extend(tag.text for tag in comment.tags(tag_name) if tag.text)
        return found


__all__ = ["DEFAULT_SUMMARY_BUDGET", "SearchIndexBuilder", "cap_summary", "tokenize"]
