"""Ranked, case-insensitive search over prebuilt entries."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..kinds import ReflectionKind, kind_weight
from ..models import DocSearchEntry
from .indexer import tokenize

TIER_EXACT_NAME = 0
TIER_QUALIFIED_NAME = 1
TIER_TOKEN = 2
TIER_SUMMARY = 3


def match_tier(entry: DocSearchEntry, query: str, query_tokens: Sequence[str]) -> Optional[int]:
    """Best tier an entry matches ``query`` at, or None. ``query`` must be lowercased."""
    if entry.name.lower() == query:
        return TIER_EXACT_NAME
    if query in entry.qualified_name.lower() or query in entry.name.lower():
        return TIER_QUALIFIED_NAME
    if any(query in token for token in entry.tokens):
        return TIER_TOKEN
    if query_tokens and all(
        any(token.startswith(part) for token in entry.tokens) for part in query_tokens
    ):
        return TIER_TOKEN
    if entry.summary and query in entry.summary.lower():
        return TIER_SUMMARY
    return None


class SearchIndex:
    """Holds every package's entries plus a global list deduplicated across re-exports."""

    def __init__(
        self,
        entries_by_package: Mapping[str, Sequence[DocSearchEntry]],
        *,
        package_order: Sequence[str],
        home_package: Optional[str] = None,
    ) -> None:
        self._order: Dict[str, int] = {name: index for index, name in enumerate(package_order)}
        self._by_package: Dict[str, Tuple[DocSearchEntry, ...]] = {
            name: tuple(entries_by_package.get(name, ())) for name in package_order
        }
        self.home_package = home_package
        self._global: Tuple[DocSearchEntry, ...] = self._deduplicate()

    def entries(self, package: Optional[str] = None) -> List[DocSearchEntry]:
        if package is None:
            return list(self._global)
        return list(self._by_package.get(package, ()))

    def search(
        self,
        query: str,
        package: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[DocSearchEntry]:
        needle = query.strip().lower()
        if not needle:
            return []
        query_tokens = tokenize(query)
        source = self._global if package is None else self._by_package.get(package, ())

        scored = []
        for entry in source:
            tier = match_tier(entry, needle, query_tokens)
            if tier is not None:
                scored.append((self._rank_key(entry, tier), entry))
        scored.sort(key=lambda item: item[0])
        results = [entry for _, entry in scored]
        if limit is not None:
            return results[: max(0, limit)]
        return results

    def _rank_key(self, entry: DocSearchEntry, tier: int) -> Tuple[int, int, int, int, str]:
        return (
            tier,
            -kind_weight(entry.kind),
            len(entry.qualified_name),
            self._order.get(entry.package_name, len(self._order)),
            entry.slug,
        )

    def _deduplicate(self) -> Tuple[DocSearchEntry, ...]:
        """Keep one entry per ``(slug, kind)`` across packages.

        Preference: the home package, then the package the declaration
        physically lives in, then manifest order.
        """
        chosen: Dict[Tuple[str, ReflectionKind], DocSearchEntry] = {}
        for entries in self._by_package.values():
            for entry in entries:
                identity = (entry.slug, entry.kind)
                current = chosen.get(identity)
                if current is None or self._preference(entry) < self._preference(current):
                    chosen[identity] = entry
        return tuple(chosen.values())

    def _preference(self, entry: DocSearchEntry) -> Tuple[int, int, int]:
        return (
            0 if entry.package_name == self.home_package else 1,
            0 if entry.source_package == entry.package_name else 1,
            self._order.get(entry.package_name, len(self._order)),
        )


__all__ = [
    "SearchIndex",
    "TIER_EXACT_NAME",
    "TIER_QUALIFIED_NAME",
    "TIER_SUMMARY",
    "TIER_TOKEN",
    "match_tier",
]
