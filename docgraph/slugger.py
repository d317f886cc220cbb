"""URL slug generation for documentation nodes."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Sequence, Set

SEPARATOR = "/"
_FALLBACK_SEGMENT = "item"

_GENERICS = re.compile(r"<.*?>")
_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def slugify_segment(segment: str) -> str:
    """Sanitize one name segment (``fooBar<T>`` -> ``foo-bar``)."""
    stripped = _GENERICS.sub("", segment)
    spaced = _CASE_BOUNDARY.sub(r"\1-\2", stripped)
    collapsed = _NON_ALNUM.sub("-", spaced).strip("-").lower()
    return collapsed or _FALLBACK_SEGMENT


class Slugger:
    """Issues slugs that are unique among everything this instance has produced.

    One instance is created per package. The first node to claim a slug keeps
    the bare form; later claimants get ``-2``, ``-3``... in visitation order,
    skipping suffixes that are already taken.
    """

    def __init__(self, prefix_segments: Iterable[str] = ()) -> None:
        self._prefix: List[str] = [slugify_segment(segment) for segment in prefix_segments]
        self._issued: Set[str] = set()
        self._next_suffix: Dict[str, int] = {}

    def slug(self, segments: Sequence[str]) -> str:
        parts = [*self._prefix, *(slugify_segment(segment) for segment in segments)]
        base = SEPARATOR.join(parts)
        if base not in self._issued:
            self._issued.add(base)
            return base

        suffix = self._next_suffix.get(base, 2)
        candidate = f"{base}-{suffix}"
        while candidate in self._issued:
            suffix += 1
            candidate = f"{base}-{suffix}"
        self._next_suffix[base] = suffix + 1
        self._issued.add(candidate)
        return candidate

    def with_prefix(self, *segments: str) -> "Slugger":
        """Return a fresh slugger whose slugs start with the given segments."""
        return Slugger([*self._prefix, *segments])

    def issued(self) -> Set[str]:
        return set(self._issued)

    def __contains__(self, slug: object) -> bool:
        return slug in self._issued


__all__ = ["SEPARATOR", "Slugger", "slugify_segment"]
