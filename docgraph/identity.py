"""Global identities for documentation nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, List, NamedTuple, Optional, Union

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import DocNode


class GlobalKey(NamedTuple):
    """``(package, local id)`` pair identifying one node across all packages."""

    package: str
    local_id: int

    def __str__(self) -> str:
        return f"{self.package}:{self.local_id}"

    @classmethod
    def parse(cls, value: Union["GlobalKey", str]) -> Optional["GlobalKey"]:
        """Accept a key or its ``package:id`` string form; return None when malformed."""
        if isinstance(value, GlobalKey):
            return value
        package, sep, raw_id = str(value).rpartition(":")
        if not sep or not package:
            return None
        try:
            return cls(package, int(raw_id))
        except ValueError:
            return None


def to_global_key(package: str, local_id: int) -> GlobalKey:
    return GlobalKey(package, local_id)


class IdentityRegistry:
    """Append-only index of every node created during a build, keyed by ``GlobalKey``.

    Local ids are unique per package in the upstream data, so the registry
    only indexes them; a repeated key simply replaces the earlier entry.
    """

    def __init__(self) -> None:
        self._nodes: Dict[GlobalKey, "DocNode"] = {}
        self._by_package: Dict[str, List[GlobalKey]] = {}

    def register(self, node: "DocNode") -> GlobalKey:
        key = node.key
        if key not in self._nodes:
            self._by_package.setdefault(key.package, []).append(key)
        self._nodes[key] = node
        return key

    def get(self, key: GlobalKey) -> Optional["DocNode"]:
        return self._nodes.get(key)

    def keys_for(self, package: str) -> List[GlobalKey]:
        return list(self._by_package.get(package, []))

    def packages(self) -> List[str]:
        return list(self._by_package)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GlobalKey]:
        return iter(self._nodes)


__all__ = ["GlobalKey", "IdentityRegistry", "to_global_key"]
