"""Shape checks for raw reflection containers."""

from __future__ import annotations

from typing import Any, List

from ..errors import MalformedReflectionError


def as_list(value: Any, what: str) -> List[Any]:
    """Return ``value`` as a list; absent means empty.

    A container that is present but not a JSON array makes the whole tree
    malformed, so the owning package is skipped rather than the build.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedReflectionError(f"{what} must be a list, got {type(value).__name__}")
    return value


__all__ = ["as_list"]
