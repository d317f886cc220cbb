"""Mapping of raw reference descriptors to ``DocReference``."""

from __future__ import annotations

from typing import Any, Optional

from ..models import DocReference
from .context import TransformContext


def map_reference(context: TransformContext, raw: Any) -> Optional[DocReference]:
    """Build an unresolved ``DocReference`` from a raw reference shape.

    Numeric targets are local ids of the project being transformed, so the
    key is always scoped to the context package. A reference that carries a
    target never keeps an external URL hint.
    """
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        return None

    target = raw.get("target")
    qualified_name = _non_empty(raw.get("qualifiedName"))
    package_name = _non_empty(raw.get("packageName")) or _non_empty(raw.get("package"))
    if isinstance(target, str):
        qualified_name = qualified_name or _non_empty(target)
    elif isinstance(target, dict):
        qualified_name = qualified_name or _non_empty(target.get("qualifiedName"))
        # The target's own package wins over the reference-level hint.
        package_name = _non_empty(target.get("packageName")) or _non_empty(target.get("package")) or package_name

    target_id = target if isinstance(target, int) and not isinstance(target, bool) else None
    if target_id is None and isinstance(raw.get("id"), int) and not isinstance(raw.get("id"), bool):
        target_id = raw["id"]

    if target_id is not None:
        return DocReference(
            name=name,
            qualified_name=qualified_name,
            package_name=package_name,
            target_key=context.key_for(target_id),
        )

    return DocReference(
        name=name,
        qualified_name=qualified_name,
        package_name=package_name,
        external_url=_external_url(raw),
    )


def _non_empty(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _external_url(raw: dict) -> Optional[str]:
    for key in ("externalUrl", "url"):
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    sources = raw.get("sources")
    if isinstance(sources, list) and sources and isinstance(sources[0], dict):
        url = sources[0].get("url")
        if isinstance(url, str) and url:
            return url
    return None


__all__ = ["map_reference"]
