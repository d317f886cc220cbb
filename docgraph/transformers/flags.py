"""Flag mapping for declarations, signatures and parameters."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ..kinds import ReflectionKind
from ..models import DocComment, DocFlags
from .shapes import as_list

_PROMISE_NAMES = {"Promise", "PromiseLike"}

# Signature reflections carry their return type directly in ``type``.
_CALL_SIGNATURE_KINDS = frozenset({ReflectionKind.CALL_SIGNATURE, ReflectionKind.CONSTRUCTOR_SIGNATURE})


def _has_modifier(comment: Optional[DocComment], modifier: str) -> bool:
    return comment is not None and modifier in comment.modifier_tags


def _has_block_tag(comment: Optional[DocComment], tag: str) -> bool:
    return comment is not None and bool(comment.tags(tag))


def resolve_accessor(raw: dict, kind: Optional[ReflectionKind]) -> Optional[str]:
    if kind is not ReflectionKind.ACCESSOR:
        return None
    has_getter = isinstance(raw.get("getSignature"), dict)
    has_setter = isinstance(raw.get("setSignature"), dict)
    if has_getter and has_setter:
        return "getter-setter"
    if has_getter:
        return "getter"
    if has_setter:
        return "setter"
    return None


def returns_promise(raw_type: Any) -> bool:
    """True when a return type is ``Promise``/``PromiseLike`` or a union containing one."""
    if not isinstance(raw_type, dict):
        return False
    kind = raw_type.get("type")
    if kind == "reference":
        return raw_type.get("name") in _PROMISE_NAMES
    if kind in ("union", "intersection"):
        return any(returns_promise(item) for item in as_list(raw_type.get("types"), f"{kind} members"))
    return False


def map_flags(
    raw: dict,
    kind: Optional[ReflectionKind] = None,
    comment: Optional[DocComment] = None,
    signature_comments: Iterable[Optional[DocComment]] = (),
) -> DocFlags:
    flags = raw.get("flags") if isinstance(raw.get("flags"), dict) else {}

    if flags.get("isPrivate"):
        access: Optional[str] = "private"
    elif flags.get("isProtected"):
        access = "protected"
    elif flags.get("isPublic"):
        access = "public"
    else:
        access = None

    signatures = [sig for sig in as_list(raw.get("signatures"), "signatures") if isinstance(sig, dict)]
    deprecated = (
        bool(flags.get("isDeprecated"))
        or _has_block_tag(comment, "@deprecated")
        or any(_has_block_tag(sig_comment, "@deprecated") for sig_comment in signature_comments)
    )
    overwrites = bool(raw.get("overwrites"))
    inherited = bool(flags.get("isInherited")) or overwrites or bool(raw.get("inheritedFrom")) or bool(
        raw.get("implementationOf")
    )
    decorators = raw.get("decorators")

    return DocFlags(
        access=access,
        accessor=resolve_accessor(raw, kind),
        is_static=bool(flags.get("isStatic")),
        is_abstract=bool(flags.get("isAbstract")),
        is_const=bool(flags.get("isConst")),
        is_readonly=bool(flags.get("isReadonly")),
        is_optional=bool(flags.get("isOptional")),
        is_rest=bool(flags.get("isRest")),
        is_async=bool(flags.get("isAsync"))
        or returns_promise(raw.get("type") if kind in _CALL_SIGNATURE_KINDS else None)
        or any(returns_promise(sig.get("type")) for sig in signatures),
        is_deprecated=deprecated,
        is_inherited=inherited,
        is_overwriting=overwrites,
        is_internal=bool(flags.get("isInternal")) or _has_modifier(comment, "@internal"),
        is_external=bool(flags.get("isExternal")) or _has_modifier(comment, "@external"),
        is_decorator=_has_block_tag(comment, "@decorator") or (isinstance(decorators, list) and bool(decorators)),
    )


__all__ = ["map_flags", "resolve_accessor", "returns_promise"]
