"""Reflection kind codes and the lookup tables keyed by them."""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Dict, Mapping

from .errors import UnknownKindError


class ReflectionKind(IntEnum):
    """Bit-flag kind codes emitted by the reflection extractor."""

    PROJECT = 0x1
    MODULE = 0x2
    NAMESPACE = 0x4
    ENUM = 0x8
    ENUM_MEMBER = 0x10
    VARIABLE = 0x20
    FUNCTION = 0x40
    CLASS = 0x80
    INTERFACE = 0x100
    CONSTRUCTOR = 0x200
    PROPERTY = 0x400
    METHOD = 0x800
    CALL_SIGNATURE = 0x1000
    INDEX_SIGNATURE = 0x2000
    CONSTRUCTOR_SIGNATURE = 0x4000
    PARAMETER = 0x8000
    TYPE_LITERAL = 0x10000
    TYPE_PARAMETER = 0x20000
    ACCESSOR = 0x40000
    GET_SIGNATURE = 0x80000
    SET_SIGNATURE = 0x100000
    TYPE_ALIAS = 0x200000
    REFERENCE = 0x400000
    DOCUMENT = 0x800000


_KIND_LABELS: Dict[ReflectionKind, str] = {
    ReflectionKind.PROJECT: "Project",
    ReflectionKind.MODULE: "Module",
    ReflectionKind.NAMESPACE: "Namespace",
    ReflectionKind.ENUM: "Enumeration",
    ReflectionKind.ENUM_MEMBER: "Enumeration Member",
    ReflectionKind.VARIABLE: "Variable",
    ReflectionKind.FUNCTION: "Function",
    ReflectionKind.CLASS: "Class",
    ReflectionKind.INTERFACE: "Interface",
    ReflectionKind.CONSTRUCTOR: "Constructor",
    ReflectionKind.PROPERTY: "Property",
    ReflectionKind.METHOD: "Method",
    ReflectionKind.CALL_SIGNATURE: "Call Signature",
    ReflectionKind.INDEX_SIGNATURE: "Index Signature",
    ReflectionKind.CONSTRUCTOR_SIGNATURE: "Constructor Signature",
    ReflectionKind.PARAMETER: "Parameter",
    ReflectionKind.TYPE_LITERAL: "Type Literal",
    ReflectionKind.TYPE_PARAMETER: "Type Parameter",
    ReflectionKind.ACCESSOR: "Accessor",
    ReflectionKind.GET_SIGNATURE: "Get Signature",
    ReflectionKind.SET_SIGNATURE: "Set Signature",
    ReflectionKind.TYPE_ALIAS: "Type Alias",
    ReflectionKind.REFERENCE: "Reference",
    ReflectionKind.DOCUMENT: "Document",
}

# Secondary ordering weight for search results that land in the same tier.
_KIND_WEIGHTS: Dict[ReflectionKind, int] = {
    ReflectionKind.PROJECT: 1,
    ReflectionKind.MODULE: 6,
    ReflectionKind.NAMESPACE: 6,
    ReflectionKind.ENUM: 14,
    ReflectionKind.ENUM_MEMBER: 7,
    ReflectionKind.VARIABLE: 7,
    ReflectionKind.FUNCTION: 13,
    ReflectionKind.CLASS: 18,
    ReflectionKind.INTERFACE: 16,
    ReflectionKind.CONSTRUCTOR: 12,
    ReflectionKind.PROPERTY: 9,
    ReflectionKind.METHOD: 11,
    ReflectionKind.CALL_SIGNATURE: 10,
    ReflectionKind.INDEX_SIGNATURE: 8,
    ReflectionKind.CONSTRUCTOR_SIGNATURE: 10,
    ReflectionKind.PARAMETER: 4,
    ReflectionKind.TYPE_LITERAL: 4,
    ReflectionKind.TYPE_PARAMETER: 6,
    ReflectionKind.ACCESSOR: 10,
    ReflectionKind.GET_SIGNATURE: 10,
    ReflectionKind.SET_SIGNATURE: 10,
    ReflectionKind.TYPE_ALIAS: 15,
    ReflectionKind.REFERENCE: 4,
    ReflectionKind.DOCUMENT: 2,
}


def _check_table(name: str, table: Mapping[ReflectionKind, object]) -> None:
    missing = [kind.name for kind in ReflectionKind if kind not in table]
    if missing:
        raise RuntimeError(f"{name} is missing entries for: {', '.join(missing)}")


_check_table("_KIND_LABELS", _KIND_LABELS)
_check_table("_KIND_WEIGHTS", _KIND_WEIGHTS)

SIGNATURE_KINDS = frozenset(
    {
        ReflectionKind.CALL_SIGNATURE,
        ReflectionKind.CONSTRUCTOR_SIGNATURE,
        ReflectionKind.INDEX_SIGNATURE,
        ReflectionKind.GET_SIGNATURE,
        ReflectionKind.SET_SIGNATURE,
    }
)

CALLABLE_KINDS = frozenset(
    {
        ReflectionKind.FUNCTION,
        ReflectionKind.METHOD,
        ReflectionKind.CONSTRUCTOR,
        ReflectionKind.CALL_SIGNATURE,
        ReflectionKind.CONSTRUCTOR_SIGNATURE,
    }
)


def parse_kind(value: object) -> ReflectionKind:
    """Validate a raw kind code, raising ``UnknownKindError`` for anything unknown."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise UnknownKindError(value)
    try:
        return ReflectionKind(value)
    except ValueError as exc:
        raise UnknownKindError(value) from exc


def kind_label(kind: ReflectionKind) -> str:
    return _KIND_LABELS[kind]


def kind_weight(kind: ReflectionKind) -> int:
    return _KIND_WEIGHTS[kind]


def kind_name(kind: ReflectionKind) -> str:
    """Return the camelCase name of a kind (``TYPE_ALIAS`` -> ``typeAlias``)."""
    lowered = kind.name.lower()
    return re.sub(r"_([a-z])", lambda match: match.group(1).upper(), lowered)


__all__ = [
    "CALLABLE_KINDS",
    "ReflectionKind",
    "SIGNATURE_KINDS",
    "kind_label",
    "kind_name",
    "kind_weight",
    "parse_kind",
]
