"""Small mappers from raw reflection fragments to docgraph records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Set

from ..errors import MalformedReflectionError
from ..kinds import ReflectionKind, kind_label, parse_kind
from ..models import (
    DocGroup,
    DocInheritance,
    DocParameter,
    DocSignature,
    DocSource,
    DocTypeParameter,
    InlineType,
)
from .context import TransformContext
from .flags import map_flags
from .references import map_reference
from .shapes import as_list
from .signature_renderer import format_rendered_signature, render_signature_view
from .type_renderer import render_inline_type

_HASH_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class SignatureOwner:
    id: int
    name: str
    slug: str


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def map_sources(raw: Any) -> List[DocSource]:
    if not isinstance(raw, list):
        return []
    sources: List[DocSource] = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("fileName"), str):
            continue
        url = item.get("url")
        sources.append(
            DocSource(
                file_name=item["fileName"],
                line=_as_int(item.get("line")) or 0,
                character=_as_int(item.get("character")) or 0,
                url=url if isinstance(url, str) and url else None,
            )
        )
    return sources


def primary_url_from_sources(sources: List[DocSource]) -> Optional[str]:
    for source in sources:
        if source.url:
            return source.url
    return None


def map_type_parameters(context: TransformContext, raw: Any) -> List[DocTypeParameter]:
    if not isinstance(raw, list):
        return []
    mapped: List[DocTypeParameter] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        flags = item.get("flags") if isinstance(item.get("flags"), dict) else {}
        variance = item.get("varianceModifier")
        mapped.append(
            DocTypeParameter(
                id=_as_int(item.get("id")) or 0,
                name=str(item.get("name", "")),
                constraint=item.get("type") if isinstance(item.get("type"), dict) else None,
                default=item.get("default") if isinstance(item.get("default"), dict) else None,
                is_optional=bool(flags.get("isOptional")),
                variance=variance if isinstance(variance, str) else None,
                comment=context.comments.to_doc_comment(item.get("comment")),
            )
        )
    return mapped


def map_signature_parameters(context: TransformContext, raw: Any) -> List[DocParameter]:
    if not isinstance(raw, list):
        return []
    mapped: List[DocParameter] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        raw_kind = item.get("kind", int(ReflectionKind.PARAMETER))
        default = item.get("defaultValue")
        mapped.append(
            DocParameter(
                id=_as_int(item.get("id")) or 0,
                name=str(item.get("name", "")),
                kind=parse_kind(raw_kind),
                flags=map_flags(item, ReflectionKind.PARAMETER),
                type=item.get("type") if isinstance(item.get("type"), dict) else None,
                default_value=default if isinstance(default, str) and default else None,
                comment=context.comments.to_doc_comment(item.get("comment")),
            )
        )
    return mapped


def map_groups(context: TransformContext, raw: Any) -> List[DocGroup]:
    """Groups hold ordered child keys only; the children list owns the nodes."""
    if not isinstance(raw, list):
        return []
    groups: List[DocGroup] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title", ""))
        keys = []
        for child in as_list(item.get("children"), f"children of group '{title}'"):
            child_id = _as_int(child.get("id") if isinstance(child, dict) else child)
            if child_id is not None:
                keys.append(context.key_for(child_id))
        raw_kind = _as_int(item.get("kind"))
        groups.append(
            DocGroup(
                title=title,
                kind=parse_kind(raw_kind) if raw_kind is not None else None,
                child_keys=keys,
            )
        )
    return groups


def _render_all(context: TransformContext, raw: Any) -> List[InlineType]:
    rendered = []
    for item in raw if isinstance(raw, list) else []:
        inline = render_inline_type(context, item)
        if inline is not None:
            rendered.append(inline)
    return rendered


def map_inheritance(context: TransformContext, raw: dict) -> DocInheritance:
    return DocInheritance(
        extends=_render_all(context, raw.get("extendedTypes")),
        implements=_render_all(context, raw.get("implementedTypes")),
        extended_by=_render_all(context, raw.get("extendedBy")),
        implemented_by=_render_all(context, raw.get("implementedBy")),
    )


def _djb2_base36(text: str) -> str:
    value = 5381
    for char in text:
        value = ((value << 5) + value + ord(char)) & 0xFFFFFFFF
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_HASH_ALPHABET[remainder])
    return "".join(reversed(digits))


def _type_token(raw: Any) -> str:
    if isinstance(raw, dict) and isinstance(raw.get("type"), str):
        return raw["type"]
    return "t"


def signature_fragment(raw: dict, name: str, index: int, issued: Set[str]) -> str:
    """Stable anchor fragment for one signature of a node.

    The hash covers the name plus the parameter and return type shapes; a
    clash within the same node falls back to the overload index.
    """
    parameters = as_list(raw.get("parameters"), f"parameters of '{name}'")
    params = ",".join(_type_token(param.get("type")) for param in parameters if isinstance(param, dict))
    shape = f"{name}({params}):{_type_token(raw.get('type'))}"
    fragment = f"{name}-{_djb2_base36(shape)}"
    if fragment in issued:
        fragment = f"{fragment}-o{index}"
    issued.add(fragment)
    return fragment


def map_signature(
    context: TransformContext,
    raw: Any,
    owner: SignatureOwner,
    index: int,
    issued: Set[str],
) -> DocSignature:
    if not isinstance(raw, dict):
        raise MalformedReflectionError(f"Signature {index} of '{owner.name}' is not an object")
    kind = parse_kind(raw.get("kind"))
    raw_name = raw.get("name")
    name = raw_name if isinstance(raw_name, str) and raw_name else owner.name
    signature_id = _as_int(raw.get("id"))
    comment = context.comments.to_doc_comment(raw.get("comment"))

    returns = comment.tags("@returns") if comment is not None else []
    throws = comment.tags("@throws") if comment is not None else []
    sources = map_sources(raw.get("sources"))
    fragment = signature_fragment(raw, name, index, issued)

    signature = DocSignature(
        id=signature_id if signature_id is not None else owner.id * 1000 + index,
        name=name,
        kind=kind,
        kind_label=kind_label(kind),
        fragment=fragment,
        anchor=f"{owner.slug}#{fragment}",
        overload_index=index,
        type=raw.get("type") if isinstance(raw.get("type"), dict) else None,
        parameters=map_signature_parameters(context, raw.get("parameters")),
        type_parameters=map_type_parameters(context, raw.get("typeParameters") or raw.get("typeParameter")),
        comment=comment,
        returns_comment=returns[0] if returns else None,
        throws=throws,
        sources=sources,
        source_url=primary_url_from_sources(sources),
        overwrites=map_reference(context, raw.get("overwrites")),
        inherited_from=map_reference(context, raw.get("inheritedFrom")),
        implementation_of=map_reference(context, raw.get("implementationOf")),
    )
    signature.render = render_signature_view(context, signature)
    signature.render_text = format_rendered_signature(signature.render)
    return signature


__all__ = [
    "SignatureOwner",
    "map_groups",
    "map_inheritance",
    "map_signature",
    "map_signature_parameters",
    "map_sources",
    "map_type_parameters",
    "primary_url_from_sources",
    "signature_fragment",
]
