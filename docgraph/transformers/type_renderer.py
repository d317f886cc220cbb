"""Rendering of raw type descriptions into link-aware part sequences."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

from ..models import DocReference, InlineType, SigPart
from .context import TransformContext
from .references import map_reference
from .shapes import as_list

Parts = List[SigPart]

# Types that need parentheses when used as an array element.
_COMPOSITE_TYPES = {"union", "intersection", "conditional", "reflection", "typeOperator", "inferred"}


def text_part(text: str) -> SigPart:
    return SigPart("text", text)


def punct_part(text: str) -> SigPart:
    return SigPart("punct", text)


def space_part() -> SigPart:
    return SigPart("space", " ")


def ref_part(text: str, ref: Optional[DocReference]) -> SigPart:
    if ref is None:
        return text_part(text)
    return SigPart("ref", text, ref)


def sig_parts_to_text(parts: List[SigPart]) -> str:
    """Flatten parts to plain text, collapsing runs of whitespace parts."""
    chunks: List[str] = []
    for part in parts:
        if part.kind == "space":
            if chunks and not chunks[-1].endswith(" "):
                chunks.append(" ")
            continue
        chunks.append(part.text)
    return "".join(chunks).strip()


def inline_type_to_text(inline: Optional[InlineType]) -> str:
    return sig_parts_to_text(inline.parts) if inline is not None else ""


def render_inline_type(context: TransformContext, raw: Any) -> Optional[InlineType]:
    if not isinstance(raw, dict):
        return None
    parts = render_parts(context, raw)
    return InlineType(parts) if parts else None


def render_parts(context: TransformContext, raw: Any) -> Parts:
    if not isinstance(raw, dict):
        return []
    renderer = _RENDERERS.get(str(raw.get("type")))
    if renderer is None:
        return _render_unknown(context, raw)
    return renderer(context, raw)


def _joined(context: TransformContext, types: Any, separator: Parts) -> Parts:
    parts: Parts = []
    for item in types if isinstance(types, list) else []:
        rendered = render_parts(context, item)
        if not rendered:
            continue
        if parts:
            parts.extend(separator)
        parts.extend(rendered)
    return parts


def _type_arguments(context: TransformContext, raw: dict) -> Parts:
    arguments = raw.get("typeArguments")
    if not isinstance(arguments, list) or not arguments:
        return []
    return [
        punct_part("<"),
        *_joined(context, arguments, [punct_part(","), space_part()]),
        punct_part(">"),
    ]


def _render_intrinsic(context: TransformContext, raw: dict) -> Parts:
    return [text_part(str(raw.get("name", "unknown")))]


def _render_literal(context: TransformContext, raw: dict) -> Parts:
    value = raw.get("value")
    if value is None:
        return [text_part("null")]
    if isinstance(value, bool):
        return [text_part("true" if value else "false")]
    if isinstance(value, str):
        return [text_part(json.dumps(value))]
    if isinstance(value, dict):
        # bigint literals are serialized as {negative, value}
        sign = "-" if value.get("negative") else ""
        return [text_part(f"{sign}{value.get('value', '0')}n")]
    return [text_part(str(value))]


def _render_reference(context: TransformContext, raw: dict) -> Parts:
    name = str(raw.get("name") or "unknown")
    return [ref_part(name, map_reference(context, raw)), *_type_arguments(context, raw)]


def _render_array(context: TransformContext, raw: dict) -> Parts:
    element = raw.get("elementType")
    inner = render_parts(context, element)
    if isinstance(element, dict) and element.get("type") in _COMPOSITE_TYPES:
        inner = [punct_part("("), *inner, punct_part(")")]
    return [*inner, punct_part("[]")]


def _render_union(context: TransformContext, raw: dict) -> Parts:
    return _joined(context, raw.get("types"), [space_part(), punct_part("|"), space_part()])


def _render_intersection(context: TransformContext, raw: dict) -> Parts:
    return _joined(context, raw.get("types"), [space_part(), punct_part("&"), space_part()])


def _render_tuple(context: TransformContext, raw: dict) -> Parts:
    return [
        punct_part("["),
        *_joined(context, raw.get("elements"), [punct_part(","), space_part()]),
        punct_part("]"),
    ]


def _render_named_member(context: TransformContext, raw: dict) -> Parts:
    marker = "?:" if raw.get("isOptional") else ":"
    return [
        text_part(str(raw.get("name", ""))),
        punct_part(marker),
        space_part(),
        *render_parts(context, raw.get("element")),
    ]


def _render_conditional(context: TransformContext, raw: dict) -> Parts:
    return [
        *render_parts(context, raw.get("checkType")),
        space_part(),
        text_part("extends"),
        space_part(),
        *render_parts(context, raw.get("extendsType")),
        space_part(),
        punct_part("?"),
        space_part(),
        *render_parts(context, raw.get("trueType")),
        space_part(),
        punct_part(":"),
        space_part(),
        *render_parts(context, raw.get("falseType")),
    ]


def _render_template_literal(context: TransformContext, raw: dict) -> Parts:
    parts: Parts = [punct_part("`"), text_part(str(raw.get("head", "")))]
    for span in as_list(raw.get("tail"), "template literal tail"):
        if not isinstance(span, list) or len(span) != 2:
            continue
        parts.extend([punct_part("${"), *render_parts(context, span[0]), punct_part("}")])
        if span[1]:
            parts.append(text_part(str(span[1])))
    parts.append(punct_part("`"))
    return parts


def _render_reflection(context: TransformContext, raw: dict) -> Parts:
    declaration = raw.get("declaration")
    if not isinstance(declaration, dict):
        return [punct_part("{}")]

    signatures = declaration.get("signatures")
    if isinstance(signatures, list) and signatures and not declaration.get("children"):
        shapes: Parts = []
        for signature in signatures:
            shape = render_function_shape(context, signature)
            if not shape:
                continue
            if shapes:
                shapes.extend([space_part(), punct_part("|"), space_part()])
            shapes.extend(shape)
        return shapes

    members: List[Parts] = []
    for child in as_list(declaration.get("children"), "type literal children"):
        if isinstance(child, dict):
            members.append(_render_object_member(context, child))
    index_signatures = as_list(declaration.get("indexSignatures"), "index signatures")
    if isinstance(declaration.get("indexSignature"), dict):
        index_signatures = [*index_signatures, declaration["indexSignature"]]
    for signature in index_signatures:
        if isinstance(signature, dict):
            members.append(_render_index_signature(context, signature))

    if not members:
        return [punct_part("{}")]
    parts: Parts = [punct_part("{"), space_part()]
    for index, member in enumerate(members):
        if index:
            parts.extend([punct_part(";"), space_part()])
        parts.extend(member)
    parts.extend([space_part(), punct_part("}")])
    return parts


def _render_object_member(context: TransformContext, child: dict) -> Parts:
    flags = child.get("flags") if isinstance(child.get("flags"), dict) else {}
    name: Parts = []
    if flags.get("isReadonly"):
        name.extend([text_part("readonly"), space_part()])
    name.append(text_part(str(child.get("name", ""))))
    if flags.get("isOptional"):
        name.append(punct_part("?"))

    signatures = child.get("signatures")
    if isinstance(signatures, list) and signatures and child.get("type") is None:
        return [*name, punct_part(":"), space_part(), *render_function_shape(context, signatures[0])]
    return [*name, punct_part(":"), space_part(), *(render_parts(context, child.get("type")) or [text_part("any")])]


def _render_index_signature(context: TransformContext, signature: dict) -> Parts:
    parameters = as_list(signature.get("parameters"), "index signature parameters")
    key: Parts = []
    if parameters and isinstance(parameters[0], dict):
        key = [
            text_part(str(parameters[0].get("name", "key"))),
            punct_part(":"),
            space_part(),
            *render_parts(context, parameters[0].get("type")),
        ]
    return [
        punct_part("["),
        *key,
        punct_part("]"),
        punct_part(":"),
        space_part(),
        *render_parts(context, signature.get("type")),
    ]


def render_function_shape(context: TransformContext, signature: Any) -> Parts:
    """Render ``(a?: T, ...rest: U[]) => R`` from a raw signature."""
    if not isinstance(signature, dict):
        return []
    parts: Parts = []
    type_parameters = as_list(signature.get("typeParameters"), "signature type parameters")
    if type_parameters:
        names = [str(param.get("name", "")) for param in type_parameters if isinstance(param, dict)]
        parts.append(punct_part(f"<{', '.join(names)}>"))
    parts.append(punct_part("("))
    emitted = False
    for parameter in as_list(signature.get("parameters"), "signature parameters"):
        if not isinstance(parameter, dict):
            continue
        if emitted:
            parts.extend([punct_part(","), space_part()])
        flags = parameter.get("flags") if isinstance(parameter.get("flags"), dict) else {}
        if flags.get("isRest"):
            parts.append(punct_part("..."))
        parts.append(text_part(str(parameter.get("name", ""))))
        if flags.get("isOptional"):
            parts.append(punct_part("?"))
        parameter_type = render_parts(context, parameter.get("type"))
        if parameter_type:
            parts.extend([punct_part(":"), space_part(), *parameter_type])
        emitted = True
    parts.extend([punct_part(")"), space_part(), punct_part("=>"), space_part()])
    parts.extend(render_parts(context, signature.get("type")) or [text_part("void")])
    return parts


def _render_type_operator(context: TransformContext, raw: dict) -> Parts:
    return [text_part(str(raw.get("operator", ""))), space_part(), *render_parts(context, raw.get("target"))]


def _render_indexed_access(context: TransformContext, raw: dict) -> Parts:
    return [
        *render_parts(context, raw.get("objectType")),
        punct_part("["),
        *render_parts(context, raw.get("indexType")),
        punct_part("]"),
    ]


def _render_query(context: TransformContext, raw: dict) -> Parts:
    return [text_part("typeof"), space_part(), *render_parts(context, raw.get("queryType"))]


def _render_optional(context: TransformContext, raw: dict) -> Parts:
    return [*render_parts(context, raw.get("elementType")), punct_part("?")]


def _render_rest(context: TransformContext, raw: dict) -> Parts:
    return [punct_part("..."), *render_parts(context, raw.get("elementType"))]


def _render_predicate(context: TransformContext, raw: dict) -> Parts:
    parts: Parts = []
    if raw.get("asserts"):
        parts.extend([text_part("asserts"), space_part()])
    parts.append(text_part(str(raw.get("name", "this"))))
    target = render_parts(context, raw.get("targetType"))
    if target:
        parts.extend([space_part(), text_part("is"), space_part(), *target])
    return parts


def _render_mapped(context: TransformContext, raw: dict) -> Parts:
    parts: Parts = [punct_part("{"), space_part()]
    readonly = raw.get("readonlyModifier")
    if readonly == "+":
        parts.extend([text_part("readonly"), space_part()])
    elif readonly == "-":
        parts.extend([punct_part("-"), text_part("readonly"), space_part()])
    parts.extend(
        [
            punct_part("["),
            text_part(str(raw.get("parameter", "K"))),
            space_part(),
            text_part("in"),
            space_part(),
            *render_parts(context, raw.get("parameterType")),
        ]
    )
    if isinstance(raw.get("nameType"), dict):
        parts.extend([space_part(), text_part("as"), space_part(), *render_parts(context, raw["nameType"])])
    parts.append(punct_part("]"))
    optional = raw.get("optionalModifier")
    if optional == "+":
        parts.append(punct_part("?"))
    elif optional == "-":
        parts.append(punct_part("-?"))
    parts.extend(
        [punct_part(":"), space_part(), *render_parts(context, raw.get("templateType")), space_part(), punct_part("}")]
    )
    return parts


def _render_inferred(context: TransformContext, raw: dict) -> Parts:
    parts: Parts = [text_part("infer"), space_part(), text_part(str(raw.get("name", "")))]
    constraint = render_parts(context, raw.get("constraint"))
    if constraint:
        parts.extend([space_part(), text_part("extends"), space_part(), *constraint])
    return parts


def _render_unknown(context: TransformContext, raw: dict) -> Parts:
    name = raw.get("name")
    if isinstance(name, str) and name:
        return [text_part(name)]
    return [text_part(str(raw.get("type") or "unknown"))]


_RENDERERS: Dict[str, Callable[[TransformContext, dict], Parts]] = {
    "intrinsic": _render_intrinsic,
    "literal": _render_literal,
    "reference": _render_reference,
    "array": _render_array,
    "union": _render_union,
    "intersection": _render_intersection,
    "tuple": _render_tuple,
    "namedTupleMember": _render_named_member,
    "conditional": _render_conditional,
    "templateLiteral": _render_template_literal,
    "reflection": _render_reflection,
    "typeOperator": _render_type_operator,
    "indexedAccess": _render_indexed_access,
    "query": _render_query,
    "optional": _render_optional,
    "rest": _render_rest,
    "predicate": _render_predicate,
    "mapped": _render_mapped,
    "inferred": _render_inferred,
    "unknown": _render_unknown,
}


__all__ = [
    "inline_type_to_text",
    "punct_part",
    "ref_part",
    "render_function_shape",
    "render_inline_type",
    "render_parts",
    "sig_parts_to_text",
    "space_part",
    "text_part",
]
