"""Signature and declaration-header views built on the type renderer."""

from __future__ import annotations

from typing import List, Optional

from ..kinds import ReflectionKind
from ..models import (
    DocFlags,
    DocInheritance,
    DocParameter,
    DocSignature,
    DocTypeParameter,
    InlineType,
    RenderedDeclarationHeader,
    RenderedParameter,
    RenderedSignature,
    RenderedTypeParameter,
)
from .context import TransformContext
from .type_renderer import inline_type_to_text, render_inline_type, sig_parts_to_text, text_part

_ACCESSOR_PREFIX = {
    ReflectionKind.GET_SIGNATURE: "get",
    ReflectionKind.SET_SIGNATURE: "set",
}

_DECLARATION_KEYWORDS = {
    ReflectionKind.CLASS: "class",
    ReflectionKind.INTERFACE: "interface",
    ReflectionKind.ENUM: "enum",
    ReflectionKind.TYPE_ALIAS: "type",
    ReflectionKind.FUNCTION: "function",
    ReflectionKind.NAMESPACE: "namespace",
    ReflectionKind.MODULE: "module",
}


def render_parameter(context: TransformContext, parameter: DocParameter) -> RenderedParameter:
    return RenderedParameter(
        name=parameter.name,
        optional=parameter.flags.is_optional,
        rest=parameter.flags.is_rest,
        type=render_inline_type(context, parameter.type),
        default_value=parameter.default_value,
    )


def render_type_parameter(context: TransformContext, parameter: DocTypeParameter) -> RenderedTypeParameter:
    return RenderedTypeParameter(
        name=parameter.name,
        constraint=render_inline_type(context, parameter.constraint),
        default=render_inline_type(context, parameter.default),
    )


def render_signature_view(context: TransformContext, signature: DocSignature) -> RenderedSignature:
    accessor = _ACCESSOR_PREFIX.get(signature.kind)
    return_type = None
    if accessor != "set":
        return_type = render_inline_type(context, signature.type)
    return RenderedSignature(
        name=[text_part(signature.name)],
        parameters=[render_parameter(context, parameter) for parameter in signature.parameters],
        type_params=[render_type_parameter(context, param) for param in signature.type_parameters],
        return_type=return_type,
        accessor=accessor,
    )


def _format_type_params(params: List[RenderedTypeParameter]) -> str:
    if not params:
        return ""
    rendered = []
    for param in params:
        text = param.name
        if param.constraint is not None:
            text += f" extends {inline_type_to_text(param.constraint)}"
        if param.default is not None:
            text += f" = {inline_type_to_text(param.default)}"
        rendered.append(text)
    return f"<{', '.join(rendered)}>"


def format_rendered_signature(render: RenderedSignature) -> str:
    """Plain-text form such as ``get value(): string`` or ``map<T>(fn?: F): T[]``."""
    prefix = f"{render.accessor} " if render.accessor else ""
    parameters = []
    for param in render.parameters:
        rest = "..." if param.rest else ""
        optional = "?" if param.optional else ""
        type_text = f": {inline_type_to_text(param.type)}" if param.type is not None else ""
        default = f" = {param.default_value}" if param.default_value else ""
        parameters.append(f"{rest}{param.name}{optional}{type_text}{default}")
    return_type = f": {inline_type_to_text(render.return_type)}" if render.return_type is not None else ""
    name = sig_parts_to_text(render.name)
    return f"{prefix}{name}{_format_type_params(render.type_params)}({', '.join(parameters)}){return_type}".strip()


def declaration_keyword(kind: ReflectionKind, flags: DocFlags) -> Optional[str]:
    if kind is ReflectionKind.VARIABLE:
        return "const" if flags.is_const else "let"
    if kind is ReflectionKind.ENUM and flags.is_const:
        return "const enum"
    return _DECLARATION_KEYWORDS.get(kind)


def declaration_modifiers(flags: DocFlags) -> List[str]:
    modifiers: List[str] = []
    if flags.access in ("private", "protected"):
        modifiers.append(flags.access)
    if flags.is_static:
        modifiers.append("static")
    if flags.is_abstract:
        modifiers.append("abstract")
    if flags.is_readonly:
        modifiers.append("readonly")
    return modifiers


def render_declaration_header(
    context: TransformContext,
    name: str,
    *,
    kind: ReflectionKind,
    flags: DocFlags,
    type_params: List[DocTypeParameter],
    inheritance: DocInheritance,
    declared_type: Optional[InlineType] = None,
) -> RenderedDeclarationHeader:
    header = RenderedDeclarationHeader(
        name=name,
        keyword=declaration_keyword(kind, flags),
        modifiers=declaration_modifiers(flags),
        type_params=[render_type_parameter(context, param) for param in type_params],
        extends=list(inheritance.extends),
        implements=list(inheritance.implements),
    )
    if kind is ReflectionKind.TYPE_ALIAS:
        header.value = declared_type
    elif kind in (ReflectionKind.VARIABLE, ReflectionKind.PROPERTY, ReflectionKind.ENUM_MEMBER):
        header.type = declared_type
    return header


def format_rendered_declaration_header(header: RenderedDeclarationHeader) -> str:
    """e.g. ``abstract class Foo<T extends X> extends Base implements I``."""
    words = [*header.modifiers]
    if header.keyword:
        words.append(header.keyword)
    words.append(f"{header.name}{_format_type_params(header.type_params)}")
    text = " ".join(words)
    if header.extends:
        text += " extends " + ", ".join(inline_type_to_text(item) for item in header.extends)
    if header.implements:
        text += " implements " + ", ".join(inline_type_to_text(item) for item in header.implements)
    if header.type is not None:
        text += f": {inline_type_to_text(header.type)}"
    if header.value is not None:
        text += f" = {inline_type_to_text(header.value)}"
    return text


__all__ = [
    "declaration_keyword",
    "format_rendered_declaration_header",
    "format_rendered_signature",
    "render_declaration_header",
    "render_parameter",
    "render_signature_view",
    "render_type_parameter",
]
