"""Recursive walk turning one raw reflection tree into a ``DocNode`` tree."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Set

from ..errors import MalformedReflectionError
from ..identity import GlobalKey
from ..kinds import ReflectionKind, kind_label, parse_kind
from ..logging import get_logger
from ..models import DocNode, DocReference, DocSignature
from .context import TransformContext, register_node
from .flags import map_flags
from .mappers import (
    SignatureOwner,
    map_groups,
    map_inheritance,
    map_signature,
    map_sources,
    map_type_parameters,
    primary_url_from_sources,
)
from .references import map_reference
from .shapes import as_list
from .signature_renderer import format_rendered_declaration_header, render_declaration_header
from .type_renderer import render_inline_type

ANONYMOUS = "anonymous"

logger = get_logger("transform")


def _path_for(raw: dict, kind: ReflectionKind, parent_path: Sequence[str]) -> List[str]:
    if kind is ReflectionKind.PROJECT:
        return []
    name = raw.get("name")
    label = name if isinstance(name, str) and name else ANONYMOUS
    return [*parent_path, label]


class NodeTransformer:
    """Builds the node tree for one package, registering nodes as it goes."""

    def __init__(self, context: TransformContext) -> None:
        self.context = context

    def transform(self, project: Any) -> DocNode:
        if not isinstance(project, dict):
            raise MalformedReflectionError("Reflection tree root must be an object")
        root = self._visit(project, [])
        logger.debug("Transformed %s: %d nodes", self.context.package_name, len(self.context.nodes))
        return root

    def _visit(self, raw: Any, parent_path: Sequence[str]) -> DocNode:
        if not isinstance(raw, dict):
            raise MalformedReflectionError(f"Child of '{'.'.join(parent_path) or '<root>'}' is not an object")
        node_id = raw.get("id")
        if isinstance(node_id, bool) or not isinstance(node_id, int):
            raise MalformedReflectionError(
                f"Reflection '{raw.get('name', '?')}' under '{'.'.join(parent_path) or '<root>'}' has no numeric id"
            )
        kind = parse_kind(raw.get("kind"))

        node = self._create_node(raw, node_id, kind, parent_path)
        register_node(self.context, node)

        if kind is not ReflectionKind.PROJECT:
            self._apply_declaration_details(node, raw)
            self._populate_signatures(node, raw)

        for child in as_list(raw.get("children"), f"children of '{node.qualified_name or node.name}'"):
            node.children.append(self._visit(child, node.path))
        node.groups = map_groups(self.context, raw.get("groups"))
        return node

    def _create_node(
        self, raw: dict, node_id: int, kind: ReflectionKind, parent_path: Sequence[str]
    ) -> DocNode:
        context = self.context
        path = _path_for(raw, kind, parent_path)
        name = raw.get("name")
        comment = context.comments.to_doc_comment(raw.get("comment"))
        signature_comments = [
            context.comments.to_doc_comment(sig.get("comment"))
            for sig in as_list(raw.get("signatures"), f"signatures of '{name}'")
            if isinstance(sig, dict)
        ]
        return DocNode(
            id=node_id,
            key=GlobalKey(context.package_name, node_id),
            package_name=context.package_name,
            package_version=context.package_version,
            name=name if isinstance(name, str) and name else context.package_name,
            path=path,
            qualified_name=".".join(path),
            slug=context.slugger.slug(path),
            kind=kind,
            kind_label=kind_label(kind),
            flags=map_flags(raw, kind, comment, signature_comments),
            source_package=context.own_package(),
            comment=comment,
        )

    def _apply_declaration_details(self, node: DocNode, raw: dict) -> None:
        context = self.context
        raw_type = raw.get("type")
        if isinstance(raw_type, dict):
            node.type = raw_type
            node.type_render = render_inline_type(context, raw_type)

        node.type_parameters = map_type_parameters(context, raw.get("typeParameters") or raw.get("typeParameter"))
        node.sources = map_sources(raw.get("sources"))
        node.source_url = primary_url_from_sources(node.sources)
        node.inheritance = map_inheritance(context, raw)
        node.overwrites = map_reference(context, raw.get("overwrites"))
        node.inherited_from = map_reference(context, raw.get("inheritedFrom"))
        node.implementation_of = map_reference(context, raw.get("implementationOf"))
        node.default_value = _default_value(node.kind, raw)
        node.source_package = context.infer_source_package(
            [source.file_name for source in node.sources], _package_hint(raw)
        )

        if node.kind is ReflectionKind.REFERENCE:
            node.alias_of = _alias_target(context, node.name, raw.get("target"))

        node.header = render_declaration_header(
            context,
            node.name,
            kind=node.kind,
            flags=node.flags,
            type_params=node.type_parameters,
            inheritance=node.inheritance,
            declared_type=node.type_render,
        )
        node.header_text = format_rendered_declaration_header(node.header)

    def _populate_signatures(self, node: DocNode, raw: dict) -> None:
        collected: List[Any] = list(as_list(raw.get("signatures"), f"signatures of '{node.qualified_name}'"))
        for accessor in ("getSignature", "setSignature"):
            if isinstance(raw.get(accessor), dict):
                collected.append(raw[accessor])

        owner = SignatureOwner(node.id, node.name, node.slug)
        issued: Set[str] = set()
        signatures: List[DocSignature] = []
        for index, signature in enumerate(collected):
            signatures.append(map_signature(self.context, signature, owner, index, issued))
        node.signatures = signatures


def _default_value(kind: ReflectionKind, raw: dict) -> Optional[str]:
    value = raw.get("defaultValue")
    if isinstance(value, str) and value:
        return value
    raw_type = raw.get("type")
    # Enum members carry their value as a literal type.
    if kind is ReflectionKind.ENUM_MEMBER and isinstance(raw_type, dict) and raw_type.get("type") == "literal":
        literal = raw_type.get("value")
        if isinstance(literal, str):
            return f'"{literal}"'
        if isinstance(literal, (int, float)) and not isinstance(literal, bool):
            return str(literal)
    return None


def _package_hint(raw: dict) -> Optional[str]:
    if raw.get("variant") != "reference":
        return None
    package = raw.get("package") or raw.get("packageName")
    return package if isinstance(package, str) and package else None


def _alias_target(context: TransformContext, name: str, target: Any) -> Optional[DocReference]:
    if isinstance(target, bool) or not isinstance(target, int):
        return None
    return DocReference(name=name, target_key=context.key_for(target))


__all__ = ["ANONYMOUS", "NodeTransformer"]
