"""Transformation of raw reflection trees into docgraph nodes."""

from .comments import CommentTransformer
from .context import TransformContext, compute_aliases, create_transform_context, register_node
from .node_transformer import NodeTransformer
from .references import map_reference
from .signature_renderer import (
    format_rendered_declaration_header,
    format_rendered_signature,
    render_declaration_header,
    render_signature_view,
)
from .type_renderer import render_inline_type, sig_parts_to_text

__all__ = [
    "CommentTransformer",
    "NodeTransformer",
    "TransformContext",
    "compute_aliases",
    "create_transform_context",
    "format_rendered_declaration_header",
    "format_rendered_signature",
    "map_reference",
    "register_node",
    "render_declaration_header",
    "render_inline_type",
    "render_signature_view",
    "sig_parts_to_text",
]
