"""Cross-package reference resolution."""

from .reference_resolver import ReferenceResolver, ResolutionStats, iter_node_references

__all__ = ["ReferenceResolver", "ResolutionStats", "iter_node_references"]
