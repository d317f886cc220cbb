"""Package and collection builders."""

from .collection_builder import BuildOptions, BuildResult, build_collection
from .package_builder import build_indexes, build_package_model
from .source_fixer import propagate_source_information

__all__ = [
    "BuildOptions",
    "BuildResult",
    "build_collection",
    "build_indexes",
    "build_package_model",
    "propagate_source_information",
]
