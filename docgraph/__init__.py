"""Cross-referenced, searchable documentation graph built from reflection output."""

from .engine import DocsEngine, EngineOptions
from .errors import DocGraphError, InputError, MalformedReflectionError, PackageTransformError

__version__ = "0.1.0"

__all__ = [
    "DocGraphError",
    "DocsEngine",
    "EngineOptions",
    "InputError",
    "MalformedReflectionError",
    "PackageTransformError",
    "__version__",
]
