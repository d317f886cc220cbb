"""Exception taxonomy for docgraph builds."""

from __future__ import annotations


class DocGraphError(RuntimeError):
    """Base class for errors raised while building the documentation graph."""


class InputError(DocGraphError):
    """Raised when the run summary (manifest) is missing or cannot be parsed."""


class PackageTransformError(DocGraphError):
    """Raised when one package cannot be loaded or transformed.

    The collection builder catches this per package, records a warning and
    keeps building the remaining packages.
    """

    def __init__(self, package: str, message: str) -> None:
        super().__init__(f"{package}: {message}")
        self.package = package
        self.reason = message


class MalformedReflectionError(ValueError):
    """Raised by the transformer when a reflection node is structurally invalid."""


class UnknownKindError(MalformedReflectionError):
    """Raised when a reflection carries a kind code outside the known table."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown reflection kind: {value!r}")
        self.value = value


__all__ = [
    "DocGraphError",
    "InputError",
    "MalformedReflectionError",
    "PackageTransformError",
    "UnknownKindError",
]
