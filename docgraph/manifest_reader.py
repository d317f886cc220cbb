"""Loading of the run summary and per-package reflection trees."""

from __future__ import annotations

import json
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .errors import InputError, PackageTransformError
from .logging import get_logger
from .models import DocManifest, DocManifestPackage, RepositoryInfo

PROJECT_FILENAME = "project.json"
_WORKSPACE_MARKER = "pnpm-workspace.yaml"
_PACKAGE_MARKER = "package.json"

logger = get_logger("manifest")


class ManifestReader:
    """Reads and normalizes the run summary written by the extractor."""

    def __init__(self, manifest_path: Path) -> None:
        self.manifest_path = Path(manifest_path)

    def read(self) -> DocManifest:
        try:
            raw = self.manifest_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputError(f"Cannot read run summary {self.manifest_path}: {exc}") from exc
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InputError(f"Run summary {self.manifest_path} is not valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise InputError(f"Run summary {self.manifest_path} must contain a JSON object")

        packages: List[DocManifestPackage] = []
        raw_packages = parsed.get("packages")
        if isinstance(raw_packages, list):
            for value in raw_packages:
                pkg = _normalize_package(value)
                if pkg is None:
                    logger.debug("Ignoring malformed package entry in run summary: %r", value)
                    continue
                packages.append(pkg)

        manifest = DocManifest(
            generated_at=_as_str(parsed.get("generatedAt")),
            tool=_as_str(parsed.get("tool")),
            typedoc_version=_as_str(parsed.get("typedocVersion")),
            output_dir=_as_str(parsed.get("outputDir")),
            packages=packages,
            repository=_parse_repository(parsed.get("repository")),
        )
        logger.debug("Run summary lists %d packages", len(packages))
        return manifest


def _normalize_package(value: Any) -> Optional[DocManifestPackage]:
    if not isinstance(value, dict):
        return None
    name = value.get("name")
    if not isinstance(name, str) or not name:
        return None

    entry_points = value.get("entryPoints")
    warnings = value.get("warnings")
    errors = value.get("errors")
    entries = [str(entry) for entry in entry_points if str(entry)] if isinstance(entry_points, list) else []
    warning_list = [str(item) for item in warnings] if isinstance(warnings, list) else []
    error_list = [str(item) for item in errors] if isinstance(errors, list) else []

    warning_count = value.get("warningCount")
    error_count = value.get("errorCount")
    output = value.get("output")

    return DocManifestPackage(
        name=name,
        version=_as_str(value.get("version")),
        entry_points=entries,
        output=output if isinstance(output, str) and output.strip() else None,
        warnings=warning_list,
        errors=error_list,
        warning_count=warning_count if isinstance(warning_count, int) else len(warning_list),
        error_count=error_count if isinstance(error_count, int) else len(error_list),
        succeeded=bool(value.get("succeeded")),
    )


def _parse_repository(value: Any) -> Optional[RepositoryInfo]:
    if not isinstance(value, dict):
        return None
    url = value.get("url")
    if not isinstance(url, str) or not url:
        return None
    branch = value.get("branch")
    commit = value.get("commit")
    return RepositoryInfo(
        url=url,
        branch=branch if isinstance(branch, str) and branch else None,
        commit=commit if isinstance(commit, str) and commit else None,
    )


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


# ----------------------------------------------------------------------
# Package file resolution


@dataclass
class PackageLocator:
    """Finds each package's reflection file relative to the known base directories."""

    manifest_dir: Path
    manifest_output_dir: str = ""
    generated_root: Optional[Path] = None
    workspace_root: Optional[Path] = None

    def base_candidates(self) -> List[Path]:
        ordered: List[Path] = []
        if self.generated_root is not None:
            ordered.append(self.generated_root)
        ordered.append(self.manifest_dir)
        output_base = self._manifest_output_base()
        if output_base is not None:
            ordered.append(output_base)
        if self.workspace_root is not None:
            ordered.append(self.workspace_root)
        return list(dict.fromkeys(ordered))

    def candidates(self, output: str) -> List[Path]:
        ordered: List[Path] = []
        output_path = Path(output)
        if output_path.is_absolute():
            ordered.append(output_path)
        if self.workspace_root is not None:
            ordered.append(self.workspace_root / output_path)
        ordered.append(self.manifest_dir / output_path)
        if self.generated_root is not None:
            ordered.append(self.generated_root / output_path)

        relative = self._relative_to_manifest_output(output)
        if relative is not None:
            ordered.append(self.manifest_dir / relative)
            if self.generated_root is not None:
                ordered.append(self.generated_root / relative)

        for base in self.base_candidates():
            ordered.append(base / output_path)
            ordered.append(base / output_path.name)

        normalized = [Path(os.path.normpath(candidate)) for candidate in ordered]
        return list(dict.fromkeys(normalized))

    def locate(self, package: DocManifestPackage) -> Path:
        """Return the reflection file for ``package`` or raise ``PackageTransformError``."""
        if not package.output:
            raise PackageTransformError(package.name, "run summary declares no reflection output")

        candidates = self.candidates(package.output.strip())
        for candidate in candidates:
            if candidate.is_file():
                return candidate
            fallback = candidate / PROJECT_FILENAME
            if fallback.is_file():
                return fallback

        tried = ", ".join(str(candidate) for candidate in candidates[:4])
        raise PackageTransformError(
            package.name, f"reflection output '{package.output}' not found (tried {tried})"
        )

    def _manifest_output_base(self) -> Optional[Path]:
        trimmed = self.manifest_output_dir.strip()
        if not trimmed:
            return None
        path = Path(trimmed)
        if path.is_absolute():
            return path
        base = self.workspace_root or self.manifest_dir
        return Path(os.path.normpath(base / path))

    def _relative_to_manifest_output(self, output: str) -> Optional[Path]:
        trimmed = self.manifest_output_dir.strip()
        if not trimmed:
            return None
        relative = os.path.relpath(output, trimmed)
        if not relative or relative.startswith("..") or os.path.isabs(relative):
            return None
        return Path(relative)


def find_workspace_root(start_dir: Path) -> Path:
    """Walk upward to the monorepo root, falling back to the outermost package dir."""
    origin = Path(start_dir).resolve()
    last_package_dir: Optional[Path] = None
    for cursor in (origin, *origin.parents):
        if (cursor / _WORKSPACE_MARKER).exists():
            return cursor
        if (cursor / _PACKAGE_MARKER).exists():
            last_package_dir = cursor
    return last_package_dir or origin


# ----------------------------------------------------------------------
# Reflection tree loading

LoadResult = Union[Dict[str, Any], PackageTransformError]


def load_reflection_tree(package: DocManifestPackage, locator: PackageLocator) -> Dict[str, Any]:
    """Read one package's reflection tree, raising ``PackageTransformError`` on failure."""
    path = locator.locate(package)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PackageTransformError(package.name, f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise PackageTransformError(package.name, f"{path.name} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise PackageTransformError(package.name, f"{path.name} must contain a JSON object")
    logger.debug("Loaded reflection tree for %s from %s", package.name, path)
    return payload


def load_reflection_trees(
    packages: Sequence[DocManifestPackage],
    locator: PackageLocator,
    *,
    max_workers: int = 4,
) -> List[LoadResult]:
    """Read every package's tree concurrently; results keep manifest order.

    Package-scoped failures are returned in place of the tree so the caller
    can skip that package and keep the rest.
    """

    def _load(package: DocManifestPackage) -> LoadResult:
        try:
            return load_reflection_tree(package, locator)
        except PackageTransformError as exc:
            return exc

    if not packages:
        return []
    workers = max(1, min(max_workers, len(packages)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="docgraph-read") as pool:
        return list(pool.map(_load, packages))


__all__ = [
    "ManifestReader",
    "PROJECT_FILENAME",
    "PackageLocator",
    "find_workspace_root",
    "load_reflection_tree",
    "load_reflection_trees",
]
