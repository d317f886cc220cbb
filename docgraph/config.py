"""Configuration loading for docgraph (.docgraph.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".docgraph.yml"
MANIFEST_FILENAME = "manifest.json"
DOCS_DIR_ENV = "DOCGRAPH_DOCS_DIR"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SearchConfig:
    """Search index and query settings."""

    summary_budget: int = 200
    max_results: int = 24
    min_query_length: int = 3


@dataclass
class ServiceConfig:
    """Bind address for service mode."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class DocGraphConfig:
    """Represents the settings defined in .docgraph.yml."""

    root: Path
    generated_dir: Optional[Path] = None
    manifest_path: Optional[Path] = None
    workspace_root: Optional[Path] = None
    home_package: Optional[str] = None
    read_workers: int = 4
    search: SearchConfig = field(default_factory=SearchConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    def resolved_generated_dir(self) -> Path:
        """Directory holding the run summary; ``DOCGRAPH_DOCS_DIR`` wins when set."""
        override = os.environ.get(DOCS_DIR_ENV, "").strip()
        if override:
            return _resolve_against(Path.cwd(), override)
        return self.generated_dir or self.root

    def resolved_manifest_path(self) -> Path:
        if self.manifest_path is not None:
            return self.manifest_path
        return self.resolved_generated_dir() / MANIFEST_FILENAME


def load_config(config_path: Path) -> DocGraphConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocGraphConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DocGraphConfig(root=root)

    generated = _as_str(data.get("generated_dir"))
    if generated:
        config.generated_dir = _resolve_against(root, generated)
    manifest = _as_str(data.get("manifest"))
    if manifest:
        config.manifest_path = _resolve_against(root, manifest)
    workspace = _as_str(data.get("workspace_root"))
    if workspace:
        config.workspace_root = _resolve_against(root, workspace)

    config.home_package = _as_str(data.get("home_package"))
    workers = _as_int(data.get("read_workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("read_workers must be a positive integer")
        config.read_workers = workers

    search_data = _as_dict(data.get("search"))
    if search_data:
        defaults = SearchConfig()
        config.search = SearchConfig(
            summary_budget=_pick_int(search_data.get("summary_budget"), defaults.summary_budget),
            max_results=_pick_int(search_data.get("max_results"), defaults.max_results),
            min_query_length=_pick_int(search_data.get("min_query_length"), defaults.min_query_length),
        )

    service_data = _as_dict(data.get("service"))
    if service_data:
        defaults_service = ServiceConfig()
        config.service = ServiceConfig(
            host=_as_str(service_data.get("host")) or defaults_service.host,
            port=_pick_int(service_data.get("port"), defaults_service.port),
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_against(base: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return (base / candidate).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) and str(value).strip() else None


def _pick_int(value: Any, default: int) -> int:
    parsed = _as_int(value)
    return default if parsed is None else parsed


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DOCS_DIR_ENV",
    "DocGraphConfig",
    "MANIFEST_FILENAME",
    "SearchConfig",
    "ServiceConfig",
    "load_config",
]
