"""Tests for docgraph.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docgraph.config import DOCS_DIR_ENV, ConfigError, DocGraphConfig, SearchConfig, ServiceConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DocGraphConfig)
    assert config.root == tmp_path.resolve()
    assert config.generated_dir is None
    assert config.home_package is None
    assert config.read_workers == 4
    assert config.search == SearchConfig()
    assert config.service == ServiceConfig()
    assert config.resolved_manifest_path() == tmp_path.resolve() / "manifest.json"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".docgraph.yml"
    config_file.write_text(
        """
generated_dir: "docs/generated"
workspace_root: "."
home_package: "@scope/core"
read_workers: 2
search:
  summary_budget: 80
  max_results: 10
  min_query_length: 2
service:
  host: "0.0.0.0"
  port: 9000
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    root = tmp_path.resolve()
    assert config.generated_dir == root / "docs" / "generated"
    assert config.workspace_root == root
    assert config.home_package == "@scope/core"
    assert config.read_workers == 2
    assert config.search == SearchConfig(summary_budget=80, max_results=10, min_query_length=2)
    assert config.service == ServiceConfig(host="0.0.0.0", port=9000)
    assert config.resolved_manifest_path() == root / "docs" / "generated" / "manifest.json"


def test_explicit_manifest_path_wins(tmp_path: Path) -> None:
    (tmp_path / ".docgraph.yml").write_text("manifest: out/run.json\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.resolved_manifest_path() == tmp_path.resolve() / "out" / "run.json"


def test_docs_dir_environment_overrides_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".docgraph.yml").write_text("generated_dir: docs\n", encoding="utf-8")
    override = tmp_path / "elsewhere"
    monkeypatch.setenv(DOCS_DIR_ENV, str(override))

    config = load_config(tmp_path)

    assert config.resolved_generated_dir() == override
    assert config.resolved_manifest_path() == override / "manifest.json"


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".docgraph.yml").write_text("search: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".docgraph.yml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_positive_read_workers_rejected(tmp_path: Path) -> None:
    (tmp_path / ".docgraph.yml").write_text("read_workers: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
