from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from docgraph.identity import IdentityRegistry
from docgraph.models import DocManifestPackage
from docgraph.transformers import TransformContext, create_transform_context
from tests._fixtures.reflection_builder import DocsWorkspace, ReflectionBuilder


@pytest.fixture(autouse=True)
def _reset_docgraph_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so caplog keeps seeing docgraph records."""
    yield
    logger = logging.getLogger("docgraph")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def builder() -> ReflectionBuilder:
    """Provide a reflection builder with a fresh id counter."""
    return ReflectionBuilder()


@pytest.fixture
def docs_workspace(tmp_path: Path) -> DocsWorkspace:
    """Provide a generated-docs directory rooted at the pytest tmp_path."""
    return DocsWorkspace(tmp_path)


@pytest.fixture
def context() -> TransformContext:
    """Transform context for a standalone ``core`` package."""
    return create_transform_context(DocManifestPackage(name="core", version="1.0.0", succeeded=True), IdentityRegistry())
