"""FastAPI application entrypoint for docgraph service mode."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import DocGraphConfig, load_config
from ..engine import DocsEngine
from ..errors import DocGraphError, InputError
from ..kinds import ReflectionKind, kind_name
from ..logging import get_logger
from ..models import DocNode, DocSearchEntry

DEFAULT_VERSION_SEGMENT = "latest"

# Display categories understood by the front end; anything else is a "page".
KIND_TO_RESULT: Dict[str, str] = {
    "class": "class",
    "interface": "interface",
    "enum": "enum",
    "enumMember": "enum",
    "typeAlias": "type",
    "typeParameter": "typeParameter",
    "function": "function",
    "method": "method",
    "constructor": "method",
    "callSignature": "function",
    "constructorSignature": "method",
    "getSignature": "property",
    "setSignature": "property",
    "accessor": "property",
    "property": "property",
    "variable": "variable",
    "parameter": "parameter",
}

logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str


class PackageSummary(BaseModel):
    name: str
    version: Optional[str] = None
    nodes: int
    entities: Dict[str, List[str]]


class PackageWarningModel(BaseModel):
    package: str
    message: str


class PackagesResponse(BaseModel):
    packages: List[PackageSummary]
    warnings: List[PackageWarningModel]


class SearchResult(BaseModel):
    id: str
    label: str
    path: str
    href: str
    kind: str
    description: Optional[str] = None


class SearchResponse(BaseModel):
    results: List[SearchResult]


class EntityResponse(BaseModel):
    package: str
    version: Optional[str] = None
    slug: str
    name: str
    qualified_name: str
    kind: str
    kind_label: str
    summary: Optional[str] = None
    header: str
    signatures: List[str]
    source_url: Optional[str] = None
    href: str


def result_kind(kind: ReflectionKind) -> str:
    return KIND_TO_RESULT.get(kind_name(kind), "page")


def package_base_path(package: str, version: Optional[str]) -> str:
    return f"/docs/packages/{quote(package, safe='')}/{quote(version or DEFAULT_VERSION_SEGMENT, safe='')}"


def entity_href(package: str, version: Optional[str], slug: str) -> str:
    encoded = "/".join(quote(segment, safe="") for segment in slug.split("/"))
    return f"{package_base_path(package, version)}/{encoded}"


def breadcrumb(entry: DocSearchEntry) -> str:
    """``pkg@version · qualified.name``, falling back to the slug."""
    base = f"{entry.package_name}@{entry.package_version}" if entry.package_version else entry.package_name
    if entry.qualified_name and entry.qualified_name != entry.name:
        return f"{base} · {entry.qualified_name}"
    return f"{base} · {entry.slug}"


def to_search_result(entry: DocSearchEntry) -> Optional[SearchResult]:
    if not entry.slug:
        return None
    return SearchResult(
        id=f"{entry.package_name}:{entry.slug}:{int(entry.kind)}",
        label=entry.name,
        path=breadcrumb(entry),
        href=entity_href(entry.package_name, entry.package_version, entry.slug),
        kind=result_kind(entry.kind),
        description=entry.summary or None,
    )


def to_entity_response(node: DocNode) -> EntityResponse:
    return EntityResponse(
        package=node.package_name,
        version=node.package_version,
        slug=node.slug,
        name=node.name,
        qualified_name=node.qualified_name,
        kind=result_kind(node.kind),
        kind_label=node.kind_label,
        summary=node.comment.summary if node.comment is not None and node.comment.summary else None,
        header=node.header_text,
        signatures=[signature.render_text for signature in node.signatures],
        source_url=node.source_url,
        href=entity_href(node.package_name, node.package_version, node.slug),
    )


def create_app(
    engine_factory: Optional[Callable[[], DocsEngine]] = None,
    *,
    config: Optional[DocGraphConfig] = None,
) -> FastAPI:
    """Create the FastAPI application exposing docgraph lookups and search."""
    settings = config or load_config(Path.cwd())
    factory = engine_factory or (lambda: DocsEngine.from_config(settings))
    search_settings = settings.search

    app = FastAPI(title="DocGraph Service", version="1.0.0")

    engine_lock = threading.Lock()
    engine_holder: Dict[str, DocsEngine] = {}

    def _build_engine() -> DocsEngine:
        # One engine per app; later requests reuse the frozen build.
        with engine_lock:
            engine = engine_holder.get("engine")
            if engine is None:
                engine = factory()
                engine_holder["engine"] = engine
                logger.info("Documentation engine ready with %d packages", len(engine.list_packages()))
            return engine

    async def get_engine() -> DocsEngine:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _build_engine)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/packages", response_model=PackagesResponse)
    async def packages(engine: DocsEngine = Depends(get_engine)) -> PackagesResponse:
        summaries = []
        for package in engine.collection.packages:
            summaries.append(
                PackageSummary(
                    name=package.name,
                    version=package.manifest.version or None,
                    nodes=len(package.nodes),
                    entities=package.directory.snapshot(),
                )
            )
        warnings = [PackageWarningModel(package=item.package, message=item.message) for item in engine.warnings()]
        return PackagesResponse(packages=summaries, warnings=warnings)

    @app.get("/search", response_model=SearchResponse)
    async def search(
        q: str = Query(default=""),
        pkg: Optional[str] = Query(default=None),
        engine: DocsEngine = Depends(get_engine),
    ) -> SearchResponse:
        query = q.strip()
        if len(query) < search_settings.min_query_length:
            return SearchResponse(results=[])
        package = engine.resolve_package_name(pkg) if pkg else None
        entries = engine.search(query, package=package, limit=search_settings.max_results)
        results = [result for result in map(to_search_result, entries) if result is not None]
        return SearchResponse(results=results)

    @app.get("/entity", response_model=EntityResponse)
    async def entity(
        pkg: str = Query(...),
        slug: str = Query(...),
        engine: DocsEngine = Depends(get_engine),
    ) -> EntityResponse:
        package = engine.resolve_package_name(pkg)
        node = engine.get_node_by_slug(package, slug) if package else None
        if node is None:
            raise HTTPException(status_code=404, detail=f"No entity '{slug}' in package '{pkg}'")
        return to_entity_response(node)

    @app.exception_handler(InputError)
    async def input_error_handler(_: Any, exc: InputError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(DocGraphError)
    async def docgraph_error_handler(_: Any, exc: DocGraphError) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    config: Optional[DocGraphConfig] = None,
) -> None:  # pragma: no cover - integration path
    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)


__all__ = ["KIND_TO_RESULT", "create_app", "entity_href", "result_kind", "run_service"]
