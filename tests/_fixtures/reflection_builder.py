"""Helpers for writing run summaries and reflection trees in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from docgraph.engine import DocsEngine, EngineOptions
from docgraph.kinds import ReflectionKind

_GROUP_TITLES = {
    ReflectionKind.NAMESPACE: "Namespaces",
    ReflectionKind.ENUM: "Enumerations",
    ReflectionKind.ENUM_MEMBER: "Enumeration Members",
    ReflectionKind.VARIABLE: "Variables",
    ReflectionKind.FUNCTION: "Functions",
    ReflectionKind.CLASS: "Classes",
    ReflectionKind.INTERFACE: "Interfaces",
    ReflectionKind.CONSTRUCTOR: "Constructors",
    ReflectionKind.PROPERTY: "Properties",
    ReflectionKind.METHOD: "Methods",
    ReflectionKind.ACCESSOR: "Accessors",
    ReflectionKind.TYPE_ALIAS: "Type Aliases",
    ReflectionKind.REFERENCE: "References",
}


# ----------------------------------------------------------------------
# Type shapes


def intrinsic(name: str) -> Dict[str, Any]:
    return {"type": "intrinsic", "name": name}


def literal(value: Any) -> Dict[str, Any]:
    return {"type": "literal", "value": value}


def ref(
    name: str,
    target: Any = None,
    *,
    package: Optional[str] = None,
    qualified_name: Optional[str] = None,
    external_url: Optional[str] = None,
    type_arguments: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    shape: Dict[str, Any] = {"type": "reference", "name": name}
    if target is not None:
        shape["target"] = target
    if package:
        shape["package"] = package
    if qualified_name:
        shape["qualifiedName"] = qualified_name
    if external_url:
        shape["externalUrl"] = external_url
    if type_arguments:
        shape["typeArguments"] = type_arguments
    return shape


def union(*types: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "union", "types": list(types)}


def comment(summary: str = "", *tags: Dict[str, Any], modifiers: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "summary": [{"kind": "text", "text": summary}] if summary else [],
        "blockTags": list(tags),
        "modifierTags": list(modifiers or []),
    }


def block_tag(tag: str, text: str, name: Optional[str] = None) -> Dict[str, Any]:
    shape: Dict[str, Any] = {"tag": tag, "content": [{"kind": "text", "text": text}]}
    if name:
        shape["name"] = name
    return shape


def source(file_name: str, line: int = 1, url: Optional[str] = None) -> Dict[str, Any]:
    shape: Dict[str, Any] = {"fileName": file_name, "line": line, "character": 0}
    if url:
        shape["url"] = url
    return shape


# ----------------------------------------------------------------------
# Reflections


class ReflectionBuilder:
    """Allocates ids and builds reflection dicts shaped like the extractor's output."""

    def __init__(self, start: int = 1) -> None:
        self._next_id = start

    def _id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def node(self, name: str, kind: ReflectionKind, *children: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        shape: Dict[str, Any] = {
            "id": extra.pop("id", None) or self._id(),
            "name": name,
            "variant": "declaration",
            "kind": int(kind),
            "flags": extra.pop("flags", {}),
        }
        if children:
            shape["children"] = list(children)
            shape["groups"] = _groups_for(children)
        shape.update(extra)
        return shape

    def project(self, name: str, *children: Dict[str, Any]) -> Dict[str, Any]:
        shape = {"id": 0, "name": name, "variant": "project", "kind": int(ReflectionKind.PROJECT), "flags": {}}
        if children:
            shape["children"] = list(children)
            shape["groups"] = _groups_for(children)
        return shape

    def klass(self, name: str, *children: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.CLASS, *children, **extra)

    def interface(self, name: str, *children: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.INTERFACE, *children, **extra)

    def prop(self, name: str, type_: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.PROPERTY, type=type_, **extra)

    def variable(self, name: str, type_: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.VARIABLE, type=type_, **extra)

    def function(self, name: str, *signatures: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.FUNCTION, signatures=list(signatures), **extra)

    def method(self, name: str, *signatures: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
        return self.node(name, ReflectionKind.METHOD, signatures=list(signatures), **extra)

    def reference(self, name: str, target: int, **extra: Any) -> Dict[str, Any]:
        shape = self.node(name, ReflectionKind.REFERENCE, **extra)
        shape["variant"] = "reference"
        shape["target"] = target
        return shape

    def signature(
        self,
        name: str,
        *parameters: Dict[str, Any],
        returns: Optional[Dict[str, Any]] = None,
        kind: ReflectionKind = ReflectionKind.CALL_SIGNATURE,
        **extra: Any,
    ) -> Dict[str, Any]:
        shape: Dict[str, Any] = {
            "id": self._id(),
            "name": name,
            "variant": "signature",
            "kind": int(kind),
            "flags": {},
            "parameters": list(parameters),
            "type": returns if returns is not None else intrinsic("void"),
        }
        shape.update(extra)
        return shape

    def parameter(
        self,
        name: str,
        type_: Optional[Dict[str, Any]] = None,
        *,
        optional: bool = False,
        rest: bool = False,
        default: Optional[str] = None,
    ) -> Dict[str, Any]:
        flags: Dict[str, bool] = {}
        if optional:
            flags["isOptional"] = True
        if rest:
            flags["isRest"] = True
        shape: Dict[str, Any] = {
            "id": self._id(),
            "name": name,
            "variant": "param",
            "kind": int(ReflectionKind.PARAMETER),
            "flags": flags,
        }
        if type_ is not None:
            shape["type"] = type_
        if default is not None:
            shape["defaultValue"] = default
        return shape


def _groups_for(children: Any) -> List[Dict[str, Any]]:
    groups: Dict[str, List[int]] = {}
    for child in children:
        title = _GROUP_TITLES.get(child.get("kind"), "Other")
        groups.setdefault(title, []).append(child["id"])
    return [{"title": title, "children": ids} for title, ids in groups.items()]


# ----------------------------------------------------------------------
# Workspace on disk


class DocsWorkspace:
    """Writes a generated-docs directory (run summary plus one JSON per package)."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "generated"
        self.root.mkdir()
        self._packages: List[Dict[str, Any]] = []

    def add_package(
        self,
        name: str,
        tree: Any,
        *,
        version: str = "1.0.0",
        succeeded: bool = True,
        output: Optional[str] = None,
    ) -> Path:
        """Write ``tree`` (a dict, or raw text for malformed input) and list it in the summary."""
        slug = name.replace("@", "").replace("/", "-")
        target = self.root / f"{slug}.json"
        payload = tree if isinstance(tree, str) else json.dumps(tree)
        target.write_text(payload, encoding="utf-8")
        self._packages.append(
            {
                "name": name,
                "version": version,
                "entryPoints": ["src/index.ts"],
                "output": output if output is not None else target.name,
                "warningCount": 0,
                "errorCount": 0,
                "warnings": [],
                "errors": [],
                "succeeded": succeeded,
            }
        )
        return target

    def write_manifest(self) -> Path:
        manifest = {
            "generatedAt": "2024-01-01T00:00:00.000Z",
            "tool": "typedoc",
            "typedocVersion": "0.26.0",
            "outputDir": "",
            "packages": self._packages,
        }
        path = self.root / "manifest.json"
        path.write_text(json.dumps(manifest), encoding="utf-8")
        return path

    def engine(self, *, home_package: Optional[str] = None, summary_budget: int = 200) -> DocsEngine:
        manifest_path = self.write_manifest()
        return DocsEngine.create(
            EngineOptions(
                generated_root=self.root,
                manifest_path=manifest_path,
                workspace_root=self.root,
                home_package=home_package,
                summary_budget=summary_budget,
            )
        )


__all__ = [
    "DocsWorkspace",
    "ReflectionBuilder",
    "block_tag",
    "comment",
    "intrinsic",
    "literal",
    "ref",
    "source",
    "union",
]
