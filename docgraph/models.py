"""Core data models shared across docgraph components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .identity import GlobalKey
from .kinds import ReflectionKind

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .directory import PackageDirectory

# Raw type descriptions are kept exactly as the extractor wrote them.
DocType = Dict[str, Any]


# ----------------------------------------------------------------------
# Run summary


@dataclass
class RepositoryInfo:
    url: str
    branch: Optional[str] = None
    commit: Optional[str] = None


@dataclass
class DocManifestPackage:
    """One package entry of the run summary."""

    name: str
    version: str = ""
    entry_points: List[str] = field(default_factory=list)
    output: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warning_count: int = 0
    error_count: int = 0
    succeeded: bool = False


@dataclass
class DocManifest:
    """Top-level run summary written by the extractor."""

    generated_at: str = ""
    tool: str = ""
    typedoc_version: str = ""
    output_dir: str = ""
    packages: List[DocManifestPackage] = field(default_factory=list)
    repository: Optional[RepositoryInfo] = None


# ----------------------------------------------------------------------
# References and rendered parts


@dataclass(frozen=True)
class DocReference:
    """Named pointer to another symbol, possibly outside the collection.

    A reference carries either an embedded ``target_key`` or an
    ``external_url`` hint, never both.
    """

    name: str
    qualified_name: Optional[str] = None
    package_name: Optional[str] = None
    target_key: Optional[GlobalKey] = None
    external_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.target_key is not None and self.external_url:
            raise ValueError(
                f"Reference '{self.name}' cannot carry both a target key and an external URL"
            )


class ResolutionStatus(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ReferenceResolution:
    """Outcome of resolving a ``DocReference``."""

    status: ResolutionStatus
    package_name: Optional[str] = None
    slug: Optional[str] = None
    external_url: Optional[str] = None

    @classmethod
    def internal(cls, package_name: str, slug: str) -> "ReferenceResolution":
        return cls(ResolutionStatus.INTERNAL, package_name=package_name, slug=slug)

    @classmethod
    def external(cls, url: str) -> "ReferenceResolution":
        return cls(ResolutionStatus.EXTERNAL, external_url=url)

    @classmethod
    def unresolved(cls) -> "ReferenceResolution":
        return cls(ResolutionStatus.UNRESOLVED)

    @property
    def is_resolved(self) -> bool:
        return self.status is not ResolutionStatus.UNRESOLVED


@dataclass(frozen=True)
class SigPart:
    """One token of a rendered type or signature."""

    kind: str  # "text" | "punct" | "space" | "ref"
    text: str = ""
    ref: Optional[DocReference] = None


@dataclass
class InlineType:
    parts: List[SigPart] = field(default_factory=list)


@dataclass
class RenderedTypeParameter:
    name: str
    constraint: Optional[InlineType] = None
    default: Optional[InlineType] = None


@dataclass
class RenderedParameter:
    name: str
    optional: bool = False
    rest: bool = False
    type: Optional[InlineType] = None
    default_value: Optional[str] = None


@dataclass
class RenderedSignature:
    name: List[SigPart]
    parameters: List[RenderedParameter] = field(default_factory=list)
    type_params: List[RenderedTypeParameter] = field(default_factory=list)
    return_type: Optional[InlineType] = None
    accessor: Optional[str] = None  # "get" | "set"


@dataclass
class RenderedDeclarationHeader:
    name: str
    keyword: Optional[str] = None
    modifiers: List[str] = field(default_factory=list)
    type_params: List[RenderedTypeParameter] = field(default_factory=list)
    extends: List[InlineType] = field(default_factory=list)
    implements: List[InlineType] = field(default_factory=list)
    type: Optional[InlineType] = None
    value: Optional[InlineType] = None


# ----------------------------------------------------------------------
# Comments, flags, sources


@dataclass
class DocCommentBlockTag:
    tag: str
    text: str
    name: str = ""


@dataclass
class DocCommentExample:
    content: str
    caption: Optional[str] = None


@dataclass
class DocComment:
    summary: str = ""
    block_tags: List[DocCommentBlockTag] = field(default_factory=list)
    modifier_tags: List[str] = field(default_factory=list)
    examples: List[DocCommentExample] = field(default_factory=list)

    def tags(self, name: str) -> List[DocCommentBlockTag]:
        return [tag for tag in self.block_tags if tag.tag == name]


@dataclass
class DocFlags:
    access: Optional[str] = None  # "public" | "protected" | "private"
    accessor: Optional[str] = None  # "getter" | "setter" | "getter-setter"
    is_static: bool = False
    is_abstract: bool = False
    is_const: bool = False
    is_readonly: bool = False
    is_optional: bool = False
    is_rest: bool = False
    is_async: bool = False
    is_deprecated: bool = False
    is_inherited: bool = False
    is_overwriting: bool = False
    is_internal: bool = False
    is_external: bool = False
    is_decorator: bool = False


@dataclass
class DocSource:
    file_name: str
    line: int = 0
    character: int = 0
    url: Optional[str] = None


@dataclass
class SourcePackage:
    name: str
    version: str = ""


# ----------------------------------------------------------------------
# Declarations


@dataclass
class DocTypeParameter:
    id: int
    name: str
    constraint: Optional[DocType] = None
    default: Optional[DocType] = None
    is_optional: bool = False
    variance: Optional[str] = None
    comment: Optional[DocComment] = None


@dataclass
class DocParameter:
    id: int
    name: str
    kind: ReflectionKind
    flags: DocFlags
    type: Optional[DocType] = None
    default_value: Optional[str] = None
    comment: Optional[DocComment] = None


@dataclass
class DocSignature:
    """One call, construct or accessor signature of a node."""

    name: str
    kind: ReflectionKind
    kind_label: str
    fragment: str
    anchor: str
    overload_index: int
    id: Optional[int] = None
    type: Optional[DocType] = None
    parameters: List[DocParameter] = field(default_factory=list)
    type_parameters: List[DocTypeParameter] = field(default_factory=list)
    comment: Optional[DocComment] = None
    returns_comment: Optional[DocCommentBlockTag] = None
    throws: List[DocCommentBlockTag] = field(default_factory=list)
    sources: List[DocSource] = field(default_factory=list)
    source_url: Optional[str] = None
    overwrites: Optional[DocReference] = None
    inherited_from: Optional[DocReference] = None
    implementation_of: Optional[DocReference] = None
    render: Optional[RenderedSignature] = None
    render_text: str = ""


@dataclass
class DocGroup:
    """Named, ordered bucket of child keys used for categorized display."""

    title: str
    kind: Optional[ReflectionKind] = None
    child_keys: List[GlobalKey] = field(default_factory=list)


@dataclass
class DocInheritance:
    extends: List[InlineType] = field(default_factory=list)
    implements: List[InlineType] = field(default_factory=list)
    extended_by: List[InlineType] = field(default_factory=list)
    implemented_by: List[InlineType] = field(default_factory=list)


@dataclass
class DocNode:
    """One symbol or declaration of a package."""

    id: int
    key: GlobalKey
    package_name: str
    name: str
    path: List[str]
    qualified_name: str
    slug: str
    kind: ReflectionKind
    kind_label: str
    flags: DocFlags
    source_package: SourcePackage
    package_version: Optional[str] = None
    comment: Optional[DocComment] = None
    type: Optional[DocType] = None
    type_render: Optional[InlineType] = None
    type_parameters: List[DocTypeParameter] = field(default_factory=list)
    default_value: Optional[str] = None
    signatures: List[DocSignature] = field(default_factory=list)
    children: List["DocNode"] = field(default_factory=list)
    groups: List[DocGroup] = field(default_factory=list)
    sources: List[DocSource] = field(default_factory=list)
    source_url: Optional[str] = None
    inheritance: DocInheritance = field(default_factory=DocInheritance)
    overwrites: Optional[DocReference] = None
    inherited_from: Optional[DocReference] = None
    implementation_of: Optional[DocReference] = None
    alias_of: Optional[DocReference] = None
    header: Optional[RenderedDeclarationHeader] = None
    header_text: str = ""

    def walk(self) -> Iterator["DocNode"]:
        """Yield this node and all descendants depth-first, parents first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


# ----------------------------------------------------------------------
# Indexes and aggregates


@dataclass
class DocSearchEntry:
    slug: str
    name: str
    qualified_name: str
    package_name: str
    kind: ReflectionKind
    tokens: List[str]
    package_version: Optional[str] = None
    summary: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    file: Optional[str] = None
    source_package: Optional[str] = None


@dataclass
class DocIndexes:
    by_id: Dict[int, DocNode] = field(default_factory=dict)
    by_slug: Dict[str, DocNode] = field(default_factory=dict)
    by_qualified_name: Dict[str, DocNode] = field(default_factory=dict)
    by_kind: Dict[ReflectionKind, List[DocNode]] = field(default_factory=dict)
    exports: Dict[str, DocNode] = field(default_factory=dict)
    search: List[DocSearchEntry] = field(default_factory=list)


@dataclass
class DocPackageModel:
    manifest: DocManifestPackage
    root: DocNode
    nodes: Dict[int, DocNode]
    indexes: DocIndexes
    directory: "PackageDirectory"

    @property
    def name(self) -> str:
        return self.manifest.name


@dataclass(frozen=True)
class PackageWarning:
    """A package that was skipped during the build, and why."""

    package: str
    message: str


@dataclass(frozen=True)
class DocCollection:
    """Immutable aggregate of every successfully built package."""

    manifest: DocManifest
    packages: Tuple[DocPackageModel, ...]
    by_key: Mapping[GlobalKey, DocNode]
    by_global_slug: Mapping[str, DocNode]
    warnings: Tuple[PackageWarning, ...] = ()

    def package(self, name: str) -> Optional[DocPackageModel]:
        for pkg in self.packages:
            if pkg.manifest.name == name:
                return pkg
        return None

    def package_names(self) -> List[str]:
        return [pkg.manifest.name for pkg in self.packages]


def global_slug(package: str, slug: str) -> str:
    """Composite ``package/slug`` key used by the collection's global slug index."""
    return f"{package}/{slug}"
