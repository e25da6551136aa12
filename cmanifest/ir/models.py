"""IR data models — the canonical, C-syntax-free manifest of a header.

These models are what the assembler builds from the parser's grammar tree
and what the emitter serializes for downstream per-language generators.
Everything here is a frozen value; a finalized FileInfo never changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class VariantKind(Enum):
    VOID = "Void"
    BOOL = "Bool"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    UINT8 = "Uint8"
    UINT16 = "Uint16"
    UINT32 = "Uint32"
    UINT64 = "Uint64"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    STRUCT = "Struct"  # Named reference
    ENUM = "Enum"  # Named reference


NAMED_KINDS = frozenset({VariantKind.STRUCT, VariantKind.ENUM})


@dataclass(frozen=True)
class TypeVariant:
    """A primitive scalar, or a by-name reference to a struct/enum.

    Named references are never resolved here; the name may point into
    another header entirely.
    """

    kind: VariantKind
    name: str | None = None

    def __post_init__(self):
        if self.kind in NAMED_KINDS and not self.name:
            raise ValueError(f"{self.kind.value} variant requires a name")
        if self.kind not in NAMED_KINDS and self.name is not None:
            raise ValueError(f"{self.kind.value} variant does not take a name")

    @classmethod
    def struct(cls, name: str) -> TypeVariant:
        return cls(VariantKind.STRUCT, name)

    @classmethod
    def enum(cls, name: str) -> TypeVariant:
        return cls(VariantKind.ENUM, name)

    @property
    def is_named(self) -> bool:
        return self.kind in NAMED_KINDS

    def to_dict(self) -> str | dict:
        if self.is_named:
            return {self.kind.value: self.name}
        return self.kind.value


@dataclass(frozen=True)
class TypeInfo:
    variant: TypeVariant
    is_constant: bool = False
    is_nullable: bool = False
    is_pointer: bool = False

    def to_dict(self) -> dict:
        return {
            "variant": self.variant.to_dict(),
            "is_constant": self.is_constant,
            "is_nullable": self.is_nullable,
            "is_pointer": self.is_pointer,
        }


@dataclass(frozen=True)
class ImportInfo:
    """A referenced header, as directories plus the final file.

    E.g. ``to/some/file.h`` ~= ("to", "some", "file.h")
    """

    path: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"path": list(self.path)}


@dataclass(frozen=True)
class ParamInfo:
    name: str
    ty: TypeInfo

    def to_dict(self) -> dict:
        return {"name": self.name, "ty": self.ty.to_dict()}


@dataclass(frozen=True)
class StructInfo:
    """A struct; ``is_forward`` marks a bare ``struct Name;`` and is not serialized."""

    name: str
    is_public: bool = True
    fields: tuple[tuple[str, TypeInfo], ...] = ()
    tags: tuple[str, ...] = ()
    is_forward: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_public": self.is_public,
            "fields": [[name, ty.to_dict()] for name, ty in self.fields],
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class EnumInfo:
    """An enum; a variant value of None means the consumer assigns it."""

    name: str
    is_public: bool = True
    variants: tuple[tuple[str, int | None], ...] = ()
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_public": self.is_public,
            "variants": [[name, value] for name, value in self.variants],
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class MethodInfo:
    name: str
    is_public: bool
    is_static: bool
    params: tuple[ParamInfo, ...]
    return_type: TypeInfo
    comments: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_public": self.is_public,
            "is_static": self.is_static,
            "params": [p.to_dict() for p in self.params],
            "return_type": self.return_type.to_dict(),
            "comments": list(self.comments),
        }


@dataclass(frozen=True)
class PropertyInfo:
    """A zero-argument accessor (the receiver of instance properties is implied)."""

    name: str
    is_public: bool
    is_static: bool
    return_type: TypeInfo
    comments: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_public": self.is_public,
            "is_static": self.is_static,
            "return_type": self.return_type.to_dict(),
            "comments": list(self.comments),
        }


@dataclass(frozen=True)
class FileInfo:
    """The manifest of one header.

    This is the primary structure the assembler builds and the emitter
    writes. Every collection keeps first-seen source order.
    """

    name: str
    imports: tuple[ImportInfo, ...] = ()
    structs: tuple[StructInfo, ...] = ()
    enums: tuple[EnumInfo, ...] = ()
    functions: tuple[MethodInfo, ...] = ()
    properties: tuple[PropertyInfo, ...] = ()

    @property
    def declaration_count(self) -> int:
        return (
            len(self.imports)
            + len(self.structs)
            + len(self.enums)
            + len(self.functions)
            + len(self.properties)
        )

    @property
    def static_functions(self) -> list[MethodInfo]:
        return [f for f in self.functions if f.is_static]

    @property
    def referenced_names(self) -> list[str]:
        """Named struct/enum references across all types, first-seen order."""
        seen: dict[str, None] = {}
        types: list[TypeInfo] = []
        for struct in self.structs:
            types.extend(ty for _, ty in struct.fields)
        for fn in self.functions:
            types.extend(p.ty for p in fn.params)
            types.append(fn.return_type)
        for prop in self.properties:
            types.append(prop.return_type)
        for ty in types:
            if ty.variant.is_named:
                seen.setdefault(ty.variant.name, None)
        return list(seen)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "imports": [i.to_dict() for i in self.imports],
            "structs": [s.to_dict() for s in self.structs],
            "enums": [e.to_dict() for e in self.enums],
            "functions": [f.to_dict() for f in self.functions],
            "properties": [p.to_dict() for p in self.properties],
        }


@dataclass(frozen=True)
class ExtractionIssue:
    """A declaration that was skipped, and why."""

    header: str
    declaration: str
    code: str
    message: str

    def __str__(self) -> str:
        where = f"{self.header}:{self.declaration}" if self.declaration else self.header
        return f"[{self.code}] {where}: {self.message}"


@dataclass
class FileResult:
    """Outcome of extracting and emitting one header."""

    path: str
    name: str = ""
    file_info: FileInfo | None = None
    artifact: str = ""
    issues: list[ExtractionIssue] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class ExtractionReport:
    results: list[FileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[FileResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def issues(self) -> list[ExtractionIssue]:
        return [i for r in self.results for i in r.issues]

    @property
    def passed(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return (
            f"[{status}] {len(self.succeeded)} header(s) written, "
            f"{len(self.failed)} failed, {len(self.issues)} declaration(s) skipped"
        )
