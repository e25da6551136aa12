"""Grammar data models — the parser's view of a C header.

These mirror the declaration forms the header parser recognizes. Every type
occurrence is a GType: exactly one qualifier wrapped around a category.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union


class GQualifier(Enum):
    MUTABLE = "mutable"
    CONST = "const"
    EXTERN = "extern"  # Linkage only, no effect on constness


class GPrimitive(Enum):
    """Primitive C type keywords the parser recognizes."""

    VOID = "void"
    BOOL = "bool"
    CHAR = "char"
    SIGNED_CHAR = "signed char"
    UNSIGNED_CHAR = "unsigned char"
    SHORT = "short"
    SIGNED_SHORT = "signed short"
    UNSIGNED_SHORT = "unsigned short"
    INT = "int"
    SIGNED = "signed"
    SIGNED_INT = "signed int"
    UNSIGNED = "unsigned"
    UNSIGNED_INT = "unsigned int"
    LONG = "long"
    SIGNED_LONG = "signed long"
    UNSIGNED_LONG = "unsigned long"
    LONG_LONG = "long long"
    SIGNED_LONG_LONG = "signed long long"
    UNSIGNED_LONG_LONG = "unsigned long long"
    INT8 = "int8_t"
    INT16 = "int16_t"
    INT32 = "int32_t"
    INT64 = "int64_t"
    UINT8 = "uint8_t"
    UINT16 = "uint16_t"
    UINT32 = "uint32_t"
    UINT64 = "uint64_t"
    SIZE = "size_t"
    FLOAT = "float"
    DOUBLE = "double"

    @classmethod
    def from_keyword(cls, keyword: str) -> GPrimitive | None:
        normalized = " ".join(keyword.split())
        for primitive in cls:
            if primitive.value == normalized:
                return primitive
        return None


class GMarker(str, Enum):
    """Annotation macros attached to declarations in the headers."""

    EXPORT_STRUCT = "TW_EXPORT_STRUCT"
    EXPORT_CLASS = "TW_EXPORT_CLASS"
    EXPORT_ENUM = "TW_EXPORT_ENUM"
    EXPORT_FUNCTION = "TW_EXPORT_FUNC"
    EXPORT_METHOD = "TW_EXPORT_METHOD"
    EXPORT_STATIC_METHOD = "TW_EXPORT_STATIC_METHOD"
    EXPORT_PROPERTY = "TW_EXPORT_PROPERTY"
    EXPORT_STATIC_PROPERTY = "TW_EXPORT_STATIC_PROPERTY"
    VISIBILITY_DEFAULT = "TW_VISIBILITY_DEFAULT"
    NULLABLE = "_Nullable"
    NONNULL = "_Nonnull"


# --- Type categories ---


@dataclass(frozen=True)
class GScalar:
    primitive: GPrimitive


@dataclass(frozen=True)
class GStructRef:
    """An explicit ``struct Name`` reference."""

    name: str


@dataclass(frozen=True)
class GEnumRef:
    """An explicit ``enum Name`` reference."""

    name: str


@dataclass(frozen=True)
class GPointer:
    inner: GTypeCategory | None


@dataclass(frozen=True)
class GNullable:
    inner: GTypeCategory | None


@dataclass(frozen=True)
class GNonNull:
    inner: GTypeCategory | None


@dataclass(frozen=True)
class GUnrecognized:
    """A type keyword the parser could not classify (typedef names etc.)."""

    keyword: str


@dataclass(frozen=True)
class GUnparsed:
    """A category written in a shape the dump loader does not know."""

    raw: str


GTypeCategory = Union[
    GScalar, GStructRef, GEnumRef, GPointer, GNullable, GNonNull, GUnrecognized, GUnparsed
]


@dataclass(frozen=True)
class GType:
    """A qualified type: one qualifier tag around one category."""

    qualifier: GQualifier | str  # a str is an unknown qualifier, rejected by the normalizer
    category: GTypeCategory | None

    @classmethod
    def mutable(cls, category: GTypeCategory | None) -> GType:
        return cls(GQualifier.MUTABLE, category)

    @classmethod
    def const(cls, category: GTypeCategory | None) -> GType:
        return cls(GQualifier.CONST, category)

    @classmethod
    def extern(cls, category: GTypeCategory | None) -> GType:
        return cls(GQualifier.EXTERN, category)


# --- Declarations ---


@dataclass
class GInclude:
    """An ``#include`` directive."""

    path: str


@dataclass
class GStructIndicator:
    """A forward declaration: ``struct Name;``."""

    name: str


@dataclass
class GField:
    name: str
    ty: GType


@dataclass
class GStructDecl:
    name: str
    fields: list[GField] = field(default_factory=list)
    markers: list[str] = field(default_factory=list)


@dataclass
class GEnumVariant:
    name: str
    value: int | None = None


@dataclass
class GEnumDecl:
    name: str
    variants: list[GEnumVariant] = field(default_factory=list)
    markers: list[str] = field(default_factory=list)


@dataclass
class GParam:
    name: str
    ty: GType
    markers: list[str] = field(default_factory=list)


@dataclass
class GFunctionDecl:
    name: str
    return_type: GType
    params: list[GParam] = field(default_factory=list)
    markers: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)  # Doc lines, in source order

    def has_marker(self, marker: GMarker) -> bool:
        return marker in self.markers


@dataclass
class GUnrecognizedItem:
    """Any header item the IR layer does not consume (directives, comments, ...)."""

    raw: str = ""


GHeaderFileItem = Union[
    GInclude,
    GStructIndicator,
    GStructDecl,
    GEnumDecl,
    GFunctionDecl,
    GUnrecognizedItem,
]


@dataclass
class HeaderDirectory:
    """Ordered declarations per header file, as produced by the parser."""

    headers: dict[Path, list[GHeaderFileItem]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.headers)

    def paths(self) -> list[Path]:
        return sorted(self.headers)
