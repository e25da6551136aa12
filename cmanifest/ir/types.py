"""Type normalizer — GType (qualifier + category) to TypeInfo."""

from __future__ import annotations

from collections.abc import Collection

from cmanifest.grammar.models import (
    GEnumRef,
    GNonNull,
    GNullable,
    GPointer,
    GPrimitive,
    GQualifier,
    GScalar,
    GStructRef,
    GType,
    GUnrecognized,
)
from cmanifest.ir.errors import BadType
from cmanifest.ir.models import TypeInfo, TypeVariant, VariantKind


PRIMITIVE_VARIANTS = {
    GPrimitive.VOID: VariantKind.VOID,
    GPrimitive.BOOL: VariantKind.BOOL,
    GPrimitive.CHAR: VariantKind.INT8,
    GPrimitive.SIGNED_CHAR: VariantKind.INT8,
    GPrimitive.INT8: VariantKind.INT8,
    GPrimitive.UNSIGNED_CHAR: VariantKind.UINT8,
    GPrimitive.UINT8: VariantKind.UINT8,
    GPrimitive.SHORT: VariantKind.INT16,
    GPrimitive.SIGNED_SHORT: VariantKind.INT16,
    GPrimitive.INT16: VariantKind.INT16,
    GPrimitive.UNSIGNED_SHORT: VariantKind.UINT16,
    GPrimitive.UINT16: VariantKind.UINT16,
    GPrimitive.INT: VariantKind.INT32,
    GPrimitive.SIGNED: VariantKind.INT32,
    GPrimitive.SIGNED_INT: VariantKind.INT32,
    GPrimitive.INT32: VariantKind.INT32,
    GPrimitive.UNSIGNED: VariantKind.UINT32,
    GPrimitive.UNSIGNED_INT: VariantKind.UINT32,
    GPrimitive.UINT32: VariantKind.UINT32,
    GPrimitive.LONG: VariantKind.INT64,
    GPrimitive.SIGNED_LONG: VariantKind.INT64,
    GPrimitive.LONG_LONG: VariantKind.INT64,
    GPrimitive.SIGNED_LONG_LONG: VariantKind.INT64,
    GPrimitive.INT64: VariantKind.INT64,
    GPrimitive.UNSIGNED_LONG: VariantKind.UINT64,
    GPrimitive.UNSIGNED_LONG_LONG: VariantKind.UINT64,
    GPrimitive.UINT64: VariantKind.UINT64,
    GPrimitive.SIZE: VariantKind.UINT64,
    GPrimitive.FLOAT: VariantKind.FLOAT32,
    GPrimitive.DOUBLE: VariantKind.FLOAT64,
}


def normalize_type(ty: GType, enum_names: Collection[str] = ()) -> TypeInfo:
    """Normalize a qualified grammar type into a TypeInfo.

    Args:
        ty: The raw type, exactly one qualifier around a category.
        enum_names: Names known to be enums; unrecognized keywords found here
            become Enum references, all others become Struct references.

    Raises:
        BadType: The qualifier is missing or the category cannot be mapped.
    """
    if not isinstance(ty, GType) or not isinstance(ty.qualifier, GQualifier):
        raise BadType(f"Expected a qualified type, got {ty!r}")

    is_pointer = False
    is_nullable = False
    category = ty.category

    # Peel wrappers until we reach a terminal category
    while isinstance(category, (GPointer, GNullable, GNonNull)):
        if isinstance(category, GPointer):
            is_pointer = True
        elif isinstance(category, GNullable):
            is_nullable = True
        category = category.inner

    return TypeInfo(
        variant=_variant_for(category, enum_names),
        is_constant=ty.qualifier == GQualifier.CONST,
        is_nullable=is_nullable,
        is_pointer=is_pointer,
    )


def _variant_for(category, enum_names: Collection[str]) -> TypeVariant:
    if isinstance(category, GScalar):
        kind = PRIMITIVE_VARIANTS.get(category.primitive)
        if kind is None:
            raise BadType(f"Unsupported primitive: {category.primitive!r}")
        return TypeVariant(kind)
    if isinstance(category, GStructRef):
        _require_identifier(category.name)
        return TypeVariant.struct(category.name)
    if isinstance(category, GEnumRef):
        _require_identifier(category.name)
        return TypeVariant.enum(category.name)
    if isinstance(category, GUnrecognized):
        primitive = GPrimitive.from_keyword(category.keyword or "")
        if primitive is not None:
            return TypeVariant(PRIMITIVE_VARIANTS[primitive])
        keyword = _require_identifier(category.keyword)
        if keyword in enum_names:
            return TypeVariant.enum(keyword)
        return TypeVariant.struct(keyword)
    if category is None:
        raise BadType("Type has an empty category")
    raise BadType(f"Unknown type category: {category!r}")


def _require_identifier(name: str) -> str:
    name = (name or "").strip()
    if not name or not (name.replace("_", "a").isalnum() and not name[0].isdigit()):
        raise BadType(f"Not a valid type identifier: {name!r}")
    return name


def extract_custom(ty: GType) -> str | None:
    """Return the bare identifier of an unrecognized category, if that is what ``ty`` holds.

    The qualifier is transparent: mutable, const and extern all behave alike.
    """
    if isinstance(ty.category, GUnrecognized):
        return ty.category.keyword
    return None
