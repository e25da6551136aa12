"""Declaration converters — one grammar declaration to one IR record.

Every converter raises a ManifestError subclass instead of returning a
partial record; the assembler decides what to do with it.
"""

from __future__ import annotations

import re
from collections.abc import Collection

from cmanifest.grammar.models import (
    GEnumDecl,
    GFunctionDecl,
    GInclude,
    GMarker,
    GParam,
    GStructDecl,
    GStructIndicator,
)
from cmanifest.ir.errors import BadImport, BadObject, BadProperty, BadType
from cmanifest.ir.models import (
    EnumInfo,
    ImportInfo,
    MethodInfo,
    ParamInfo,
    PropertyInfo,
    StructInfo,
)
from cmanifest.ir.types import normalize_type


_PATH_SEPARATORS = re.compile(r"[\\/]")


def convert_import(include: GInclude) -> ImportInfo:
    """Split an include path into directories plus the final file."""
    raw = (include.path or "").strip().strip('"').strip("<>").strip()
    if not raw:
        raise BadImport("Include path is empty", include.path or "")

    segments = _PATH_SEPARATORS.split(raw)
    for segment in segments:
        if not segment or segment in (".", ".."):
            raise BadImport(f"Include path has an invalid segment: {raw!r}", raw)
    if "." not in segments[-1].strip("."):
        raise BadImport(f"Include path does not end in a file: {raw!r}", raw)

    return ImportInfo(path=tuple(segments))


def convert_struct_indicator(decl: GStructIndicator) -> StructInfo:
    """A forward declaration is recorded as public with no fields or tags."""
    if not decl.name:
        raise BadObject("Forward declaration has no name")
    return StructInfo(name=decl.name, is_public=True, fields=(), tags=(), is_forward=True)


def convert_struct(decl: GStructDecl, enum_names: Collection[str] = ()) -> StructInfo:
    if not decl.name:
        raise BadObject("Struct has no name")

    fields = []
    for index, f in enumerate(decl.fields):
        if not f.name:
            raise BadObject(f"Field {index + 1} of {decl.name} has no name", decl.name)
        try:
            fields.append((f.name, normalize_type(f.ty, enum_names)))
        except BadType as e:
            raise BadObject(f"Field {decl.name}.{f.name}: {e.message}", decl.name) from e

    return StructInfo(
        name=decl.name,
        is_public=True,
        fields=tuple(fields),
        tags=_tags(decl.markers),
    )


def convert_enum(decl: GEnumDecl) -> EnumInfo:
    if not decl.name:
        raise BadObject("Enum has no name")

    variants = []
    seen: set[str] = set()
    for index, variant in enumerate(decl.variants):
        if not variant.name:
            raise BadObject(f"Variant {index + 1} of {decl.name} has no name", decl.name)
        if variant.name in seen:
            raise BadObject(f"Duplicate variant {decl.name}.{variant.name}", decl.name)
        value = variant.value
        if value is not None and (
            isinstance(value, bool) or not isinstance(value, int) or value < 0
        ):
            raise BadObject(
                f"Variant {decl.name}.{variant.name} has invalid value {value!r}", decl.name
            )
        seen.add(variant.name)
        variants.append((variant.name, value))

    return EnumInfo(
        name=decl.name,
        is_public=True,
        variants=tuple(variants),
        tags=_tags(decl.markers),
    )


def convert_param(param: GParam, enum_names: Collection[str] = ()) -> ParamInfo:
    return ParamInfo(name=param.name, ty=normalize_type(param.ty, enum_names))


def convert_method(
    decl: GFunctionDecl,
    owner: str | None = None,
    enum_names: Collection[str] = (),
) -> MethodInfo:
    """Convert an exported function into a MethodInfo.

    Args:
        decl: The function declaration; must carry an export-method marker.
        owner: Name of the header the function belongs to, used to qualify
            error messages.
        enum_names: Names to treat as enum references.
    """
    is_static = decl.has_marker(GMarker.EXPORT_STATIC_METHOD)
    is_public = is_static or decl.has_marker(GMarker.EXPORT_METHOD)
    _check_exported(decl, is_public, "method")

    try:
        params = tuple(convert_param(p, enum_names) for p in decl.params)
        return_type = normalize_type(decl.return_type, enum_names)
    except BadType as e:
        where = f" of {owner}" if owner else ""
        raise BadProperty(f"Method {decl.name}{where}: {e.message}", decl.name) from e

    return MethodInfo(
        name=decl.name,
        is_public=is_public,
        is_static=is_static,
        params=params,
        return_type=return_type,
        comments=tuple(decl.comments),
    )


def convert_property(
    decl: GFunctionDecl,
    owner: str | None = None,
    enum_names: Collection[str] = (),
) -> PropertyInfo:
    """Convert an exported accessor into a PropertyInfo.

    Static properties take no parameters; instance properties take at most
    their receiver.
    """
    is_static = decl.has_marker(GMarker.EXPORT_STATIC_PROPERTY)
    is_public = is_static or decl.has_marker(GMarker.EXPORT_PROPERTY)
    _check_exported(decl, is_public, "property")

    allowed = 0 if is_static else 1
    if len(decl.params) > allowed:
        kind = "Static" if is_static else "Instance"
        where = f" of {owner}" if owner else ""
        raise BadProperty(
            f"{kind} property {decl.name}{where} takes {len(decl.params)} parameter(s)",
            decl.name,
        )

    try:
        # Validate the receiver type even though it is not recorded
        for p in decl.params:
            convert_param(p, enum_names)
        return_type = normalize_type(decl.return_type, enum_names)
    except BadType as e:
        raise BadProperty(f"Property {decl.name}: {e.message}", decl.name) from e

    return PropertyInfo(
        name=decl.name,
        is_public=is_public,
        is_static=is_static,
        return_type=return_type,
        comments=tuple(decl.comments),
    )


def _check_exported(decl: GFunctionDecl, is_public: bool, kind: str) -> None:
    if not decl.name:
        raise BadProperty(f"Exported {kind} has no name")
    if not is_public:
        raise BadProperty(f"{decl.name} is not exported as a {kind}", decl.name)


def _tags(markers) -> tuple[str, ...]:
    return tuple(m.value if isinstance(m, GMarker) else str(m) for m in markers)
