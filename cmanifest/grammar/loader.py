"""Load a parsed-header dump into a HeaderDirectory.

The dump is what an external header parser writes out: a YAML (or JSON)
document mapping each header path to its ordered declarations::

    headers:
      include/TrustWalletCore/TWWallet.h:
        - kind: include
          path: TrustWalletCore/TWBase.h
        - kind: struct_indicator
          name: TWWallet
        - kind: function
          name: TWWalletIsValid
          markers: [TW_EXPORT_STATIC_METHOD]
          params:
            - name: wallet
              type: {qualifier: const, category: {pointer: {struct: TWWallet}}}
          return: {qualifier: mutable, category: bool}

Unknown item kinds load as GUnrecognizedItem and are ignored downstream. A
malformed type loads as-is and only its declaration is skipped later; a
document whose overall shape is wrong raises DumpFormatError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from cmanifest.grammar.models import (
    GEnumDecl,
    GEnumRef,
    GEnumVariant,
    GField,
    GFunctionDecl,
    GInclude,
    GNonNull,
    GNullable,
    GParam,
    GPointer,
    GPrimitive,
    GQualifier,
    GScalar,
    GStructDecl,
    GStructIndicator,
    GStructRef,
    GType,
    GUnparsed,
    GUnrecognized,
    GUnrecognizedItem,
    HeaderDirectory,
)


class DumpFormatError(ValueError):
    """Raised when a parsed-header dump does not have the expected shape."""


_WRAPPERS = {"pointer": GPointer, "nullable": GNullable, "nonnull": GNonNull}


def load_header_dump(dump_path: str | Path) -> HeaderDirectory:
    path = Path(dump_path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DumpFormatError(f"Invalid dump {path.name}: {e}") from e
    return parse_header_dump(data)


def parse_header_dump(data: Any) -> HeaderDirectory:
    if not isinstance(data, dict) or not isinstance(data.get("headers"), dict):
        raise DumpFormatError("Missing top-level 'headers' mapping")

    directory = HeaderDirectory()
    for header, items in data["headers"].items():
        if items is None:
            items = []
        if not isinstance(items, list):
            raise DumpFormatError(f"Declarations of {header} must be a list")
        directory.headers[Path(str(header))] = [
            _parse_item(item, f"{header}[{i}]") for i, item in enumerate(items)
        ]
    return directory


def _parse_item(item: Any, where: str):
    if not isinstance(item, dict):
        raise DumpFormatError(f"{where}: declaration must be a mapping")

    kind = item.get("kind")
    if kind == "include":
        return GInclude(path=_as_str(item.get("path")))
    if kind == "struct_indicator":
        return GStructIndicator(name=_as_str(item.get("name")))
    if kind == "struct":
        return GStructDecl(
            name=_as_str(item.get("name")),
            fields=[
                GField(name=_as_str(f.get("name")), ty=parse_type(f.get("type")))
                for f in _as_mapping_list(item.get("fields"), where)
            ],
            markers=_as_str_list(item.get("markers")),
        )
    if kind == "enum":
        return GEnumDecl(
            name=_as_str(item.get("name")),
            variants=[
                GEnumVariant(name=_as_str(v.get("name")), value=v.get("value"))
                for v in _as_mapping_list(item.get("variants"), where)
            ],
            markers=_as_str_list(item.get("markers")),
        )
    if kind == "function":
        return GFunctionDecl(
            name=_as_str(item.get("name")),
            return_type=parse_type(item.get("return", "void")),
            params=[
                GParam(
                    name=_as_str(p.get("name")),
                    ty=parse_type(p.get("type")),
                    markers=_as_str_list(p.get("markers")),
                )
                for p in _as_mapping_list(item.get("params"), where)
            ],
            markers=_as_str_list(item.get("markers")),
            comments=_as_str_list(item.get("comments")),
        )
    return GUnrecognizedItem(raw=str(kind or ""))


def parse_type(value: Any) -> GType:
    """Parse a type entry. A bare string is a mutable type with that keyword.

    Malformed entries never raise: a missing type loads with no category and an
    unknown qualifier is kept as its raw text, so only the declaration holding
    it is rejected later by the normalizer.
    """
    if isinstance(value, str):
        return GType(GQualifier.MUTABLE, parse_category(value))
    if not isinstance(value, dict):
        return GType(GQualifier.MUTABLE, None if value is None else GUnparsed(repr(value)))

    raw_qualifier = value.get("qualifier", "mutable")
    try:
        qualifier = GQualifier(raw_qualifier)
    except ValueError:
        qualifier = str(raw_qualifier)
    return GType(qualifier, parse_category(value.get("category")))


def parse_category(value: Any):
    """Parse a type category; malformed shapes are kept for the normalizer to reject."""
    if value is None:
        return None
    if isinstance(value, str):
        primitive = GPrimitive.from_keyword(value)
        if primitive is not None:
            return GScalar(primitive)
        return GUnrecognized(value.strip())
    if isinstance(value, dict) and len(value) == 1:
        key, inner = next(iter(value.items()))
        if key in _WRAPPERS:
            return _WRAPPERS[key](parse_category(inner))
        if key in ("struct", "enum") and isinstance(inner, str):
            return GStructRef(inner) if key == "struct" else GEnumRef(inner)
    return GUnparsed(repr(value))


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    raise DumpFormatError(f"Expected a list of strings, got {value!r}")


def _as_mapping_list(value: Any, where: str) -> list[dict]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise DumpFormatError(f"{where}: expected a list of mappings")
    return value
