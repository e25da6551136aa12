"""Tests for the declaration converters."""

import pytest

from cmanifest.grammar.models import (
    GEnumDecl,
    GEnumVariant,
    GField,
    GFunctionDecl,
    GInclude,
    GMarker,
    GParam,
    GPointer,
    GPrimitive,
    GScalar,
    GStructDecl,
    GStructIndicator,
    GStructRef,
    GType,
    GUnrecognized,
)
from cmanifest.ir.converters import (
    convert_enum,
    convert_import,
    convert_method,
    convert_param,
    convert_property,
    convert_struct,
    convert_struct_indicator,
)
from cmanifest.ir.errors import BadImport, BadObject, BadProperty, BadType
from cmanifest.ir.models import TypeVariant, VariantKind

BOOL = GType.mutable(GScalar(GPrimitive.BOOL))
WALLET_PTR = GType.const(GPointer(GStructRef("TWWallet")))


def _function(
    name="TWWalletIsValid",
    markers=(GMarker.EXPORT_METHOD,),
    params=None,
    return_type=BOOL,
    comments=(),
):
    return GFunctionDecl(
        name=name,
        return_type=return_type,
        params=params if params is not None else [GParam("wallet", WALLET_PTR)],
        markers=list(markers),
        comments=list(comments),
    )


# --- Imports ---


def test_import_split_into_segments():
    info = convert_import(GInclude("TrustWalletCore/TWBase.h"))
    assert info.path == ("TrustWalletCore", "TWBase.h")


def test_system_include_brackets_stripped():
    assert convert_import(GInclude("<stdint.h>")).path == ("stdint.h",)


@pytest.mark.parametrize("path", ["", "to//file.h", "../file.h", "TrustWalletCore/"])
def test_bad_import(path):
    with pytest.raises(BadImport):
        convert_import(GInclude(path))


# --- Structs ---


def test_struct_indicator_defaults():
    info = convert_struct_indicator(GStructIndicator("TWWallet"))
    assert info.name == "TWWallet"
    assert info.is_public is True
    assert info.fields == ()
    assert info.tags == ()


def test_struct_fields_in_order_and_tags_copied():
    decl = GStructDecl(
        name="TWPoint",
        fields=[
            GField("x", GType.mutable(GScalar(GPrimitive.INT32))),
            GField("y", GType.mutable(GScalar(GPrimitive.INT32))),
            GField("label", GType.const(GPointer(GUnrecognized("TWString")))),
        ],
        markers=[GMarker.EXPORT_STRUCT, "CUSTOM_TAG", "CUSTOM_TAG"],
    )
    info = convert_struct(decl)
    assert [name for name, _ in info.fields] == ["x", "y", "label"]
    assert info.fields[0][1].variant.kind == VariantKind.INT32
    assert info.fields[2][1].variant == TypeVariant.struct("TWString")
    assert info.tags == ("TW_EXPORT_STRUCT", "CUSTOM_TAG", "CUSTOM_TAG")
    assert info.is_public


def test_struct_with_bad_field_type():
    decl = GStructDecl(name="TWBroken", fields=[GField("data", GType.mutable(None))])
    with pytest.raises(BadObject) as exc:
        convert_struct(decl)
    assert isinstance(exc.value.__cause__, BadType)


def test_struct_with_unnamed_field():
    decl = GStructDecl(name="TWBroken", fields=[GField("", BOOL)])
    with pytest.raises(BadObject):
        convert_struct(decl)


# --- Enums ---


def test_enum_discriminant_states_preserved():
    decl = GEnumDecl(
        name="TWLetters",
        variants=[GEnumVariant("A", 0), GEnumVariant("B"), GEnumVariant("C", 5)],
    )
    info = convert_enum(decl)
    assert info.variants == (("A", 0), ("B", None), ("C", 5))


def test_enum_duplicate_variant():
    decl = GEnumDecl(name="TWDup", variants=[GEnumVariant("A"), GEnumVariant("A", 1)])
    with pytest.raises(BadObject):
        convert_enum(decl)


@pytest.mark.parametrize("value", [-1, "3", 1.5, True])
def test_enum_invalid_discriminant(value):
    decl = GEnumDecl(name="TWBad", variants=[GEnumVariant("A", value)])
    with pytest.raises(BadObject):
        convert_enum(decl)


# --- Params ---


def test_param_conversion():
    info = convert_param(GParam("wallet", WALLET_PTR))
    assert info.name == "wallet"
    assert info.ty.is_pointer and info.ty.is_constant


def test_param_bad_type_bubbles_up():
    with pytest.raises(BadType):
        convert_param(GParam("x", GType.mutable(None)))


# --- Methods ---


def test_static_method():
    info = convert_method(_function(markers=[GMarker.EXPORT_STATIC_METHOD]))
    assert info.is_static is True
    assert info.is_public is True
    assert info.return_type.variant.kind == VariantKind.BOOL


def test_instance_method():
    info = convert_method(_function(markers=[GMarker.EXPORT_METHOD]), owner="TWWallet")
    assert info.is_static is False
    assert info.is_public is True
    assert info.params[0].name == "wallet"


def test_method_comments_preserved_in_order():
    comments = ["/// Checks validity.", "///", "/// \\param wallet the wallet"]
    info = convert_method(_function(comments=comments))
    assert info.comments == tuple(comments)


def test_method_without_export_marker():
    with pytest.raises(BadProperty):
        convert_method(_function(markers=[]))


def test_method_bad_return_type():
    with pytest.raises(BadProperty):
        convert_method(_function(return_type=GType.mutable(None)))


def test_owner_named_in_error_message():
    with pytest.raises(BadProperty) as exc:
        convert_method(_function(return_type=GType.mutable(None)), owner="TWWallet")
    assert "of TWWallet" in str(exc.value)


def test_method_without_params():
    info = convert_method(_function(params=[]), owner="TWWallet")
    assert info.params == ()
    assert info.is_static is False


# --- Properties ---


def test_instance_property():
    info = convert_property(_function(name="TWWalletName", markers=[GMarker.EXPORT_PROPERTY]))
    assert info.is_static is False
    assert info.is_public is True
    assert not hasattr(info, "params")


def test_static_property_takes_no_params():
    decl = _function(name="TWWalletVersion", markers=[GMarker.EXPORT_STATIC_PROPERTY])
    with pytest.raises(BadProperty):
        convert_property(decl)

    decl.params = []
    assert convert_property(decl).is_static is True


def test_property_with_too_many_params():
    decl = _function(
        markers=[GMarker.EXPORT_PROPERTY],
        params=[GParam("wallet", WALLET_PTR), GParam("index", BOOL)],
    )
    with pytest.raises(BadProperty):
        convert_property(decl, owner="TWWallet")
