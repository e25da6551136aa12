"""Tests for the file manifest assembler."""

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
    GUnrecognizedItem,
)
from cmanifest.ir.assembler import AssemblerState, FileManifestAssembler, assemble_file
from cmanifest.ir.models import StructInfo, TypeVariant, VariantKind

BOOL = GType.mutable(GScalar(GPrimitive.BOOL))


def _fn(name, markers, params=(), return_type=BOOL):
    return GFunctionDecl(
        name=name, return_type=return_type, params=list(params), markers=list(markers)
    )


def _wallet_header():
    return [
        GStructIndicator("Wallet"),
        _fn("TWWalletCreateWithData", [GMarker.EXPORT_STATIC_METHOD]),
        _fn(
            "TWWalletIsValid",
            [GMarker.EXPORT_STATIC_METHOD],
            params=[GParam("ptr", GType.const(GPointer(GStructRef("Wallet"))))],
        ),
    ]


# --- Scenarios ---


def test_wallet_scenario():
    info, issues = assemble_file("wallet", _wallet_header())

    assert issues == []
    assert info.name == "wallet"
    assert info.structs == (
        StructInfo(name="Wallet", is_public=True, fields=(), tags=(), is_forward=True),
    )
    assert len(info.functions) == 1

    fn = info.functions[0]
    assert fn.name == "TWWalletIsValid"
    assert fn.is_public and fn.is_static
    assert fn.params[0].name == "ptr"
    assert fn.params[0].ty.variant == TypeVariant.struct("Wallet")
    assert fn.return_type.variant.kind == VariantKind.BOOL


def test_forward_then_full_definition_gives_two_entries():
    items = [
        GStructIndicator("TWPoint"),
        GStructDecl("TWPoint", fields=[GField("x", BOOL)]),
    ]
    info, _ = assemble_file("TWPoint", items)
    assert [s.name for s in info.structs] == ["TWPoint", "TWPoint"]
    assert info.structs[0].fields == ()
    assert len(info.structs[1].fields) == 1
    assert info.structs[0].is_forward
    assert not info.structs[1].is_forward


def test_empty_full_definition_is_not_forward():
    info, _ = assemble_file("TWEmpty", [GStructDecl("TWEmpty", fields=[])])
    assert info.structs[0].fields == ()
    assert info.structs[0].is_forward is False


def test_declaration_order_preserved():
    items = [
        GInclude("TrustWalletCore/TWBase.h"),
        GEnumDecl("TWB", variants=[GEnumVariant("X")]),
        _fn("TWWalletB", [GMarker.EXPORT_METHOD], params=[GParam("w", BOOL)]),
        GInclude("TrustWalletCore/TWData.h"),
        GEnumDecl("TWA", variants=[GEnumVariant("Y")]),
        _fn("TWWalletA", [GMarker.EXPORT_METHOD], params=[GParam("w", BOOL)]),
        GStructDecl("TWZ"),
        GStructDecl("TWY"),
    ]
    info, _ = assemble_file("TWWallet", items)
    assert [i.path[-1] for i in info.imports] == ["TWBase.h", "TWData.h"]
    assert [e.name for e in info.enums] == ["TWB", "TWA"]
    assert [f.name for f in info.functions] == ["TWWalletB", "TWWalletA"]
    assert [s.name for s in info.structs] == ["TWZ", "TWY"]


def test_enum_references_resolved_regardless_of_order():
    items = [
        _fn(
            "TWHDWalletGetKey",
            [GMarker.EXPORT_METHOD],
            params=[GParam("coin", GType.mutable(GUnrecognized("TWCoinType")))],
        ),
        GEnumDecl("TWCoinType", variants=[GEnumVariant("Bitcoin", 0)]),
    ]
    info, _ = assemble_file("TWHDWallet", items)
    assert info.functions[0].params[0].ty.variant == TypeVariant.enum("TWCoinType")


def test_signed_keyword_param_is_exported():
    items = [
        _fn(
            "TWDataAppendByte",
            [GMarker.EXPORT_METHOD],
            params=[GParam("c", GType.mutable(GUnrecognized("signed char")))],
        )
    ]
    info, issues = assemble_file("TWData", items)
    assert issues == []
    assert info.functions[0].params[0].ty.variant == TypeVariant(VariantKind.INT8)


def test_properties_collected():
    items = [
        _fn("TWWalletName", [GMarker.EXPORT_PROPERTY], params=[GParam("w", BOOL)]),
        _fn("TWWalletCount", [GMarker.EXPORT_STATIC_PROPERTY]),
    ]
    info, _ = assemble_file("TWWallet", items)
    assert [p.name for p in info.properties] == ["TWWalletName", "TWWalletCount"]
    assert [p.is_static for p in info.properties] == [False, True]
    assert info.functions == ()


# --- Error handling ---


def test_bad_declaration_skipped_and_reported():
    items = [
        GStructDecl("TWBroken", fields=[GField("x", GType.mutable(None))]),
        GStructDecl("TWGood", fields=[GField("x", BOOL)]),
        _fn("TWWalletSign", [GMarker.EXPORT_METHOD], return_type=GType.const(GPointer(None))),
        GInclude(""),
        GUnrecognizedItem("#pragma once"),
    ]
    info, issues = assemble_file("TWWallet", items)

    assert [s.name for s in info.structs] == ["TWGood"]
    assert info.functions == ()
    assert [i.code for i in issues] == ["BAD_OBJECT", "BAD_PROPERTY", "BAD_IMPORT"]
    assert issues[0].declaration == "TWBroken"
    assert issues[1].header == "TWWallet"


def test_unexported_and_lifecycle_functions_are_not_issues():
    items = [
        _fn("TWWalletHelper", []),
        _fn("TWWalletDelete", [GMarker.EXPORT_METHOD]),
    ]
    info, issues = assemble_file("TWWallet", items)
    assert info.functions == ()
    assert issues == []


# --- State machine ---


def test_state_transitions():
    assembler = FileManifestAssembler("TWWallet")
    assert assembler.state == AssemblerState.START

    assembler.feed(GStructIndicator("TWWallet"))
    assert assembler.state == AssemblerState.ACCUMULATING

    first = assembler.finalize()
    assert assembler.state == AssemblerState.FINALIZED
    assert assembler.finalize() is first

    with pytest.raises(RuntimeError):
        assembler.feed(GStructIndicator("TWOther"))


def test_empty_header_finalizes():
    info = FileManifestAssembler("TWEmpty").finalize()
    assert info.name == "TWEmpty"
    assert info.declaration_count == 0


def test_finalized_manifest_is_immutable():
    info, _ = assemble_file("wallet", _wallet_header())
    with pytest.raises(AttributeError):
        info.name = "other"
    assert isinstance(info.structs, tuple)


def test_assembly_is_deterministic():
    first, _ = assemble_file("wallet", _wallet_header())
    second, _ = assemble_file("wallet", _wallet_header())
    assert first == second
    assert first.to_dict() == second.to_dict()
