import pytest

from def_file_loader import parse_def_text
from diagnostics import DiagnosticError, DiagnosticKind
from model import INTEGER_TYPES
from repr_model_builder import build_repr_enum


def build(dsl):
    return build_repr_enum(parse_def_text(dsl, "repr.def").enums[0])


def build_error(dsl) -> DiagnosticError:
    with pytest.raises(DiagnosticError) as excinfo:
        build(dsl)
    return excinfo.value


def test_build_repr_enum():
    model = build('''
    /// Register select
    @derive(Debug, FromToRepr)
    @repr(u16)
    pub enum Reg {
        /// Control register
        Ctrl = 0x10,
        Status = 0x11,
        Data = 1 << 8,
    }
    ''')
    assert model.name == "Reg"
    assert model.repr_type is INTEGER_TYPES["u16"]
    assert [(m.name, m.discriminant) for m in model.members] == [("Ctrl", "0x10"), ("Status", "0x11"), ("Data", "1 << 8")]
    assert model.members[0].doc == "Control register"
    assert model.members[1].doc is None
    assert model.doc == "Register select"
    assert model.is_public
    assert model.file == "repr.def"


def test_repr_with_other_items_picks_integer_width():
    model = build('@derive(FromToRepr) @repr(C, i8) enum E { A = -1 }')
    assert model.repr_type.name == "i8"
    assert not model.is_public


def test_empty_enum_is_allowed():
    model = build('@derive(FromToRepr) @repr(u8) enum E {}')
    assert model.members == []


def test_missing_repr():
    err = build_error('@derive(FromToRepr)\nenum E { A = 1 }')
    assert err.kind == DiagnosticKind.MISSING_ATTRIBUTE
    # Points at the enum keyword
    assert (err.span.line, err.span.column) == (2, 1)


def test_repr_without_integer_type():
    err = build_error('@derive(FromToRepr) @repr(C) enum E { A = 1 }')
    assert err.kind == DiagnosticKind.MISSING_ATTRIBUTE
    assert "did not find an integer type" in err.message


def test_ambiguous_repr_reports_first_conflict_only():
    err = build_error('@derive(FromToRepr) @repr(u8, u16, u32) enum E { A = 1 }')
    assert err.kind == DiagnosticKind.AMBIGUOUS_ATTRIBUTE
    assert err.message.endswith("at least u8 and u16")


def test_ambiguous_repr_across_attributes():
    err = build_error('@derive(FromToRepr) @repr(u8) @repr(i64) enum E { A = 1 }')
    assert err.kind == DiagnosticKind.AMBIGUOUS_ATTRIBUTE
    assert "u8 and i64" in err.message


@pytest.mark.parametrize("repr_attr", ['@repr', '@repr(u8 = 1)', '@repr(, u8)'])
def test_malformed_repr(repr_attr):
    err = build_error(f'@derive(FromToRepr) {repr_attr} enum E {{ A = 1 }}')
    assert err.kind == DiagnosticKind.MALFORMED_ATTRIBUTE


def test_member_with_fields_is_unsupported():
    err = build_error('@derive(FromToRepr) @repr(u8) enum E {\n    A = 1,\n    B(u8),\n}')
    assert err.kind == DiagnosticKind.UNSUPPORTED_PAYLOAD
    assert "'B'" in err.message
    assert err.span.line == 3


def test_member_with_named_fields_is_unsupported():
    err = build_error('@derive(FromToRepr) @repr(u8) enum E { A { x: u8 } = 1 }')
    assert err.kind == DiagnosticKind.UNSUPPORTED_PAYLOAD


def test_missing_discriminant():
    err = build_error('@derive(FromToRepr) @repr(u8) enum E { A = 1, B }')
    assert err.kind == DiagnosticKind.MISSING_DISCRIMINANT
    assert "'B'" in err.message


def test_duplicate_member():
    err = build_error('@derive(FromToRepr) @repr(u8) enum E { A = 1, A = 2 }')
    assert err.kind == DiagnosticKind.DUPLICATE_MEMBER


def test_diagnostic_string_format():
    err = build_error('@derive(FromToRepr)\n@repr(u8)\nenum E {\n    A,\n}')
    assert str(err).startswith("repr.def:4:5: error[MissingDiscriminant]: ")


@pytest.mark.parametrize("discriminant", ['300', '-1', '1 << 8', '~0'])
def test_discriminant_outside_unsigned_range(discriminant):
    err = build_error(f'@derive(FromToRepr) @repr(u8) enum E {{\n    A = 1,\n    B = {discriminant},\n}}')
    assert err.kind == DiagnosticKind.DISCRIMINANT_OUT_OF_RANGE
    assert "'B'" in err.message and "(0..255)" in err.message
    # Points at the '='
    assert (err.span.line, err.span.column) == (3, 7)


def test_signed_range_boundaries():
    model = build('@derive(FromToRepr) @repr(i8) enum E { Min = -128, Max = 127, AllOnes = ~0 }')
    assert [m.discriminant for m in model.members] == ["-128", "127", "~0"]
    err = build_error('@derive(FromToRepr) @repr(i8) enum E { A = 128 }')
    assert err.kind == DiagnosticKind.DISCRIMINANT_OUT_OF_RANGE
    err = build_error('@derive(FromToRepr) @repr(i8) enum E { A = -129 }')
    assert err.kind == DiagnosticKind.DISCRIMINANT_OUT_OF_RANGE


def test_widest_unsigned_type_accepts_full_range():
    model = build('@derive(FromToRepr) @repr(u128) enum E { Max = (1 << 128) - 1 }')
    assert model.members[0].discriminant == "(1 << 128) - 1"
    err = build_error('@derive(FromToRepr) @repr(u128) enum E { Max = 1 << 128 }')
    assert err.kind == DiagnosticKind.DISCRIMINANT_OUT_OF_RANGE


@pytest.mark.parametrize("discriminant", ['1 << -1', '4 % 0'])
def test_unevaluable_discriminant(discriminant):
    err = build_error(f'@derive(FromToRepr) @repr(u8) enum E {{ A = {discriminant} }}')
    assert err.kind == DiagnosticKind.INVALID_DISCRIMINANT
    assert discriminant in err.message
