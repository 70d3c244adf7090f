"""
other_model_builder.py
Builds the extended-form OtherEnum model for declarations carrying
@from_to_other(base_type = ..., comparison_mode = ...).

Configuration is walked once, then the members are walked once. Each member is
classified into a PlainMember or a CatchAllMember on the spot; anything else is
rejected, so the generators never have to inspect member shapes again.
"""
import ast
from typing import List, Optional

from lark import Token

from config_parser import KeyValuePair, describe_token_tree, parse_key_value_pairs
from diagnostics import DiagnosticError, DiagnosticKind, Span
from early_model import EarlyAttribute, EarlyEnum, EarlyVariant
from model import (
    INTEGER_TYPES,
    CatchAllMember,
    ClassifiedMember,
    ComparisonMode,
    IntegerType,
    OtherEnum,
    PlainMember,
)
from repr_model_builder import check_discriminant_range, check_unique_member_names

DIRECTIVE = "from_to_other"

# Both spellings name the same setting
COMPARISON_KEYS = ("comparison_mode", "derive_compare")

COMPARISON_VALUES = {
    "none": ComparisonMode.NONE,
    "declared-order": ComparisonMode.DECLARED_ORDER,
    "value-based": ComparisonMode.VALUE_BASED,
    "as_enum": ComparisonMode.DECLARED_ORDER,
    "as_int": ComparisonMode.VALUE_BASED,
}


class OtherConfig:
    def __init__(self, base_type: IntegerType, comparison_mode: ComparisonMode):
        self.base_type = base_type
        self.comparison_mode = comparison_mode


def _parse_base_type(arg: KeyValuePair, file: str) -> IntegerType:
    value = arg.value
    if isinstance(value, Token) and value.type == 'NAME' and str(value) in INTEGER_TYPES:
        return INTEGER_TYPES[str(value)]
    raise DiagnosticError(DiagnosticKind.INVALID_ARGUMENT_VALUE,
                          f"\"base_type\" value must be an integral type like u8, found '{describe_token_tree(value)}'",
                          Span.of(value, file))


def _parse_comparison_mode(arg: KeyValuePair, file: str) -> ComparisonMode:
    value = arg.value
    key = arg.path
    if not (isinstance(value, Token) and value.type == 'STRING'):
        raise DiagnosticError(DiagnosticKind.INVALID_ARGUMENT_VALUE,
                              f"\"{key}\" value must be a string literal",
                              Span.of(value, file))
    try:
        text = ast.literal_eval(str(value))
    except (ValueError, SyntaxError) as e:
        raise DiagnosticError(DiagnosticKind.INVALID_ARGUMENT_VALUE,
                              f"\"{key}\" value must be a string literal", Span.of(value, file)) from e
    if text not in COMPARISON_VALUES:
        raise DiagnosticError(DiagnosticKind.INVALID_ARGUMENT_VALUE,
                              f"\"{key}\" value must be one of: \"none\", \"declared-order\", \"value-based\"",
                              Span.of(value, file))
    return COMPARISON_VALUES[text]


def parse_other_config(attr: EarlyAttribute, enum: EarlyEnum) -> OtherConfig:
    args = parse_key_value_pairs(attr.args or [], attr.file, Span.of(attr))

    base_type: Optional[IntegerType] = None
    comparison_mode = ComparisonMode.NONE
    comparison_set = False
    for arg in args:
        if arg.is_ident("base_type"):
            if base_type is not None:
                raise DiagnosticError(DiagnosticKind.DUPLICATE_ARGUMENT,
                                      "cannot set \"base_type\" more than once",
                                      Span.of(arg.path_tokens[0], attr.file))
            base_type = _parse_base_type(arg, attr.file)
        elif any(arg.is_ident(key) for key in COMPARISON_KEYS):
            if comparison_set:
                raise DiagnosticError(DiagnosticKind.DUPLICATE_ARGUMENT,
                                      f"cannot set \"{arg.path}\" more than once",
                                      Span.of(arg.path_tokens[0], attr.file))
            comparison_mode = _parse_comparison_mode(arg, attr.file)
            comparison_set = True
        else:
            raise DiagnosticError(DiagnosticKind.UNKNOWN_ARGUMENT,
                                  f"unknown argument \"{arg.path}\"; expected \"base_type\" or \"comparison_mode\"",
                                  Span.of(arg.eq_token, attr.file))

    if base_type is None:
        raise DiagnosticError(DiagnosticKind.MISSING_REQUIRED_ARGUMENT,
                              f"\"base_type\" argument on \"{DIRECTIVE}\" attribute is required, e.g. @{DIRECTIVE}(base_type = u8)",
                              Span(enum.file, enum.keyword_line, enum.keyword_column))
    return OtherConfig(base_type, comparison_mode)


def classify_member(variant: EarlyVariant, base_type: IntegerType, catch_all_name: Optional[str] = None) -> ClassifiedMember:
    doc = variant.doc or None
    if variant.discriminant is not None:
        if variant.fields:
            raise DiagnosticError(DiagnosticKind.CONFLICTING_SHAPE,
                                  f"enum member '{variant.name}' must have either a field or a discriminant, not both",
                                  Span.of(variant))
        check_discriminant_range(variant, base_type)
        return PlainMember(variant.name, variant.discriminant.text, doc=doc, line=variant.line)

    if len(variant.fields) != 1:
        message = (f"member '{variant.name}' has no discriminant; all members must have a discriminant, "
                   f"except the \"other\" member, which must contain exactly one field")
        if catch_all_name is not None:
            message += f" ('{catch_all_name}' is already the \"other\" member)"
        raise DiagnosticError(DiagnosticKind.INVALID_CATCH_ALL_SHAPE, message, Span.of(variant))
    field = variant.fields[0]
    if field.name is not None:
        raise DiagnosticError(DiagnosticKind.INVALID_CATCH_ALL_SHAPE,
                              f"the \"other\" member's field must be unnamed (found '{field.name}')",
                              Span.of(field))
    if field.type_text != base_type.name:
        raise DiagnosticError(DiagnosticKind.INVALID_CATCH_ALL_SHAPE,
                              f"the \"other\" member's field must be of the enum's base type {base_type.name}, found '{field.type_text}'",
                              Span.of(field))
    return CatchAllMember(variant.name, base_type, doc=doc, line=variant.line)


def build_other_enum(enum: EarlyEnum, attr: EarlyAttribute) -> OtherEnum:
    config = parse_other_config(attr, enum)
    check_unique_member_names(enum)

    members: List[ClassifiedMember] = []
    catch_all: Optional[CatchAllMember] = None
    for variant in enum.variants:
        member = classify_member(variant, config.base_type, catch_all.name if catch_all else None)
        if isinstance(member, CatchAllMember):
            if catch_all is not None:
                raise DiagnosticError(DiagnosticKind.MULTIPLE_CATCH_ALLS,
                                      f"only one member (the \"other\" member) may contain a field instead of a discriminant; "
                                      f"'{catch_all.name}' already is one, '{member.name}' cannot be another",
                                      Span.of(variant))
            catch_all = member
        members.append(member)

    if catch_all is None:
        raise DiagnosticError(DiagnosticKind.MISSING_CATCH_ALL,
                              f"the enumeration '{enum.name}' does not have an \"other\" member for unmatched values",
                              Span.of(enum))

    return OtherEnum(enum.name, config.base_type, members, comparison_mode=config.comparison_mode,
                     visibility=enum.visibility, doc=enum.doc or None, file=enum.file, line=enum.line)
