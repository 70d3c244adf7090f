"""
repr_model_builder.py
Builds the simple-form ReprEnum model from a declaration carrying @derive(FromToRepr)
and an integer @repr attribute. Read-only; the declaration is not modified.
"""
from typing import List, Optional

from config_parser import parse_meta_list
from diagnostics import DiagnosticError, DiagnosticKind, Span
from early_model import EarlyAttribute, EarlyEnum, EarlyVariant
from model import INTEGER_TYPES, IntegerType, ReprEnum, ReprMember

DIRECTIVE = "FromToRepr"


def attribute_items(attr: EarlyAttribute, kind: DiagnosticKind = DiagnosticKind.MALFORMED_ATTRIBUTE):
    """
    Parse an identifier-list attribute such as @repr(u8) or @derive(FromToRepr).
    Any syntax problem is reported as a malformed attribute.
    """
    if attr.args is None:
        raise DiagnosticError(kind, f"failed to parse @{attr.path} attribute as a list; expected @{attr.path}(...)", Span.of(attr))
    try:
        return parse_meta_list(attr.args, attr.file, Span.of(attr))
    except DiagnosticError as e:
        raise DiagnosticError(kind, f"failed to parse @{attr.path}(...) attribute: {e.message}", e.span) from e


def check_unique_member_names(enum: EarlyEnum):
    seen = set()
    for variant in enum.variants:
        if variant.name in seen:
            raise DiagnosticError(DiagnosticKind.DUPLICATE_MEMBER,
                                  f"member '{variant.name}' is declared more than once in '{enum.name}'",
                                  Span.of(variant))
        seen.add(variant.name)


def find_repr_type(enum: EarlyEnum) -> IntegerType:
    repr_attrs = enum.attributes_named("repr")
    if not repr_attrs:
        raise DiagnosticError(DiagnosticKind.MISSING_ATTRIBUTE,
                              f"@derive({DIRECTIVE}) can only be applied to enums with a @repr(...) attribute",
                              Span(enum.file, enum.keyword_line, enum.keyword_column))
    found: Optional[str] = None
    for attr in repr_attrs:
        for item in attribute_items(attr):
            ident = item.get_ident()
            if ident not in INTEGER_TYPES:
                continue
            if found is not None:
                # Only the first conflicting pair is reported
                raise DiagnosticError(DiagnosticKind.AMBIGUOUS_ATTRIBUTE,
                                      f"@derive({DIRECTIVE}) found multiple types in @repr(...) -- at least {found} and {ident}",
                                      Span.of(item.path_tokens[0], enum.file))
            found = ident
    if found is None:
        raise DiagnosticError(DiagnosticKind.MISSING_ATTRIBUTE,
                              f"@derive({DIRECTIVE}) did not find an integer type in @repr(...)",
                              Span.of(repr_attrs[0]))
    return INTEGER_TYPES[found]


def check_discriminant_range(variant: EarlyVariant, int_type: IntegerType):
    """The discriminant must evaluate to a value of int_type, or encode would return a non-member of the type."""
    discriminant = variant.discriminant
    if discriminant.value is None:
        raise DiagnosticError(DiagnosticKind.INVALID_DISCRIMINANT,
                              f"discriminant of member '{variant.name}' cannot be evaluated: {discriminant.text}",
                              Span.of(discriminant))
    if not int_type.min_value <= discriminant.value <= int_type.max_value:
        raise DiagnosticError(DiagnosticKind.DISCRIMINANT_OUT_OF_RANGE,
                              f"discriminant of member '{variant.name}' is {discriminant.value}, outside the range of "
                              f"{int_type.name} ({int_type.min_value}..{int_type.max_value})",
                              Span.of(discriminant))


def build_repr_member(variant: EarlyVariant, repr_type: IntegerType) -> ReprMember:
    if variant.fields:
        raise DiagnosticError(DiagnosticKind.UNSUPPORTED_PAYLOAD,
                              f"@derive({DIRECTIVE}) cannot be used on enums whose members have fields (member '{variant.name}')",
                              Span.of(variant))
    if variant.discriminant is None:
        raise DiagnosticError(DiagnosticKind.MISSING_DISCRIMINANT,
                              f"@derive({DIRECTIVE}) requires that all enum members have explicit discriminants (member '{variant.name}')",
                              Span.of(variant))
    check_discriminant_range(variant, repr_type)
    return ReprMember(variant.name, variant.discriminant.text, doc=variant.doc or None, line=variant.line)


def build_repr_enum(enum: EarlyEnum) -> ReprEnum:
    repr_type = find_repr_type(enum)
    check_unique_member_names(enum)
    members: List[ReprMember] = [build_repr_member(v, repr_type) for v in enum.variants]
    return ReprEnum(enum.name, repr_type, members, visibility=enum.visibility,
                    doc=enum.doc or None, file=enum.file, line=enum.line)
