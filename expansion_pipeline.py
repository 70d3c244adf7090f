"""
expansion_pipeline.py
Finds the generation directive on each declaration of an EarlyModel, runs the
matching model builder and collects the results. Declarations are independent:
an error aborts only the declaration it belongs to, and nothing is shared
between declarations.
"""
from typing import List, Optional, Tuple, Union

from diagnostics import DiagnosticError, DiagnosticKind, Span
from early_model import EarlyAttribute, EarlyEnum, EarlyModel
from model import OtherEnum, ReprEnum
import other_model_builder
import repr_model_builder


class Expansion:
    """The outcome of one directive invocation."""

    REPR = "repr"
    OTHER = "other"
    PASSTHROUGH = "passthrough"

    def __init__(self, kind: str, declaration: EarlyEnum, model: Optional[Union[ReprEnum, OtherEnum]] = None):
        self.kind = kind
        self.declaration = declaration # What to re-emit in place of the original declaration
        self.model = model # None for declarations without a directive

    def __repr__(self):
        return f"Expansion({self.kind!r}, {self.declaration.name!r})"


class ExpansionResult:
    def __init__(self, expansions: List[Expansion], errors: List[DiagnosticError]):
        self.expansions = expansions
        self.errors = errors

    @property
    def ok(self) -> bool:
        return not self.errors


def find_directive(enum: EarlyEnum) -> Tuple[Optional[str], Optional[EarlyAttribute]]:
    """Return (kind, attribute) for the directive on enum, or (None, None)."""
    found = []
    for attr in enum.attributes_named("derive"):
        for item in repr_model_builder.attribute_items(attr):
            if item.get_ident() == repr_model_builder.DIRECTIVE:
                found.append((Expansion.REPR, attr))
    for attr in enum.attributes_named(other_model_builder.DIRECTIVE):
        found.append((Expansion.OTHER, attr))
    if len(found) > 1:
        raise DiagnosticError(DiagnosticKind.CONFLICTING_DIRECTIVES,
                              f"enum '{enum.name}' may carry only one of @derive({repr_model_builder.DIRECTIVE}) "
                              f"and @{other_model_builder.DIRECTIVE}(...), once",
                              Span.of(found[1][1]))
    if found:
        return found[0]
    return None, None


def expand_enum(enum: EarlyEnum) -> Expansion:
    kind, attr = find_directive(enum)
    if kind == Expansion.REPR:
        return Expansion(kind, enum, repr_model_builder.build_repr_enum(enum))
    if kind == Expansion.OTHER:
        model = other_model_builder.build_other_enum(enum, attr)
        return Expansion(kind, enum.stripped(consumed=attr), model)
    return Expansion(Expansion.PASSTHROUGH, enum)


class ExpansionPipeline:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.errors: List[DiagnosticError] = []

    def debug_print(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}")

    def log_error(self, error: DiagnosticError) -> None:
        self.errors.append(error)
        if self.verbose:
            print(f"[ERROR] {error}")

    def run(self, early_model: EarlyModel) -> ExpansionResult:
        self.errors = []
        expansions = []
        seen_names = set()
        for enum in early_model.enums:
            if enum.name in seen_names:
                self.log_error(DiagnosticError(DiagnosticKind.DUPLICATE_DECLARATION,
                                               f"enum '{enum.name}' is declared more than once",
                                               Span.of(enum)))
                continue
            seen_names.add(enum.name)
            try:
                expansion = expand_enum(enum)
            except DiagnosticError as e:
                self.log_error(e)
                continue
            self.debug_print(f"expanded enum '{enum.name}' as {expansion.kind} ({len(enum.variants)} members)")
            expansions.append(expansion)
        return ExpansionResult(expansions, list(self.errors))


def expand_early_model(early_model: EarlyModel, verbose: bool = False) -> ExpansionResult:
    return ExpansionPipeline(verbose).run(early_model)
