"""
diagnostics.py
Error taxonomy and source locations for ReprWrangler. Every validation failure
is raised as a DiagnosticError pointing at the most specific construct available.
"""
from enum import Enum
from typing import Any, Optional


class DiagnosticKind(Enum):
    # Grammar
    PARSE_ERROR = "ParseError"
    SYNTAX_ERROR = "SyntaxError"
    # Shape
    MISSING_ATTRIBUTE = "MissingAttribute"
    AMBIGUOUS_ATTRIBUTE = "AmbiguousAttribute"
    MALFORMED_ATTRIBUTE = "MalformedAttribute"
    UNSUPPORTED_PAYLOAD = "UnsupportedPayload"
    MISSING_DISCRIMINANT = "MissingDiscriminant"
    INVALID_DISCRIMINANT = "InvalidDiscriminant"
    DISCRIMINANT_OUT_OF_RANGE = "DiscriminantOutOfRange"
    CONFLICTING_SHAPE = "ConflictingShape"
    MULTIPLE_CATCH_ALLS = "MultipleCatchAlls"
    INVALID_CATCH_ALL_SHAPE = "InvalidCatchAllShape"
    MISSING_CATCH_ALL = "MissingCatchAll"
    DUPLICATE_MEMBER = "DuplicateMember"
    DUPLICATE_DECLARATION = "DuplicateDeclaration"
    CONFLICTING_DIRECTIVES = "ConflictingDirectives"
    # Configuration
    UNKNOWN_ARGUMENT = "UnknownArgument"
    DUPLICATE_ARGUMENT = "DuplicateArgument"
    INVALID_ARGUMENT_VALUE = "InvalidArgumentValue"
    MISSING_REQUIRED_ARGUMENT = "MissingRequiredArgument"


class Span:
    """A position in a source file (1-based line and column)."""

    def __init__(self, file: Optional[str], line: Optional[int], column: Optional[int] = None):
        self.file = file
        self.line = line
        self.column = column

    @classmethod
    def of(cls, node: Any, file: Optional[str] = None) -> 'Span':
        """
        Build a span from anything carrying position information: an early model
        object (file/line/column attributes), a lark Token, or a lark Tree with
        propagated positions.
        """
        if node is None:
            return cls(file, None, None)
        meta = getattr(node, 'meta', None)
        if meta is not None and not getattr(meta, 'empty', True):
            return cls(file, meta.line, meta.column)
        return cls(getattr(node, 'file', None) or file, getattr(node, 'line', None), getattr(node, 'column', None))

    def __str__(self):
        parts = [self.file or "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def __repr__(self):
        return f"Span(file={self.file!r}, line={self.line!r}, column={self.column!r})"


class DiagnosticError(Exception):
    """A user-facing generation error. No output is produced for the failing declaration."""

    def __init__(self, kind: DiagnosticKind, message: str, span: Optional[Span] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.span = span or Span(None, None)

    def __str__(self):
        return f"{self.span}: error[{self.kind.value}]: {self.message}"

    def __repr__(self):
        return f"DiagnosticError({self.kind.value}, {self.message!r}, {self.span!r})"
