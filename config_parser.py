# config_parser.py
# Parses the raw token list of a directive attribute, e.g. the inside of
# @from_to_other(base_type = u8, comparison_mode = "none")

from typing import Any, List, Optional

from lark import Token, Tree

from diagnostics import DiagnosticError, DiagnosticKind, Span


class KeyValuePair:
    def __init__(self, path: str, path_tokens: List[Token], eq_token: Token, value: Any):
        self.path = path # '::'-joined identifier path
        self.path_tokens = path_tokens
        self.eq_token = eq_token
        self.value = value # A single Token or a Tree('attr_group')

    def is_ident(self, name: str) -> bool:
        return len(self.path_tokens) == 1 and self.path == name

    def __repr__(self):
        return f"KeyValuePair({self.path!r}, {describe_token_tree(self.value)!r})"


class MetaItem:
    """One entry of an identifier-list attribute: a path with an optional parenthesised group."""

    def __init__(self, path: str, path_tokens: List[Token], group: Optional[Tree] = None):
        self.path = path
        self.path_tokens = path_tokens
        self.group = group

    def get_ident(self) -> Optional[str]:
        if self.group is None and len(self.path_tokens) == 1:
            return self.path
        return None


def describe_token_tree(node) -> str:
    if isinstance(node, Token):
        return str(node)
    return "(" + " ".join(describe_token_tree(c) for c in node.children) + ")"


class TokenCursor:
    def __init__(self, tokens: List[Any], file: Optional[str] = None, end_span: Optional[Span] = None):
        self.tokens = list(tokens)
        self.pos = 0
        self.file = file
        self.end_span = end_span

    def peek(self) -> Optional[Any]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def next(self) -> Optional[Any]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def peek_is(self, token_type: str) -> bool:
        token = self.peek()
        return isinstance(token, Token) and token.type == token_type

    def expect(self, token_type: str, what: str) -> Token:
        token = self.next()
        if not isinstance(token, Token) or token.type != token_type:
            self.fail(f"expected {what}, found {self._describe(token)}", token)
        return token

    def has_tokens(self) -> bool:
        return self.pos < len(self.tokens)

    def span_of(self, token) -> Span:
        if token is None:
            return self.end_span or Span(self.file, None, None)
        return Span.of(token, self.file)

    def fail(self, message: str, token=None):
        raise DiagnosticError(DiagnosticKind.SYNTAX_ERROR, message, self.span_of(token))

    @staticmethod
    def _describe(token) -> str:
        if token is None:
            return "end of arguments"
        return f"'{describe_token_tree(token)}'"


def _parse_path(cursor: TokenCursor) -> List[Token]:
    path_tokens = [cursor.expect('NAME', "an identifier")]
    while cursor.peek_is('PATH_SEP'):
        cursor.next()
        path_tokens.append(cursor.expect('NAME', "an identifier after '::'"))
    return path_tokens


def _parse_separator(cursor: TokenCursor) -> bool:
    """Consume a ',' between items. Returns False once the list is finished."""
    if not cursor.has_tokens():
        return False
    cursor.expect('COMMA', "',' between arguments")
    return cursor.has_tokens()


def parse_key_value_pairs(tokens: List[Any], file: Optional[str] = None, end_span: Optional[Span] = None) -> List[KeyValuePair]:
    """
    Parse `path = value, path = value,` where each value is a single token or a
    parenthesised group. Only syntax is checked here.
    """
    cursor = TokenCursor(tokens, file, end_span)
    pairs = []
    more = cursor.has_tokens()
    while more:
        path_tokens = _parse_path(cursor)
        eq_token = cursor.expect('EQUALS', "'=' after argument name")
        value = cursor.next()
        if value is None or (isinstance(value, Token) and value.type in ('COMMA', 'EQUALS', 'PATH_SEP')):
            cursor.fail("expected a value after '='", value)
        pairs.append(KeyValuePair("::".join(path_tokens), path_tokens, eq_token, value))
        more = _parse_separator(cursor)
    return pairs


def parse_meta_list(tokens: List[Any], file: Optional[str] = None, end_span: Optional[Span] = None) -> List[MetaItem]:
    """Parse `item, item(...), a::b,` as used by @repr and @derive."""
    cursor = TokenCursor(tokens, file, end_span)
    items = []
    more = cursor.has_tokens()
    while more:
        path_tokens = _parse_path(cursor)
        group = None
        if isinstance(cursor.peek(), Tree):
            group = cursor.next()
        items.append(MetaItem("::".join(path_tokens), path_tokens, group))
        more = _parse_separator(cursor)
    return items
