from lark import Lark, Transformer, v_args


# Grammar for enumeration declaration files (.def)
grammar = r"""
    start: enum_def*

    enum_def: (DOC_COMMENT | attribute)* visibility? ENUM_KW NAME "{" variant_list? "}"
    visibility: PUB_KW
    variant_list: variant ("," variant)* ","?

    variant: (DOC_COMMENT | attribute)* NAME variant_fields? discriminant?
    ?variant_fields: tuple_fields | named_fields
    tuple_fields: "(" (type_ref ("," type_ref)* ","?)? ")"
    named_fields: "{" (named_field ("," named_field)* ","?)? "}"
    named_field: NAME ":" type_ref
    discriminant: EQUALS expr

    type_ref: path type_args?
    type_args: "<" type_ref ("," type_ref)* ">"
    path: NAME (PATH_SEP NAME)*

    attribute: "@" path attr_args?
    attr_args: "(" attr_token* ")"
    ?attr_token: NAME
               | INT_LITERAL
               | STRING
               | EQUALS
               | COMMA
               | PATH_SEP
               | MINUS
               | attr_group
    attr_group: "(" attr_token* ")"

    ?expr: bit_or
    ?bit_or: bit_xor
           | bit_or "|" bit_xor -> or_op
    ?bit_xor: bit_and
            | bit_xor "^" bit_and -> xor_op
    ?bit_and: shift
            | bit_and "&" shift -> and_op
    ?shift: sum
          | shift "<<" sum -> lshift_op
          | shift ">>" sum -> rshift_op
    ?sum: product
        | sum "+" product -> add_op
        | sum "-" product -> sub_op
    ?product: unary
            | product "*" unary -> mul_op
            | product "%" unary -> mod_op
    ?unary: atom
          | "-" unary -> neg_op
          | "~" unary -> invert_op
    ?atom: INT_LITERAL -> int_literal
         | "(" expr ")" -> paren

    ENUM_KW: "enum"
    PUB_KW: "pub"
    EQUALS: "="
    COMMA: ","
    MINUS: "-"
    PATH_SEP: "::"
    INT_LITERAL: /0[xX](_?[0-9a-fA-F])+|0[oO](_?[0-7])+|0[bB](_?[01])+|[1-9](_?[0-9])*|0(_?0)*/
    NAME: /[a-zA-Z_][a-zA-Z0-9_]*/
    STRING: /"(\\.|[^"\\])*"/

    DOC_COMMENT: /\/\/\/[^\n]*/
    LOCAL_COMMENT: /\/\/(?!\/)[^\n]*/
    C_COMMENT: /\/\*[\s\S]*?\*\//
    %import common.WS
    %ignore WS
    %ignore LOCAL_COMMENT
    %ignore C_COMMENT
"""

parser = Lark(
    grammar,
    start='start',
    propagate_positions=True
)


@v_args(inline=True)
class DiscriminantRenderer(Transformer):
    """Renders a discriminant expression subtree as normalized source text.

    The expression grammar uses Python's operator precedence, so the text is
    valid Python and can be emitted as-is by the generators.
    """

    def int_literal(self, token):
        return str(token)

    def paren(self, inner):
        return f"({inner})"

    def neg_op(self, operand):
        return f"-{operand}"

    def invert_op(self, operand):
        return f"~{operand}"

    def _binary(op):
        def render(self, left, right):
            return f"{left} {op} {right}"
        return render

    or_op = _binary("|")
    xor_op = _binary("^")
    and_op = _binary("&")
    lshift_op = _binary("<<")
    rshift_op = _binary(">>")
    add_op = _binary("+")
    sub_op = _binary("-")
    mul_op = _binary("*")
    mod_op = _binary("%")

    del _binary


@v_args(inline=True)
class DiscriminantEvaluator(Transformer):
    """Computes the integer value of a discriminant expression subtree."""

    def int_literal(self, token):
        return int(str(token), 0)

    def paren(self, inner):
        return inner

    def neg_op(self, operand):
        return -operand

    def invert_op(self, operand):
        return ~operand

    def or_op(self, left, right):
        return left | right

    def xor_op(self, left, right):
        return left ^ right

    def and_op(self, left, right):
        return left & right

    def lshift_op(self, left, right):
        return left << right

    def rshift_op(self, left, right):
        return left >> right

    def add_op(self, left, right):
        return left + right

    def sub_op(self, left, right):
        return left - right

    def mul_op(self, left, right):
        return left * right

    def mod_op(self, left, right):
        return left % right


def render_discriminant(expr_node) -> str:
    # A bare literal is inlined by the grammar into a Tree('int_literal')
    return DiscriminantRenderer().transform(expr_node)


def evaluate_discriminant(expr_node) -> int:
    # Raises lark.exceptions.VisitError wrapping the arithmetic error (negative shift, modulo by zero)
    return DiscriminantEvaluator().transform(expr_node)


def parse_enum_dsl(text):
    return parser.parse(text)
