# def_file_loader.py
# Reads .def files and builds the EarlyModel from the lark parse tree.
import os
from lark import Token, Tree
from lark.exceptions import UnexpectedInput, VisitError
from lark_parser import evaluate_discriminant, parse_enum_dsl, render_discriminant
from early_model import EarlyModel, EarlyEnum, EarlyVariant, EarlyField, EarlyDiscriminant, EarlyAttribute
from diagnostics import DiagnosticError, DiagnosticKind, Span

# Convenience function to load a .def file and return an EarlyModel

def load_def_file(def_file_path: str) -> EarlyModel:
    with open(def_file_path, 'r', encoding='utf-8') as f:
        text = f.read()
    return parse_def_text(text, def_file_path)

def parse_def_text(text: str, file: str = "<input>") -> EarlyModel:
    try:
        tree = parse_enum_dsl(text)
    except UnexpectedInput as e:
        line = getattr(e, 'line', None)
        column = getattr(e, 'column', None)
        if line is not None and line < 0:
            line, column = None, None
        context = e.get_context(text).strip() if line is not None else ""
        message = "invalid declaration syntax"
        if context:
            message += f" near: {context.splitlines()[0].strip()}"
        raise DiagnosticError(DiagnosticKind.PARSE_ERROR, message, Span(file, line, column)) from e
    return _build_early_model_from_lark_tree(tree, text, file)

def render_attr_tokens(items) -> str:
    """Render raw attribute argument tokens back to normalized text, e.g. 'base_type = u8, x = (1, 2)'."""
    out = ""
    prev = None
    for item in items:
        if isinstance(item, Tree):
            piece, kind = "(" + render_attr_tokens(item.children) + ")", 'GROUP'
        else:
            piece, kind = str(item), item.type
        glued = (prev is None or kind in ('COMMA', 'PATH_SEP') or prev in ('PATH_SEP', 'MINUS')
                 or (kind == 'GROUP' and prev == 'NAME'))
        out += piece if glued else " " + piece
        prev = kind
    return out

def _build_early_model_from_lark_tree(tree: Tree, text: str, file: str) -> EarlyModel:
    """Build an EarlyModel from a lark parse tree, capturing raw information."""

    def type_text(type_node: Tree) -> str:
        # 'u8', 'core::u8', 'Vec<u16>', 'Map<u8, Vec<u8>>'
        out = ""
        for child in type_node.children:
            if child.data == 'path':
                out += parse_path(child)
            else:
                out += "<" + ", ".join(type_text(arg) for arg in child.children) + ">"
        return out

    def collect_doc(doc_tokens):
        lines = []
        for tok in doc_tokens:
            content = str(tok)[3:]
            if content.startswith(" "):
                content = content[1:]
            lines.append(content.rstrip())
        return "\n".join(lines)

    def parse_path(path_node: Tree) -> str:
        return "::".join(str(tok) for tok in path_node.children if tok.type == 'NAME')

    def parse_attribute(attr_node: Tree) -> EarlyAttribute:
        path = None
        args = None
        for child in attr_node.children:
            if isinstance(child, Tree) and child.data == 'path':
                path = parse_path(child)
            elif isinstance(child, Tree) and child.data == 'attr_args':
                args = list(child.children)
        attr_text = f"@{path}" if args is None else f"@{path}({render_attr_tokens(args)})"
        return EarlyAttribute(path, args, attr_text, file, attr_node.meta.line, attr_node.meta.column)

    def parse_fields(fields_node: Tree):
        fields = []
        if fields_node.data == 'tuple_fields':
            for type_node in fields_node.children:
                fields.append(EarlyField(None, type_text(type_node), file, type_node.meta.line, type_node.meta.column))
            return fields, EarlyVariant.TUPLE
        for named in fields_node.children:
            name_tok, type_node = named.children
            fields.append(EarlyField(str(name_tok), type_text(type_node), file, name_tok.line, name_tok.column))
        return fields, EarlyVariant.NAMED

    def parse_variant(variant_node: Tree) -> EarlyVariant:
        doc_tokens = []
        attributes = []
        name_tok = None
        fields = []
        field_style = EarlyVariant.UNIT
        discriminant = None
        for child in variant_node.children:
            if isinstance(child, Token) and child.type == 'DOC_COMMENT':
                doc_tokens.append(child)
            elif isinstance(child, Token) and child.type == 'NAME':
                name_tok = child
            elif isinstance(child, Tree) and child.data == 'attribute':
                attributes.append(parse_attribute(child))
            elif isinstance(child, Tree) and child.data in ('tuple_fields', 'named_fields'):
                fields, field_style = parse_fields(child)
            elif isinstance(child, Tree) and child.data == 'discriminant':
                eq_tok, expr_node = child.children
                try:
                    value = evaluate_discriminant(expr_node)
                except VisitError:
                    value = None
                discriminant = EarlyDiscriminant(render_discriminant(expr_node), value, file, eq_tok.line, eq_tok.column)
        return EarlyVariant(str(name_tok), fields, field_style, discriminant, file, name_tok.line, name_tok.column,
                            attributes=attributes, doc=collect_doc(doc_tokens))

    def parse_enum(enum_node: Tree) -> EarlyEnum:
        doc_tokens = []
        attributes = []
        visibility = ""
        keyword_tok = None
        name_tok = None
        variants = []
        for child in enum_node.children:
            if isinstance(child, Token) and child.type == 'DOC_COMMENT':
                doc_tokens.append(child)
            elif isinstance(child, Token) and child.type == 'ENUM_KW':
                keyword_tok = child
            elif isinstance(child, Token) and child.type == 'NAME':
                name_tok = child
            elif isinstance(child, Tree) and child.data == 'attribute':
                attributes.append(parse_attribute(child))
            elif isinstance(child, Tree) and child.data == 'visibility':
                visibility = str(child.children[0])
            elif isinstance(child, Tree) and child.data == 'variant_list':
                variants = [parse_variant(v) for v in child.children]
        return EarlyEnum(str(name_tok), variants, file, name_tok.line, name_tok.column,
                         attributes=attributes, visibility=visibility, doc=collect_doc(doc_tokens),
                         keyword_line=keyword_tok.line, keyword_column=keyword_tok.column)

    enums = [parse_enum(node) for node in tree.children if isinstance(node, Tree) and node.data == 'enum_def']
    return EarlyModel(enums, file, text)

def output_name_for(def_file_path: str) -> str:
    return os.path.splitext(os.path.basename(def_file_path))[0]
