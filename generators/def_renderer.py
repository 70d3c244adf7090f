"""
Renders declarations back into .def source text.
Used for the expanded output: extended-form declarations come out without their
discriminants and without the consumed @from_to_other attribute, everything else
as written.
"""
import os
from typing import List

from early_model import EarlyEnum, EarlyVariant


def _doc_lines(doc: str, indent: str) -> List[str]:
    if not doc:
        return []
    return [f"{indent}/// {line}".rstrip() for line in doc.splitlines()]


def render_variant(variant: EarlyVariant, indent: str = "    ") -> List[str]:
    lines = _doc_lines(variant.doc, indent)
    lines.extend(f"{indent}{attr.text}" for attr in variant.attributes)
    text = variant.name
    if variant.field_style == EarlyVariant.TUPLE:
        text += "(" + ", ".join(f.type_text for f in variant.fields) + ")"
    elif variant.field_style == EarlyVariant.NAMED:
        text += " { " + ", ".join(f"{f.name}: {f.type_text}" for f in variant.fields) + " }"
    if variant.discriminant is not None:
        text += f" = {variant.discriminant.text}"
    lines.append(f"{indent}{text},")
    return lines


def render_enum(enum: EarlyEnum) -> str:
    lines = _doc_lines(enum.doc, "")
    lines.extend(attr.text for attr in enum.attributes)
    keyword = f"{enum.visibility} enum" if enum.visibility else "enum"
    if not enum.variants:
        lines.append(f"{keyword} {enum.name} {{}}")
        return "\n".join(lines)
    lines.append(f"{keyword} {enum.name} {{")
    for variant in enum.variants:
        lines.extend(render_variant(variant))
    lines.append("}")
    return "\n".join(lines)


def render_def(declarations: List[EarlyEnum]) -> str:
    return "\n\n".join(render_enum(enum) for enum in declarations) + "\n"


class DefRenderer:
    """
    Writes the expanded declarations to <output_dir>/<output_name>_expanded.def.
    """

    def __init__(self, declarations: List[EarlyEnum], output_dir: str, output_name: str = None):
        self.declarations = declarations
        self.output_dir = output_dir
        self.output_name = output_name if output_name else "enums"

    @property
    def output_path(self) -> str:
        return os.path.join(self.output_dir, f"{self.output_name}_expanded.def")

    def generate(self) -> bool:
        try:
            print(f"Generating expanded declarations in: {self.output_dir}")
            os.makedirs(self.output_dir, exist_ok=True)
            with open(self.output_path, "w", encoding="utf-8") as f:
                f.write(render_def(self.declarations))
        except OSError as e:
            print(f"Error writing expanded declarations {self.output_path}: {e}")
            return False
        return True
