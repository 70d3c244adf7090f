"""
Python generator for expanded enumerations.
Outputs one self-contained Python 3 module holding, for every directive-annotated
enumeration, the enumeration type together with its decode/encode conversions and
(when requested) comparison operations.
"""
import copy
import os
from typing import List, Optional

from expansion_pipeline import Expansion
from model import ComparisonMode, OtherEnum, PlainMember, ReprEnum
from model_transforms.model_transform_pipeline import ModelTransform, run_model_transform_pipeline
from model_transforms.reserved_keyword_rename_transform import ReservedKeywordRenameTransform

PRELUDE = '''\
class ReprConversionError(ValueError):
    """Raised when an integer does not match any member of an enumeration."""

    def __init__(self, enum_name: str, base_type: str, value: int):
        super().__init__(f"{value!r} is not a known {base_type} value of {enum_name}")
        self.enum_name = enum_name
        self.base_type = base_type
        self.value = value


def _check_base_value(value, base_type: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{base_type} value must be an int, not {type(value).__name__}")
    if not low <= value <= high:
        raise OverflowError(f"{value} is out of range for {base_type} ({low}..{high})")
    return value
'''


def _docstring(doc: str, indent: str) -> List[str]:
    text = doc.replace("\\", "\\\\").replace('"', '\\"')
    doc_lines = text.strip().splitlines()
    if len(doc_lines) == 1:
        return [f'{indent}"""{doc_lines[0]}"""']
    out = [f'{indent}"""{doc_lines[0]}']
    out.extend(f"{indent}{line}" if line.strip() else "" for line in doc_lines[1:])
    out.append(f'{indent}"""')
    return out


def _comment(doc: Optional[str], indent: str) -> List[str]:
    if not doc:
        return []
    return [f"{indent}# {line}".rstrip() for line in doc.strip().splitlines()]


def _range_args(int_type) -> str:
    return f'"{int_type.name}", {int_type.min_value}, {int_type.max_value}'


def emit_repr_enum(model: ReprEnum, lines: List[str]):
    name = model.name
    bt = model.repr_type
    lines.append("@unique")
    lines.append(f"class {name}(Enum):")
    if model.doc:
        lines.extend(_docstring(model.doc, "    "))
        lines.append("")
    for member in model.members:
        lines.extend(_comment(member.doc, "    "))
        lines.append(f"    {member.name} = {member.discriminant}")
    if model.members:
        lines.append("")

    # Decode: first match in declaration order, unknown values are a recoverable error
    lines.append("    @classmethod")
    lines.append(f"    def try_from_{bt.name}(cls, value: int) -> {name}:")
    lines.append(f"        _check_base_value(value, {_range_args(bt)})")
    for member in model.members:
        lines.append(f"        if value == {member.discriminant}:")
        lines.append(f"            return cls.{member.name}")
    lines.append(f'        raise ReprConversionError("{name}", "{bt.name}", value)')
    lines.append("")

    # Encode
    lines.append(f"    def to_{bt.name}(self) -> int:")
    for member in model.members:
        lines.append(f"        if self is {name}.{member.name}:")
        lines.append(f"            return {member.discriminant}")
    lines.append(f'        raise TypeError(f"{{self!r}} is not a member of {name}")')
    lines.append("")
    lines.append("")


def emit_other_enum(model: OtherEnum, lines: List[str]):
    name = model.name
    bt = model.base_type
    catch_all = model.catch_all
    mode = model.comparison_mode

    if mode != ComparisonMode.NONE:
        lines.append("@functools.total_ordering")
    lines.append(f"class {name}:")
    if model.doc:
        lines.extend(_docstring(model.doc, "    "))
        lines.append("")
    lines.append('    __slots__ = ("_name", "_payload")')
    lines.append("")
    if mode == ComparisonMode.DECLARED_ORDER:
        ordinals = ", ".join(f'"{m.name}": {i}' for i, m in enumerate(model.members))
        lines.append(f"    _ORDINALS = {{{ordinals}}}")
        lines.append("")
    lines.append("    def __init__(self, name: str, payload: Optional[int] = None):")
    lines.append("        self._name = name")
    lines.append("        self._payload = payload")
    lines.append("")
    lines.append("    @property")
    lines.append("    def name(self) -> str:")
    lines.append("        return self._name")
    lines.append("")
    lines.append("    @property")
    lines.append("    def payload(self) -> Optional[int]:")
    lines.append("        return self._payload")
    lines.append("")
    lines.extend(_comment(catch_all.doc, "    "))
    lines.append("    @classmethod")
    lines.append(f"    def {catch_all.name}(cls, value: int) -> {name}:")
    lines.append(f'        return cls("{catch_all.name}", _check_base_value(value, {_range_args(bt)}))')
    lines.append("")
    lines.append("    def __repr__(self) -> str:")
    lines.append(f'        if self._name == "{catch_all.name}":')
    lines.append(f'            return f"{name}.{catch_all.name}({{self._payload!r}})"')
    lines.append(f'        return f"{name}.{{self._name}}"')
    lines.append("")

    # Decode: first match in declaration order, everything else lands in the catch-all
    lines.append("    @classmethod")
    lines.append(f"    def from_{bt.name}(cls, base_value: int) -> {name}:")
    lines.append(f"        _check_base_value(base_value, {_range_args(bt)})")
    for member in model.plain_members:
        lines.append(f"        if base_value == {member.discriminant}:")
        lines.append(f"            return cls.{member.name}")
    lines.append(f"        return cls.{catch_all.name}(base_value)")
    lines.append("")

    # Encode
    lines.append(f"    def to_{bt.name}(self) -> int:")
    for member in model.members:
        lines.append(f'        if self._name == "{member.name}":')
        if isinstance(member, PlainMember):
            lines.append(f"            return {member.discriminant}")
        else:
            lines.append("            return self._payload")
    lines.append(f'        raise TypeError(f"{{self._name!r}} is not a member of {name}")')

    if mode != ComparisonMode.NONE:
        lines.append("")
        lines.append("    def _compare_key(self):")
        if mode == ComparisonMode.DECLARED_ORDER:
            lines.append("        return (self._ORDINALS[self._name], self._payload)")
        else:
            lines.append(f"        return self.to_{bt.name}()")
        lines.append("")
        lines.append("    def __eq__(self, other):")
        lines.append(f"        if not isinstance(other, {name}):")
        lines.append("            return NotImplemented")
        lines.append("        return self._compare_key() == other._compare_key()")
        lines.append("")
        lines.append("    def __lt__(self, other):")
        lines.append(f"        if not isinstance(other, {name}):")
        lines.append("            return NotImplemented")
        lines.append("        return self._compare_key() < other._compare_key()")
        lines.append("")
        lines.append("    def __hash__(self):")
        lines.append("        return hash(self._compare_key())")
    lines.append("")
    lines.append("")

    # Plain members are singletons
    for member in model.plain_members:
        lines.extend(_comment(member.doc, ""))
        lines.append(f'{name}.{member.name} = {name}("{member.name}")')
    if model.plain_members:
        lines.append("")
        lines.append("")


def generate_python_code(expansions: List[Expansion], source_file: Optional[str] = None,
                         transforms: List[ModelTransform] = None) -> str:
    models = [copy.deepcopy(e.model) for e in expansions if e.kind != Expansion.PASSTHROUGH]
    if transforms is None:
        transforms = [ReservedKeywordRenameTransform()]
    models = run_model_transform_pipeline(models, transforms)

    has_repr = any(isinstance(m, ReprEnum) for m in models)
    has_other = any(isinstance(m, OtherEnum) for m in models)
    has_compare = any(isinstance(m, OtherEnum) and m.comparison_mode != ComparisonMode.NONE for m in models)

    source = f" from {os.path.basename(source_file)}" if source_file else ""
    lines = [f"# Generated by ReprWrangler{source}. Do not edit.", "from __future__ import annotations", ""]
    if has_compare:
        lines.append("import functools")
    if has_repr:
        lines.append("from enum import Enum, unique")
    if has_other:
        lines.append("from typing import Optional")
    if has_compare or has_repr or has_other:
        lines.append("")

    exported = ["ReprConversionError"] + [m.name for m in models if m.is_public]
    lines.append("__all__ = [" + ", ".join(f'"{n}"' for n in exported) + "]")
    lines.append("")
    lines.append("")
    lines.extend(PRELUDE.splitlines())
    lines.append("")
    lines.append("")

    for model in models:
        if isinstance(model, ReprEnum):
            emit_repr_enum(model, lines)
        else:
            emit_other_enum(model, lines)

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"


class PythonGenerator:
    """
    Writes the generated module for a list of expansions to <output_dir>/<output_name>_repr.py.
    """

    def __init__(self, expansions: List[Expansion], output_dir: str, output_name: str = None, source_file: str = None):
        self.expansions = expansions
        self.output_dir = output_dir
        self.output_name = output_name if output_name else "enums"
        self.source_file = source_file

    @property
    def output_path(self) -> str:
        return os.path.join(self.output_dir, f"{self.output_name}_repr.py")

    def generate(self) -> bool:
        """
        Generate the Python module.

        Returns:
            bool: True if generation was successful, False otherwise
        """
        code = generate_python_code(self.expansions, self.source_file)
        try:
            print(f"Generating Python output in: {self.output_dir}")
            os.makedirs(self.output_dir, exist_ok=True)
            with open(self.output_path, "w", encoding="utf-8") as f:
                f.write(code)
        except OSError as e:
            print(f"Error writing Python output {self.output_path}: {e}")
            return False
        return True
