"""
reserved_keyword_rename_transform.py
A ModelTransform that renames enumerations and members whose names cannot be used
as-is in the generated Python: language keywords, names the generated module
defines itself, names the generated class uses for its own attributes, and
__dunder__, _sunder_ or __private names. A suffix (default '_') is appended,
repeatedly if needed.
"""
import keyword
from typing import Iterable, Set

from model import OtherEnum, ReprEnum

# Names defined at module level by the Python generator
MODULE_RESERVED = {
    "annotations", "functools", "Enum", "unique", "Optional",
    "ReprConversionError", "_check_base_value", "__all__",
}

# Attributes of enum.Enum members and classes
REPR_MEMBER_RESERVED = {"name", "value", "mro"}

OTHER_MEMBER_RESERVED = {"name", "payload", "mro", "_name", "_payload", "_ORDINALS", "_compare_key"}


def is_special_name(name: str) -> bool:
    """
    True for names Python or enum.Enum treat specially inside a class body:
    __dunder__ hooks, _sunder_ names, and __private names, which are mangled.
    """
    if name.startswith("__"):
        if not name.endswith("__"):
            return True
        return len(name) > 4 and name[2] != "_" and name[-3] != "_"
    return len(name) > 2 and name[0] == "_" and name[-1] == "_" and name[1] != "_" and name[-2] != "_"


def reserved_member_names(model) -> Set[str]:
    if isinstance(model, ReprEnum):
        bt = model.repr_type.name
        return REPR_MEMBER_RESERVED | {f"try_from_{bt}", f"to_{bt}"}
    bt = model.base_type.name
    return OTHER_MEMBER_RESERVED | {f"from_{bt}", f"to_{bt}"}


class ReservedKeywordRenameTransform:
    def __init__(self, reserved_keywords: Iterable[str] = None, suffix: str = "_"):
        if reserved_keywords is None:
            reserved_keywords = keyword.kwlist
        self.reserved_keywords = set(reserved_keywords)
        self.suffix = suffix

    def _rename(self, name: str, reserved: Set[str]) -> str:
        # '__init__' -> '__init___', '__x' -> '__x___', '_x_' -> '_x__'
        while name in reserved or is_special_name(name):
            # Only underscores take a name out of the special forms
            name = name + ("_" if is_special_name(name) else self.suffix)
        return name

    def transform(self, model):
        model.name = self._rename(model.name, self.reserved_keywords | MODULE_RESERVED)
        member_reserved = self.reserved_keywords | reserved_member_names(model)
        # A renamed member must not collide with another member's original name
        taken = {m.name for m in model.members}
        for member in model.members:
            if member.name not in member_reserved and not is_special_name(member.name):
                continue
            new_name = self._rename(member.name, member_reserved | taken)
            taken.add(new_name)
            member.name = new_name
        return model
