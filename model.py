"""
model.py
Concrete, generator-ready models extracted from one directive-annotated declaration. All shapes are validated and all configuration is resolved.
"""
from enum import Enum
from typing import List, Optional, Union


class IntegerType:
    """A fixed-width integer representation such as u8 or i32."""

    def __init__(self, name: str, signed: bool, bits: int):
        self.name = name
        self.signed = signed
        self.bits = bits

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def __repr__(self):
        return f"IntegerType({self.name!r})"


# usize/isize are treated as 64 bits wide
INTEGER_TYPES = {
    t.name: t for t in (
        IntegerType("u8", False, 8),
        IntegerType("u16", False, 16),
        IntegerType("u32", False, 32),
        IntegerType("u64", False, 64),
        IntegerType("u128", False, 128),
        IntegerType("usize", False, 64),
        IntegerType("i8", True, 8),
        IntegerType("i16", True, 16),
        IntegerType("i32", True, 32),
        IntegerType("i64", True, 64),
        IntegerType("i128", True, 128),
        IntegerType("isize", True, 64),
    )
}


class ComparisonMode(Enum):
    NONE = "none"
    DECLARED_ORDER = "declared-order"
    VALUE_BASED = "value-based"


class ReprMember:
    def __init__(self, name: str, discriminant: str, doc: Optional[str] = None, line: Optional[int] = None):
        self.name = name
        self.discriminant = discriminant
        self.doc = doc
        self.line = line


class ReprEnum:
    """Simple form: an enumeration with an explicit @repr width and a discriminant on every member."""

    def __init__(self, name: str, repr_type: IntegerType, members: List[ReprMember], visibility: str = "",
                 doc: Optional[str] = None, file: Optional[str] = None, line: Optional[int] = None):
        self.name = name
        self.repr_type = repr_type
        self.members = members
        self.visibility = visibility
        self.doc = doc
        self.file = file
        self.line = line

    @property
    def is_public(self) -> bool:
        return self.visibility == "pub"


class PlainMember:
    def __init__(self, name: str, discriminant: str, doc: Optional[str] = None, line: Optional[int] = None):
        self.name = name
        self.discriminant = discriminant
        self.doc = doc
        self.line = line


class CatchAllMember:
    def __init__(self, name: str, payload_type: IntegerType, doc: Optional[str] = None, line: Optional[int] = None):
        self.name = name
        self.payload_type = payload_type
        self.doc = doc
        self.line = line


ClassifiedMember = Union[PlainMember, CatchAllMember]


class OtherEnum:
    """
    Extended form: plain members keep their discriminants only in the generated
    conversions, and one catch-all member stores every unmatched base value.
    """

    def __init__(self, name: str, base_type: IntegerType, members: List[ClassifiedMember],
                 comparison_mode: ComparisonMode = ComparisonMode.NONE, visibility: str = "",
                 doc: Optional[str] = None, file: Optional[str] = None, line: Optional[int] = None):
        self.name = name
        self.base_type = base_type
        self.members = members # Declaration order, catch-all included
        self.comparison_mode = comparison_mode
        self.visibility = visibility
        self.doc = doc
        self.file = file
        self.line = line

    @property
    def plain_members(self) -> List[PlainMember]:
        return [m for m in self.members if isinstance(m, PlainMember)]

    @property
    def catch_all(self) -> CatchAllMember:
        return next(m for m in self.members if isinstance(m, CatchAllMember))

    @property
    def is_public(self) -> bool:
        return self.visibility == "pub"
