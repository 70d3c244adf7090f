"""
early_model.py
A raw representation of the parsed declarations, capturing information directly from the parser (file, line, column, attributes, doc comments, fields, discriminant text). This is the structural model before any directive is interpreted.
"""
import copy
from typing import List, Optional, Any

class EarlyAttribute:
    def __init__(self, path: str, args: Optional[List[Any]], text: str, file: str, line: int, column: int):
        self.path: str = path # e.g. 'repr', 'derive', 'from_to_other'
        self.args: Optional[List[Any]] = args # Raw lark tokens/groups inside the parentheses, None when there are no parentheses
        self.text: str = text # Normalized source text, used when re-emitting
        self.file = file
        self.line = line
        self.column = column

class EarlyField:
    def __init__(self, name: Optional[str], type_text: str, file: str, line: int, column: int):
        self.name = name # None for tuple fields
        self.type_text = type_text # Normalized type text, e.g. 'u8' or 'Vec<u16>'
        self.file = file
        self.line = line
        self.column = column

class EarlyDiscriminant:
    def __init__(self, text: str, value: Optional[int], file: str, line: int, column: int):
        self.text = text # Normalized expression text, valid in both .def and Python
        self.value = value # None when the expression cannot be evaluated (e.g. 1 << -1)
        self.file = file
        self.line = line
        self.column = column

class EarlyVariant:
    UNIT = "unit"
    TUPLE = "tuple"
    NAMED = "named"

    def __init__(self, name: str, fields: List[EarlyField], field_style: str, discriminant: Optional[EarlyDiscriminant],
                 file: str, line: int, column: int, attributes: List[EarlyAttribute] = None, doc: str = ""):
        self.name = name
        self.fields = fields
        self.field_style = field_style
        self.discriminant = discriminant
        self.file = file
        self.line = line
        self.column = column
        self.attributes = attributes if attributes is not None else []
        self.doc = doc

class EarlyEnum:
    def __init__(self, name: str, variants: List[EarlyVariant], file: str, line: int, column: int,
                 attributes: List[EarlyAttribute] = None, visibility: str = "", doc: str = "",
                 keyword_line: int = None, keyword_column: int = None):
        self.name = name
        self.variants = variants
        self.file = file
        self.line = line # Position of the enum name
        self.column = column
        self.attributes = attributes if attributes is not None else []
        self.visibility = visibility # 'pub' or ''
        self.doc = doc
        self.keyword_line = keyword_line # Position of the 'enum' keyword
        self.keyword_column = keyword_column

    def attributes_named(self, path: str) -> List[EarlyAttribute]:
        return [attr for attr in self.attributes if attr.path == path]

    def stripped(self, consumed: EarlyAttribute = None) -> 'EarlyEnum':
        """
        Return a copy with every discriminant removed and the given attribute dropped.
        Everything else (attributes, visibility, docs, member fields) is kept.
        """
        clone = copy.deepcopy(self)
        clone.attributes = [attr for orig, attr in zip(self.attributes, clone.attributes) if orig is not consumed]
        for variant in clone.variants:
            variant.discriminant = None
        return clone

class EarlyModel:
  def __init__(self, enums: List[EarlyEnum], file: str, text: str = ""):
    self.enums = enums
    self.file = file
    self.text = text
