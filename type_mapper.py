import re
from typing import Optional

from c_ast import Alias, CType, Named, Pointer, Primitive
from dependencies import DependencyCollector
from errors import UnsupportedTypeError
from naming import camelize
from out_types import TargetType
from type_catalog import TypeCatalog

QUALIFIERS = {"const", "restrict", "volatile", "__restrict", "__restrict__", "__const", "__volatile__"}

# Applied after the lexical rewrite
PRIMITIVE_RENAMES = {"_Bool": "bool"}

STRING = TargetType.scalar("string")
POINTER = TargetType.scalar("pointer")
VARARGS = TargetType.scalar("varargs")


def primitive_token(spelling: str) -> str:
    """
    Lexical rewrite of a primitive C type spelling into a scalar token.

    "const unsigned long int" -> "ulong", "unsigned int" -> "uint",
    "long long" -> "long_long".
    """
    words = [word for word in spelling.split() if word not in QUALIFIERS]
    if words == ["unsigned"]:
        words = ["unsigned", "int"]
    name = " ".join(words)
    name = re.sub(r"\bunsigned ", "u", name)
    name = re.sub(r" int$", "", name)
    name = name.replace(" ", "_")
    return PRIMITIVE_RENAMES.get(name, name)


def is_readonly_char(ctype: Optional[CType]) -> bool:
    return isinstance(ctype, Primitive) and sorted(ctype.name.split()) == ["char", "const"]


class TypeMapper:
    """
    Maps C type nodes onto target type expressions.

    With a collector, every named type met on the way is required for the
    signature being mapped. Without one the mapping has no side effects.
    """

    def __init__(self, catalog: TypeCatalog, collector: Optional[DependencyCollector] = None):
        self.catalog = catalog
        self.collector = collector

    def _require(self, ctype: CType, signature: str, via_pointer: bool = False):
        if self.collector is not None:
            self.collector.require(ctype, signature, via_pointer)

    def map_type(self, ctype: CType, signature: str) -> TargetType:
        if isinstance(ctype, Alias):
            if ctype.name == self.catalog.varargs_alias:
                return VARARGS
            return self.map_type(self.catalog.resolve_fully(ctype.name), signature)

        if isinstance(ctype, Pointer):
            pointee = ctype.pointee
            if is_readonly_char(pointee):
                return STRING
            if isinstance(pointee, (Pointer, Named)):
                self._require(pointee, signature, via_pointer=True)
            return POINTER

        if isinstance(ctype, Named):
            self._require(ctype, signature)
            name = camelize(self.catalog.name_of(ctype))
            if ctype.is_enum:
                return TargetType.enum(name)
            return TargetType.by_value(name)

        if isinstance(ctype, Primitive):
            return TargetType.scalar(primitive_token(ctype.name))

        raise UnsupportedTypeError(ctype, signature)
