from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

# Type nodes compare and hash by identity: two structurally equal anonymous
# structs are still two different types.


class TagKind(Enum):
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"


@dataclass(eq=False)
class Primitive:
    # Full C spelling including qualifiers, e.g. "const unsigned long int"
    name: str


@dataclass(eq=False)
class Pointer:
    # None marks the hole a declarator leaves for the declaration's base type
    pointee: Optional["CType"] = None


@dataclass(eq=False)
class Member:
    name: Optional[str]
    type: "CType"


@dataclass(eq=False)
class EnumConstant:
    name: str
    value: Optional[str] = None  # initializer text, verbatim


@dataclass(eq=False)
class Named:
    tag: TagKind
    name: Optional[str] = None
    members: Optional[List[Member]] = None  # None: opaque / forward declared
    constants: List[EnumConstant] = field(default_factory=list)

    @property
    def is_container(self) -> bool:
        return self.tag in (TagKind.STRUCT, TagKind.UNION)

    @property
    def is_enum(self) -> bool:
        return self.tag == TagKind.ENUM


@dataclass(eq=False)
class Alias:
    name: str


@dataclass(eq=False)
class Parameter:
    name: Optional[str]
    type: "CType"


@dataclass(eq=False)
class Function:
    params: List[Parameter] = field(default_factory=list)
    return_type: Optional["CType"] = None
    variadic: bool = False


@dataclass(eq=False)
class Unrecognized:
    """A C construct the model does not cover (arrays, vectors, complex)."""
    spelling: str


CType = Union[Primitive, Pointer, Named, Alias, Function, Unrecognized]


def complete_type(indirect: Optional[CType], base: CType) -> CType:
    """
    Plugs the declaration's base type into the innermost hole of a declarator.

    `int *f(void)` arrives as Function(return_type=Pointer(None)) with base
    `int`; the hole is the pointee of that Pointer. Filling is idempotent.
    """
    if indirect is None:
        return base
    node = indirect
    while True:
        if isinstance(node, Function):
            if node.return_type is None:
                node.return_type = base
                return indirect
            node = node.return_type
        elif isinstance(node, Pointer):
            if node.pointee is None:
                node.pointee = base
                return indirect
            node = node.pointee
        else:
            return indirect


# --- Top-level nodes ---

@dataclass(eq=False)
class Declarator:
    name: str
    indirect_type: Optional[CType] = None


@dataclass(eq=False)
class Declaration:
    type: CType
    declarators: List[Declarator] = field(default_factory=list)
    typedef: bool = False


@dataclass(eq=False)
class FunctionDefinition:
    name: str
    function: Function


TopLevel = Union[Declaration, FunctionDefinition]


@dataclass(eq=False)
class Signature:
    name: str
    params: List[CType]
    return_type: CType
    is_callback: bool = False


@dataclass
class ParsedLibrary:
    headers: List[str]
    files: Dict[str, List[TopLevel]] = field(default_factory=dict)
