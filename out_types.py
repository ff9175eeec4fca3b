from dataclasses import dataclass, field
from typing import List, Optional

SCALAR = "scalar"
BY_VALUE = "by_value"
ENUM = "enum"


@dataclass(frozen=True)
class TargetType:
    kind: str
    name: str

    @classmethod
    def scalar(cls, name: str) -> "TargetType":
        return cls(SCALAR, name)

    @classmethod
    def by_value(cls, name: str) -> "TargetType":
        return cls(BY_VALUE, name)

    @classmethod
    def enum(cls, name: str) -> "TargetType":
        return cls(ENUM, name)

    def render(self) -> str:
        """Ruby FFI spelling of the type."""
        if self.kind == SCALAR:
            return f":{self.name}"
        if self.kind == BY_VALUE:
            return f"{self.name}.by_value"
        return self.name


@dataclass
class EnumMember:
    name: str
    value: Optional[str] = None

@dataclass
class EnumDefinition:
    name: str
    c_name: str
    members: List[EnumMember] = field(default_factory=list)
    referenced_by: List[str] = field(default_factory=list)
    order: int = 0

@dataclass
class ContainerField:
    name: str
    type: TargetType

@dataclass
class ContainerDefinition:
    name: str
    c_name: str
    is_union: bool = False
    fields: List[ContainerField] = field(default_factory=list)
    referenced_by: List[str] = field(default_factory=list)
    opaque: bool = False
    order: int = 0

@dataclass
class SignatureBinding:
    name: str
    params: List[TargetType]
    return_type: TargetType
    is_callback: bool = False
    order: int = 0

@dataclass
class ModuleBindings:
    header: str
    path: List[str]
    callbacks: List[SignatureBinding] = field(default_factory=list)
    functions: List[SignatureBinding] = field(default_factory=list)

@dataclass
class LibraryBindings:
    enums: List[EnumDefinition] = field(default_factory=list)
    containers: List[ContainerDefinition] = field(default_factory=list)
    modules: List[ModuleBindings] = field(default_factory=list)
