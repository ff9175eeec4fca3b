import logging
from typing import Dict, Iterator, List

from c_ast import Alias, CType, Function, Named, Pointer, Primitive, Unrecognized
from errors import CyclicTypeError, UnsupportedTypeError
from naming import member_label
from type_catalog import TypeCatalog

_log = logging.getLogger(__name__)


class RequiredSet:
    """Named type -> ordered, duplicate-free names of the signatures needing it."""

    def __init__(self):
        self._entries: Dict[Named, List[str]] = {}

    def add(self, named: Named, signature: str):
        referrers = self._entries.setdefault(named, [])
        if signature not in referrers:
            referrers.append(signature)

    def __getitem__(self, named: Named) -> List[str]:
        return list(self._entries[named])

    def __contains__(self, named: Named) -> bool:
        return named in self._entries

    def __iter__(self) -> Iterator[Named]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def as_dict(self) -> Dict[Named, List[str]]:
        return {named: list(referrers) for named, referrers in self._entries.items()}

    def restore(self, snapshot: Dict[Named, List[str]]):
        self._entries = {named: list(referrers) for named, referrers in snapshot.items()}


class DependencyCollector:
    """
    Grows the RequiredSet from the types a signature touches.

    Containers being expanded sit on a stack. Meeting one again through a
    pointer only records it; meeting it again by value is a cycle.
    """

    def __init__(self, catalog: TypeCatalog, required: RequiredSet):
        self.catalog = catalog
        self.required = required
        self._expanding: List[Named] = []

    def require(self, ctype: CType, signature: str, via_pointer: bool = False):
        if isinstance(ctype, Pointer):
            if ctype.pointee is not None:
                self.require(ctype.pointee, signature, via_pointer=True)
        elif isinstance(ctype, Alias):
            if ctype.name == self.catalog.varargs_alias:
                return
            self.require(self.catalog.resolve_fully(ctype.name), signature, via_pointer)
        elif isinstance(ctype, Named):
            if ctype.is_enum:
                self.required.add(ctype, signature)
            elif ctype in self._expanding:
                if not via_pointer:
                    raise CyclicTypeError([self.catalog.name_of(n) for n in self._expanding]
                                          + [self.catalog.name_of(ctype)])
                self.required.add(ctype, signature)
            else:
                self._expanding.append(ctype)
                try:
                    self.require_nested(ctype, signature)
                finally:
                    self._expanding.pop()
                self.required.add(ctype, signature)
        elif isinstance(ctype, (Primitive, Function)):
            return
        elif isinstance(ctype, Unrecognized):
            if not via_pointer:
                raise UnsupportedTypeError(ctype, signature)
        else:
            raise UnsupportedTypeError(ctype, signature)

    def require_nested(self, container: Named, signature: str):
        """
        Requires what a container's members use by value.

        Inline unnamed members are expanded in place and not registered
        themselves; they get a `<parent>_<member>` name for emission.
        """
        if container.members is None:
            _log.debug("Opaque container: %s", self.catalog.name_of(container))
            return
        parent = self.catalog.name_of(container)
        for index, member in enumerate(container.members):
            mtype = member.type
            if isinstance(mtype, Alias):
                self.require(mtype, signature)
            elif isinstance(mtype, Named) and not mtype.name:
                self.catalog.bind_name(mtype, f"{parent}_{member_label(member, index)}")
                if mtype.is_container:
                    self.require_nested(mtype, signature)
                else:
                    self.require(mtype, signature)
            elif isinstance(mtype, Named):
                self.require(mtype, signature)
            elif isinstance(mtype, (Function, Unrecognized)):
                raise UnsupportedTypeError(mtype, signature)
