import logging
from typing import Dict, Iterable, List

from c_ast import Alias, CType, Declaration, Named, complete_type
from errors import CyclicTypeError, UnknownAliasError
from naming import anonymous_name

_log = logging.getLogger(__name__)

# Alias name the parser hands out for the variadic-argument marker
VARARGS_ALIAS = "__builtin_va_list"


class TypeCatalog:
    """
    Alias name -> type table for one generation run.

    Anonymous structs/unions/enums take their name from the first typedef
    that names them. Names live in a side table keyed by node identity, so
    every reference to the same node sees the same name.
    """

    def __init__(self, varargs_alias: str = VARARGS_ALIAS):
        self.varargs_alias = varargs_alias
        self._aliases: Dict[str, CType] = {varargs_alias: Alias(varargs_alias)}
        self._names: Dict[Named, str] = {}
        self._anonymous_count = 0

    def register(self, name: str, ctype: CType):
        if name == self.varargs_alias:
            _log.debug("Keeping seeded variadic marker '%s'", name)
            return
        if isinstance(ctype, Named) and not ctype.name:
            self.bind_name(ctype, name)
        self._aliases[name] = ctype
        _log.debug("Found typedef: %s", name)

    def register_typedefs(self, nodes: Iterable):
        for node in nodes:
            if isinstance(node, Declaration) and node.typedef:
                for declarator in node.declarators:
                    self.register(declarator.name, complete_type(declarator.indirect_type, node.type))

    def bind_name(self, named: Named, name: str) -> str:
        """Names an anonymous node unless something named it first."""
        return self._names.setdefault(named, name)

    def name_of(self, named: Named) -> str:
        if named.name:
            return named.name
        name = self._names.get(named)
        if name is None:
            self._anonymous_count += 1
            name = self.bind_name(named, anonymous_name(named.tag.value, self._anonymous_count))
        return name

    def resolve(self, name: str) -> CType:
        try:
            return self._aliases[name]
        except KeyError:
            raise UnknownAliasError(name) from None

    def resolve_fully(self, name: str) -> CType:
        """Follows an alias chain down to a non-alias node (or the variadic marker)."""
        chain: List[str] = [name]
        ctype = self.resolve(name)
        while isinstance(ctype, Alias) and ctype.name != self.varargs_alias:
            if ctype.name in chain:
                raise CyclicTypeError(chain + [ctype.name])
            chain.append(ctype.name)
            ctype = self.resolve(ctype.name)
        return ctype

    def __contains__(self, name: str) -> bool:
        return name in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)
