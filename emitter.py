import logging
from typing import Iterator, List, Set

from c_ast import Alias, Named, TagKind
from dependencies import RequiredSet
from errors import CyclicTypeError
from naming import camelize, member_label, module_path
from out_types import (
    ContainerDefinition, ContainerField, EnumDefinition, EnumMember,
    ModuleBindings, SignatureBinding
)
from type_catalog import TypeCatalog
from type_mapper import TypeMapper

_log = logging.getLogger(__name__)


class Emitter:
    """
    Turns the RequiredSet and resolved signatures into ordered definitions.

    Member types are mapped without requiring anything: the RequiredSet is
    complete by the time emission starts.
    """

    def __init__(self, catalog: TypeCatalog, required: RequiredSet):
        self.catalog = catalog
        self.required = required
        self.mapper = TypeMapper(catalog)

    def emit_enums(self) -> List[EnumDefinition]:
        definitions = []
        for named in self.required:
            if not named.is_enum:
                continue
            c_name = self.catalog.name_of(named)
            definitions.append(EnumDefinition(
                name=camelize(c_name),
                c_name=c_name,
                members=[EnumMember(name=c.name, value=c.value) for c in named.constants],
                referenced_by=self.required[named],
                order=len(definitions),
            ))
        return definitions

    def emit_containers(self) -> List[ContainerDefinition]:
        containers = [named for named in self.required if named.is_container]
        definitions: List[ContainerDefinition] = []
        for named in self._topological(containers):
            definitions.extend(self._container_definitions(named, self.required[named]))
        for order, definition in enumerate(definitions):
            definition.order = order
        return definitions

    def emit_module(self, header: str, callbacks: List[SignatureBinding],
                    functions: List[SignatureBinding]) -> ModuleBindings:
        return ModuleBindings(
            header=header,
            path=module_path(header),
            callbacks=sorted(callbacks, key=lambda s: s.order),
            functions=sorted(functions, key=lambda s: s.order),
        )

    def _container_definitions(self, named: Named, referenced_by: List[str]) -> List[ContainerDefinition]:
        """The container's definition, preceded by those of its inline members."""
        c_name = self.catalog.name_of(named)
        definition = ContainerDefinition(
            name=camelize(c_name),
            c_name=c_name,
            is_union=named.tag == TagKind.UNION,
            referenced_by=list(referenced_by),
            opaque=named.members is None,
        )
        if named.members is None:
            _log.debug("Emitting placeholder for opaque %s", c_name)
            return [definition]

        nested: List[ContainerDefinition] = []
        for index, member in enumerate(named.members):
            mtype = member.type
            if isinstance(mtype, Named) and mtype.is_container and not mtype.name:
                nested.extend(self._container_definitions(mtype, referenced_by))
            definition.fields.append(ContainerField(
                name=member_label(member, index),
                type=self.mapper.map_type(mtype, c_name),
            ))
        return nested + [definition]

    def _by_value_dependencies(self, named: Named) -> Iterator[Named]:
        for member in named.members or []:
            mtype = member.type
            if isinstance(mtype, Alias) and mtype.name != self.catalog.varargs_alias:
                resolved = self.catalog.resolve_fully(mtype.name)
                if isinstance(resolved, Named) and resolved.is_container:
                    yield resolved
            elif isinstance(mtype, Named) and mtype.is_container:
                if mtype.name:
                    yield mtype
                else:
                    yield from self._by_value_dependencies(mtype)

    def _topological(self, containers: List[Named]) -> List[Named]:
        """Stable depth-first order: by-value dependencies before dependents."""
        wanted: Set[Named] = set(containers)
        done: Set[Named] = set()
        visiting: List[Named] = []
        ordered: List[Named] = []

        def visit(named: Named):
            if named in done:
                return
            if named in visiting:
                raise CyclicTypeError([self.catalog.name_of(n) for n in visiting]
                                      + [self.catalog.name_of(named)])
            visiting.append(named)
            for dependency in self._by_value_dependencies(named):
                if dependency in wanted:
                    visit(dependency)
            visiting.pop()
            done.add(named)
            ordered.append(named)

        for named in containers:
            visit(named)
        return ordered
