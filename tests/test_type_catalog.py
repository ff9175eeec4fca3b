import pytest

from c_ast import (
    Alias, Declaration, Declarator, Member, Named, Pointer, Primitive, TagKind
)
from errors import UnknownAliasError
from type_catalog import VARARGS_ALIAS, TypeCatalog


class TestResolve:

    def test_resolution_is_reference_stable(self, catalog):
        point = Named(TagKind.STRUCT, "point", members=[])
        catalog.register("point_t", point)
        assert catalog.resolve("point_t") is catalog.resolve("point_t")
        assert catalog.resolve("point_t") is point

    def test_unknown_alias(self, catalog):
        with pytest.raises(UnknownAliasError):
            catalog.resolve("nope_t")

    def test_resolve_returns_one_step(self, catalog):
        catalog.register("inner_t", Primitive("int"))
        catalog.register("outer_t", Alias("inner_t"))
        assert isinstance(catalog.resolve("outer_t"), Alias)
        assert catalog.resolve_fully("outer_t").name == "int"

    def test_later_typedef_overrides(self, catalog):
        catalog.register("handle_t", Primitive("int"))
        catalog.register("handle_t", Primitive("long"))
        assert catalog.resolve("handle_t").name == "long"


class TestVariadicMarker:

    def test_marker_is_seeded(self, catalog):
        assert VARARGS_ALIAS in catalog
        assert catalog.resolve_fully(VARARGS_ALIAS).name == VARARGS_ALIAS

    def test_marker_cannot_be_overridden(self, catalog):
        catalog.register(VARARGS_ALIAS, Primitive("char"))
        assert isinstance(catalog.resolve(VARARGS_ALIAS), Alias)

    def test_custom_marker(self):
        catalog = TypeCatalog(varargs_alias="__va_marker")
        assert "__va_marker" in catalog
        assert VARARGS_ALIAS not in catalog


class TestAnonymousNaming:

    def test_typedef_names_anonymous_struct(self, catalog):
        node = Named(TagKind.STRUCT, members=[Member("x", Primitive("int"))])
        catalog.register("Point", node)
        assert catalog.name_of(node) == "Point"
        assert catalog.name_of(catalog.resolve("Point")) == "Point"

    def test_first_typedef_wins(self, catalog):
        node = Named(TagKind.ENUM)
        catalog.register("Color", node)
        catalog.register("Colour", node)
        assert catalog.name_of(node) == "Color"
        assert catalog.resolve("Colour") is node

    def test_naming_is_by_identity(self, catalog):
        first = Named(TagKind.STRUCT, members=[Member("x", Primitive("int"))])
        second = Named(TagKind.STRUCT, members=[Member("x", Primitive("int"))])
        catalog.register("A", first)
        catalog.register("B", second)
        assert catalog.name_of(first) == "A"
        assert catalog.name_of(second) == "B"

    def test_typedef_does_not_rename_tagged_struct(self, catalog):
        node = Named(TagKind.STRUCT, "point", members=[])
        catalog.register("Point", node)
        assert catalog.name_of(node) == "point"

    def test_never_named_types_get_spelled_out_names(self, catalog):
        first = Named(TagKind.ENUM)
        second = Named(TagKind.UNION, members=[])
        assert catalog.name_of(first) == "anonymous_enum_one"
        assert catalog.name_of(second) == "anonymous_union_two"
        assert catalog.name_of(first) == "anonymous_enum_one"


class TestRegisterTypedefs:

    def test_declarators_complete_with_base_type(self, catalog):
        node = Declaration(
            type=Primitive("int"),
            declarators=[Declarator("int_t"), Declarator("int_ptr", Pointer())],
            typedef=True,
        )
        catalog.register_typedefs([node])
        assert catalog.resolve("int_t").name == "int"
        pointer = catalog.resolve("int_ptr")
        assert isinstance(pointer, Pointer)
        assert pointer.pointee.name == "int"

    def test_plain_declarations_are_not_registered(self, catalog):
        node = Declaration(type=Primitive("int"), declarators=[Declarator("counter")])
        catalog.register_typedefs([node])
        assert "counter" not in catalog
