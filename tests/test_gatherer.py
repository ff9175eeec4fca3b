from c_ast import (
    Alias, Declaration, Declarator, Function, FunctionDefinition, Parameter,
    Pointer, Primitive
)
from gatherer import DeclarationGatherer


def prototype(name, return_type, *params, variadic=False):
    function = Function(params=[Parameter(None, p) for p in params], variadic=variadic)
    return Declaration(type=return_type, declarators=[Declarator(name, function)])


class TestFunctions:

    def test_return_type_is_taken_from_the_declaration(self):
        functions, callbacks = DeclarationGatherer().gather([prototype("f", Primitive("long"))])
        assert [s.name for s in functions] == ["f"]
        assert functions[0].return_type.name == "long"
        assert callbacks == []

    def test_pointer_return_is_completed(self):
        node = Declaration(
            type=Primitive("int"),
            declarators=[Declarator("make", Function(return_type=Pointer()))],
        )
        functions, _ = DeclarationGatherer().gather([node])
        returned = functions[0].return_type
        assert isinstance(returned, Pointer)
        assert returned.pointee.name == "int"

    def test_void_parameter_list_is_empty(self):
        functions, _ = DeclarationGatherer().gather([prototype("tick", Primitive("void"), Primitive("void"))])
        assert functions[0].params == []

    def test_variadic_gets_marker_parameter(self):
        node = prototype("log", Primitive("int"), Pointer(Primitive("const char")), variadic=True)
        functions, _ = DeclarationGatherer().gather([node])
        marker = functions[0].params[-1]
        assert isinstance(marker, Alias)
        assert marker.name == "__builtin_va_list"

    def test_declaration_order_is_kept(self):
        nodes = [prototype(name, Primitive("void")) for name in ("c", "a", "b")]
        functions, _ = DeclarationGatherer().gather(nodes)
        assert [s.name for s in functions] == ["c", "a", "b"]

    def test_definitions_are_ignored(self):
        definition = FunctionDefinition("helper", Function(return_type=Primitive("int")))
        functions, callbacks = DeclarationGatherer().gather([definition])
        assert functions == [] and callbacks == []

    def test_multiple_declarators(self):
        node = Declaration(
            type=Primitive("int"),
            declarators=[Declarator("open", Function()), Declarator("close", Function())],
        )
        functions, _ = DeclarationGatherer().gather([node])
        assert [s.name for s in functions] == ["open", "close"]
        assert all(s.return_type.name == "int" for s in functions)


class TestCallbacks:

    def test_function_pointer_typedef_is_a_callback(self):
        node = Declaration(
            type=Primitive("void"),
            declarators=[Declarator("handler_t", Pointer(Function(params=[Parameter(None, Primitive("int"))])))],
            typedef=True,
        )
        functions, callbacks = DeclarationGatherer().gather([node])
        assert functions == []
        assert callbacks[0].name == "handler_t"
        assert callbacks[0].is_callback
        assert callbacks[0].return_type.name == "void"
        assert [p.name for p in callbacks[0].params] == ["int"]

    def test_function_pointer_variable_is_ignored(self):
        node = Declaration(
            type=Primitive("void"),
            declarators=[Declarator("on_exit_hook", Pointer(Function()))],
        )
        assert DeclarationGatherer().gather([node]) == ([], [])

    def test_function_type_typedef_is_not_a_function(self):
        node = Declaration(
            type=Primitive("void"),
            declarators=[Declarator("visit_fn", Function())],
            typedef=True,
        )
        assert DeclarationGatherer().gather([node]) == ([], [])
