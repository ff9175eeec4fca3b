import logging
import os
from typing import Dict, List, Optional, Set

# Ensure libclang is installed:
# pip install libclang
from clang.cindex import (Config, Cursor, CursorKind, Diagnostic, Index,
                          TranslationUnitLoadError, Type, TypeKind)

if os.getenv("LIBCLANG_PATH") and not Config.loaded:
    Config.set_library_file(os.environ["LIBCLANG_PATH"])

from c_ast import (
    Alias, CType, Declaration, Declarator, EnumConstant, Function,
    FunctionDefinition, Member, Named, ParsedLibrary, Parameter, Pointer,
    Primitive, TagKind, TopLevel, Unrecognized
)
from errors import ParseFailure

_log = logging.getLogger(__name__)

# In-memory translation unit that includes every requested header once
INCLUDER = "__ffigen_includer__.h"

_TAGS = {
    CursorKind.STRUCT_DECL: TagKind.STRUCT,
    CursorKind.UNION_DECL: TagKind.UNION,
    CursorKind.ENUM_DECL: TagKind.ENUM,
}

_FUNCTION_KINDS = (TypeKind.FUNCTIONPROTO, TypeKind.FUNCTIONNOPROTO)

_PRIMITIVE_KINDS = {
    TypeKind.VOID, TypeKind.BOOL,
    TypeKind.CHAR_U, TypeKind.UCHAR, TypeKind.CHAR16, TypeKind.CHAR32,
    TypeKind.USHORT, TypeKind.UINT, TypeKind.ULONG, TypeKind.ULONGLONG, TypeKind.UINT128,
    TypeKind.CHAR_S, TypeKind.SCHAR, TypeKind.WCHAR,
    TypeKind.SHORT, TypeKind.INT, TypeKind.LONG, TypeKind.LONGLONG, TypeKind.INT128,
    TypeKind.FLOAT, TypeKind.DOUBLE, TypeKind.LONGDOUBLE,
}


def _is_anonymous(spelling: str) -> bool:
    # Depending on the libclang version, unnamed records spell as "" or
    # "struct (unnamed at file.h:3:9)" / "(anonymous struct at ...)"
    return not spelling or "(unnamed" in spelling or "(anonymous" in spelling


def _read_source(path: str) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError:
        return ""


class HeaderParser:
    """
    Parses C headers with libclang and converts the cursors it finds into
    the declaration nodes the binding core works on.
    """

    def __init__(self, clang_args: Optional[List[str]] = None):
        self.clang_args = list(clang_args or [])
        # Declaration identity (USR) -> shared node
        self._records: Dict[str, Named] = {}
        self._filled: Set[str] = set()

    def parse(self, headers: List[str]) -> ParsedLibrary:
        paths = []
        for header in headers:
            if not os.path.exists(header):
                raise FileNotFoundError(f"Header file not found: {header}")
            paths.append(os.path.abspath(header))

        includer = "".join(f'#include "{path}"\n' for path in paths)
        return self.parse_source(includer, paths)

    def parse_source(self, source: str, headers: List[str]) -> ParsedLibrary:
        """Parses in-memory C source; `headers` picks which files get modules."""
        args = ['-x', 'c-header'] + self.clang_args
        _log.debug("Parsing with args: %s", args)
        index = Index.create()
        try:
            tu = index.parse(INCLUDER, args=args, unsaved_files=[(INCLUDER, source)])
        except TranslationUnitLoadError as e:
            raise ParseFailure(INCLUDER, source, str(e)) from e

        for diag in tu.diagnostics:
            if diag.severity >= Diagnostic.Error:
                file = diag.location.file.name if diag.location.file else INCLUDER
                content = source if file == INCLUDER else _read_source(file)
                raise ParseFailure(file, content, diag.spelling)

        library = ParsedLibrary(headers=list(headers))
        for header in headers:
            library.files.setdefault(header, [])
        for cursor in tu.cursor.get_children():
            # Builtins such as __builtin_va_list have no file
            if cursor.location.file is None:
                continue
            node = self._convert_cursor(cursor)
            if node is not None:
                library.files.setdefault(cursor.location.file.name, []).append(node)
        return library

    def _convert_cursor(self, cursor: Cursor) -> Optional[TopLevel]:
        kind = cursor.kind
        if kind == CursorKind.FUNCTION_DECL:
            function = self._function(cursor.type, cursor.get_arguments())
            if cursor.is_definition():
                function.return_type = self.convert(cursor.result_type)
                return FunctionDefinition(name=cursor.spelling, function=function)
            return Declaration(
                type=self.convert(cursor.result_type),
                declarators=[Declarator(cursor.spelling, function)],
            )
        if kind == CursorKind.TYPEDEF_DECL:
            return self._typedef(cursor)
        if kind in _TAGS:
            return Declaration(type=self._named(cursor))
        if kind == CursorKind.VAR_DECL:
            return Declaration(type=self.convert(cursor.type), declarators=[Declarator(cursor.spelling)])
        return None

    def _typedef(self, cursor: Cursor) -> Declaration:
        name = cursor.spelling
        underlying = self._unwrap(cursor.underlying_typedef_type)

        # Function (pointer) typedefs keep the return type on the declaration,
        # the way a C parser hands them out
        if underlying.kind == TypeKind.POINTER:
            pointee = self._unwrap(underlying.get_pointee())
            if pointee.kind in _FUNCTION_KINDS:
                return Declaration(
                    type=self.convert(pointee.get_result()),
                    declarators=[Declarator(name, Pointer(self._function(pointee)))],
                    typedef=True,
                )
        if underlying.kind in _FUNCTION_KINDS:
            return Declaration(
                type=self.convert(underlying.get_result()),
                declarators=[Declarator(name, self._function(underlying))],
                typedef=True,
            )
        return Declaration(
            type=self.convert(cursor.underlying_typedef_type),
            declarators=[Declarator(name)],
            typedef=True,
        )

    def _unwrap(self, ctype: Type) -> Type:
        while ctype.kind == TypeKind.ELABORATED:
            ctype = ctype.get_named_type()
        return ctype

    def _function(self, ftype: Type, arguments=None) -> Function:
        """Function node with its return type left for the declaration to fill."""
        prototyped = ftype.kind == TypeKind.FUNCTIONPROTO
        if arguments is not None:
            params = [Parameter(arg.spelling or None, self.convert(arg.type)) for arg in arguments]
        elif prototyped:
            params = [Parameter(None, self.convert(arg)) for arg in ftype.argument_types()]
        else:
            params = []
        return Function(params=params, variadic=prototyped and ftype.is_function_variadic())

    def convert(self, ctype: Type) -> CType:
        kind = ctype.kind
        if kind == TypeKind.ELABORATED:
            return self.convert(ctype.get_named_type())
        if kind == TypeKind.POINTER:
            return Pointer(self.convert(ctype.get_pointee()))
        if kind == TypeKind.TYPEDEF:
            return Alias(ctype.get_declaration().spelling)
        if kind in (TypeKind.RECORD, TypeKind.ENUM):
            return self._named(ctype.get_declaration())
        if kind in _FUNCTION_KINDS:
            function = self._function(ctype)
            function.return_type = self.convert(ctype.get_result())
            return function
        if kind in _PRIMITIVE_KINDS:
            return Primitive(ctype.spelling)
        _log.debug("Unrecognized type: %s (kind: %s)", ctype.spelling, kind)
        return Unrecognized(ctype.spelling)

    def _named(self, decl: Cursor) -> Named:
        key = decl.get_usr() or f"{decl.kind.name}:{decl.hash}"
        named = self._records.get(key)
        if named is None:
            spelling = decl.spelling
            named = Named(tag=_TAGS[decl.kind], name=None if _is_anonymous(spelling) else spelling)
            self._records[key] = named

        if key in self._filled:
            return named
        definition = decl.get_definition()
        if definition is None:
            return named
        # Mark before descending so self-references find the node
        self._filled.add(key)

        if named.is_enum:
            _log.debug("Found enum: %s", named.name)
            named.constants = [
                EnumConstant(child.spelling, self._initializer(child))
                for child in definition.get_children()
                if child.kind == CursorKind.ENUM_CONSTANT_DECL
            ]
            return named

        _log.debug("Found %s: %s", named.tag.value, named.name)
        named.members = []
        children = list(definition.get_children())
        field_records = set()
        for child in children:
            if child.kind == CursorKind.FIELD_DECL:
                field_decl = self._unwrap(child.type).get_declaration()
                if field_decl.kind in _TAGS:
                    field_records.add(field_decl.get_usr())
        for child in children:
            if child.kind == CursorKind.FIELD_DECL:
                named.members.append(Member(child.spelling or None, self.convert(child.type)))
            elif child.kind in (CursorKind.STRUCT_DECL, CursorKind.UNION_DECL):
                # C11 anonymous members show up only as a nested record
                if _is_anonymous(child.spelling) and child.get_usr() not in field_records:
                    named.members.append(Member(None, self._named(child)))
        return named

    def _initializer(self, constant: Cursor) -> Optional[str]:
        for child in constant.get_children():
            text = " ".join(token.spelling for token in child.get_tokens())
            return text or str(constant.enum_value)
        return None
