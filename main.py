#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from typing import List, Optional

from c_ast import ParsedLibrary, Signature
from dependencies import DependencyCollector, RequiredSet
from emitter import Emitter
from errors import UnsupportedTypeError
from gatherer import DeclarationGatherer
from naming import module_path
from out_types import LibraryBindings, SignatureBinding
from ruby_ffi import render_library
from type_catalog import VARARGS_ALIAS, TypeCatalog
from type_mapper import TypeMapper

_log = logging.getLogger(__name__)

# --- Core Binding Generator ---

class BindingGenerator:
    """
    One generation run: turns parsed C declarations into binding definitions.

    All per-run state (typedef table, required types) lives on the instance,
    so every run starts from a fresh generator.
    """

    def __init__(self, parsed: ParsedLibrary, skip_unsupported: bool = False,
                 varargs_alias: str = VARARGS_ALIAS):
        self.parsed = parsed
        self.skip_unsupported = skip_unsupported
        self.catalog = TypeCatalog(varargs_alias)
        self.required = RequiredSet()
        self.collector = DependencyCollector(self.catalog, self.required)
        self.mapper = TypeMapper(self.catalog, self.collector)
        self.gatherer = DeclarationGatherer(varargs_alias)
        self.skipped: List[str] = []

    def resolve_signature(self, signature: Signature, order: int = 0) -> SignatureBinding:
        """Maps one signature, requiring every named type it touches."""
        params = [self.mapper.map_type(param, signature.name) for param in signature.params]
        return_type = self.mapper.map_type(signature.return_type, signature.name)
        return SignatureBinding(
            name=signature.name,
            params=params,
            return_type=return_type,
            is_callback=signature.is_callback,
            order=order,
        )

    def _resolve_all(self, signatures: List[Signature]) -> List[SignatureBinding]:
        bindings = []
        for order, signature in enumerate(signatures):
            snapshot = self.required.as_dict()
            try:
                bindings.append(self.resolve_signature(signature, order))
            except UnsupportedTypeError as e:
                if not self.skip_unsupported:
                    raise
                # Drop whatever the failed signature had started to require
                self.required.restore(snapshot)
                self.skipped.append(signature.name)
                _log.warning("Skipping %s: %s", signature.name, e)
        return bindings

    def generate(self) -> LibraryBindings:
        for nodes in self.parsed.files.values():
            self.catalog.register_typedefs(nodes)

        resolved = []
        for header in self.parsed.headers:
            functions, callbacks = self.gatherer.gather(self.parsed.files.get(header, []))
            _log.info("%s: %d functions, %d callbacks", header, len(functions), len(callbacks))
            resolved.append((header, self._resolve_all(callbacks), self._resolve_all(functions)))

        emitter = Emitter(self.catalog, self.required)
        return LibraryBindings(
            enums=emitter.emit_enums(),
            containers=emitter.emit_containers(),
            modules=[emitter.emit_module(header, callbacks, functions)
                     for header, callbacks, functions in resolved],
        )


def _configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


# --- Main Execution ---
def main(argv: Optional[List[str]] = None):
    """Command-line interface for the binding generator."""
    parser = argparse.ArgumentParser(
        description="Generate Ruby FFI bindings from C header files."
    )
    parser.add_argument("headers", nargs="+", help="C header files to bind.")
    parser.add_argument(
        "-o", "--output", default="bindings.rb",
        help="Path to the output Ruby file (default: bindings.rb)."
    )
    parser.add_argument(
        "-I", dest="include_dirs", action="append", default=[],
        help="Add a directory to the Clang include path (e.g., -I/usr/include)."
    )
    parser.add_argument(
        "-D", dest="defines", action="append", default=[],
        help="Define a preprocessor macro (e.g., -DNDEBUG)."
    )
    parser.add_argument(
        "--module", default=None,
        help="Name of the generated Ruby module (default: from the first header)."
    )
    parser.add_argument(
        "--ffi-lib", default=None,
        help="Library name passed to ffi_lib (default: module name, lower-cased)."
    )
    parser.add_argument(
        "--skip-unsupported", action="store_true",
        help="Skip declarations using unsupported types instead of failing."
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    clang_args = [f"-I{d}" for d in args.include_dirs] + [f"-D{d}" for d in args.defines]
    module_name = args.module or (module_path(os.path.basename(args.headers[0])) or ["Bindings"])[-1]
    ffi_lib = args.ffi_lib or module_name.lower()

    try:
        # Imported here so --help works without libclang
        from clang_frontend import HeaderParser

        parsed = HeaderParser(clang_args).parse(args.headers)
        generator = BindingGenerator(parsed, skip_unsupported=args.skip_unsupported)
        bindings = generator.generate()

        print("\n--- Generation Summary ---")
        print(f"Enums: {len(bindings.enums)}, Structs/Unions: {len(bindings.containers)}")
        print(f"Callbacks: {sum(len(m.callbacks) for m in bindings.modules)}, "
              f"Functions: {sum(len(m.functions) for m in bindings.modules)}, "
              f"Skipped: {len(generator.skipped)}")
        print("--------------------------")

        output_code = render_library(bindings, module_name, ffi_lib)

        with open(args.output, "w") as f:
            f.write(output_code)

        print(f"\nSuccessfully generated Ruby FFI bindings at: {args.output}")

    except (FileNotFoundError, RuntimeError) as e:
        print(f"An error occurred: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
