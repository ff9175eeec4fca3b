from typing import List

from naming import underscore
from out_types import (
    ContainerDefinition, EnumDefinition, LibraryBindings, ModuleBindings,
    SignatureBinding
)

INDENT = "  "


def _symbol(name: str) -> str:
    return f":{name}"


def _render_enum(enum: EnumDefinition) -> List[str]:
    lines = [f"# {', '.join(enum.referenced_by)}"]
    lines.append(f"{enum.name} = enum {_symbol(underscore(enum.name))}, [")
    for member in enum.members:
        if member.value is None:
            lines.append(f"{INDENT}{_symbol(member.name)},")
        else:
            lines.append(f"{INDENT}{_symbol(member.name)}, {member.value},")
    lines.append("]")
    return lines


def _render_container(container: ContainerDefinition) -> List[str]:
    base = "FFI::Union" if container.is_union else "FFI::Struct"
    lines = [f"# {', '.join(container.referenced_by)}"]
    lines.append(f"class {container.name} < {base}")
    if container.opaque:
        lines.append(f"{INDENT}# opaque")
    elif container.fields:
        pairs = [f"{_symbol(f.name)}, {f.type.render()}" for f in container.fields]
        lead = f"{INDENT}layout "
        lines.append(lead + (",\n" + " " * len(lead)).join(pairs))
    lines.append("end")
    return lines


def _render_signature(signature: SignatureBinding) -> str:
    params = ", ".join(p.render() for p in signature.params)
    keyword = "callback" if signature.is_callback else "attach_function"
    return f"{keyword} {_symbol(signature.name)}, [{params}], {signature.return_type.render()}"


def _render_module(module: ModuleBindings, ffi_lib: str) -> List[str]:
    body = ["extend FFI::Library", f"ffi_lib '{ffi_lib}'", ""]
    body.extend(_render_signature(s) for s in module.callbacks)
    body.extend(_render_signature(s) for s in module.functions)

    lines = []
    for depth, name in enumerate(module.path):
        lines.append(f"{INDENT * depth}module {name}")
    depth = len(module.path)
    lines.extend(f"{INDENT * depth}{line}" if line else "" for line in body)
    for depth in reversed(range(len(module.path))):
        lines.append(f"{INDENT * depth}end")
    return lines


def render_library(bindings: LibraryBindings, module_name: str, ffi_lib: str) -> str:
    """Ruby FFI source for a whole generation run."""
    body: List[str] = ["extend FFI::Library", f"ffi_lib '{ffi_lib}'"]
    for enum in bindings.enums:
        body.append("")
        body.extend(_render_enum(enum))
    for container in bindings.containers:
        body.append("")
        body.extend(_render_container(container))
    for module in bindings.modules:
        body.append("")
        body.extend(_render_module(module, ffi_lib))

    lines = [
        "# Generated Ruby FFI bindings",
        "# This file was automatically generated by ffigen.",
        "require 'ffi'",
        "",
        f"module {module_name}",
    ]
    for line in body:
        # Multi-line layouts keep their own continuation indent
        lines.append("\n".join(f"{INDENT}{part}" if part else "" for part in line.split("\n")))
    lines.append("end")
    return "\n".join(lines) + "\n"
