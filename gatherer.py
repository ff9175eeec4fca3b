import logging
from typing import Iterable, List, Tuple

from c_ast import Alias, Declaration, Function, Pointer, Primitive, Signature, complete_type
from type_catalog import VARARGS_ALIAS

_log = logging.getLogger(__name__)


class DeclarationGatherer:
    """Picks the bindable function and callback signatures out of a file's nodes."""

    def __init__(self, varargs_alias: str = VARARGS_ALIAS):
        self.varargs_alias = varargs_alias

    def gather(self, nodes: Iterable) -> Tuple[List[Signature], List[Signature]]:
        functions: List[Signature] = []
        callbacks: List[Signature] = []
        for node in nodes:
            # Function definitions have bodies and are not bindable
            if not isinstance(node, Declaration):
                continue
            for declarator in node.declarators:
                indirect = declarator.indirect_type
                if isinstance(indirect, Function) and not node.typedef:
                    complete_type(indirect, node.type)
                    _log.debug("Found function: %s", declarator.name)
                    functions.append(self._signature(declarator.name, indirect, is_callback=False))
                elif isinstance(indirect, Pointer) and isinstance(indirect.pointee, Function):
                    if not node.typedef:
                        continue
                    complete_type(indirect, node.type)
                    _log.debug("Found callback: %s", declarator.name)
                    callbacks.append(self._signature(declarator.name, indirect.pointee, is_callback=True))
        return functions, callbacks

    def _signature(self, name: str, function: Function, is_callback: bool) -> Signature:
        params = [param.type for param in function.params]
        # (void) is an empty parameter list
        if len(params) == 1 and isinstance(params[0], Primitive) and params[0].name.split() == ["void"]:
            params = []
        if function.variadic:
            params.append(Alias(self.varargs_alias))
        return Signature(name=name, params=params, return_type=function.return_type, is_callback=is_callback)
