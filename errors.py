from typing import Optional, Sequence


class BindgenError(RuntimeError):
    """Base class for every failure of a generation run."""


class UnknownAliasError(BindgenError):
    def __init__(self, name: str):
        super().__init__(f"Unknown typedef name: '{name}'")
        self.name = name


class UnsupportedTypeError(BindgenError):
    def __init__(self, ctype, signature: Optional[str] = None):
        where = f" in '{signature}'" if signature else ""
        super().__init__(f"Unsupported type {ctype!r}{where}")
        self.ctype = ctype
        self.signature = signature


class CyclicTypeError(BindgenError):
    def __init__(self, chain: Sequence[str]):
        super().__init__("Cyclic type expansion: " + " -> ".join(chain))
        self.chain = list(chain)


class ParseFailure(BindgenError):
    """The C parser rejected a file. Carries the file's raw content."""

    def __init__(self, file: str, content: str, message: str):
        super().__init__(f"Failed to parse {file}: {message}\nContent:\n{content}")
        self.file = file
        self.content = content
        self.message = message
