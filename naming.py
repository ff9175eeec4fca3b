import re
from typing import List

from num2words import num2words

# Leading install-prefix segments that never become part of a module path
_INSTALL_PREFIX = re.compile(r"^(?:/(?:usr|local|lib|include|Library|opt))*/")
_EXTENSION = re.compile(r"\.\w+$")


def sanitize_identifier(name: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "_/" else "_" for ch in name)
    if cleaned and cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


def underscore(word: str) -> str:
    """`FooBar` -> `foo_bar`, `HTTPServer` -> `http_server`, `a-b` -> `a_b`."""
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def camelize(word: str) -> str:
    """`my_point` -> `MyPoint`; path separators become `::`."""
    segments = []
    for segment in word.split("/"):
        segments.append("".join(part[:1].upper() + part[1:] for part in segment.split("_")))
    return "::".join(segments)


def module_path(header: str) -> List[str]:
    """
    Maps a header path onto a nested module path.

    `/usr/include/sys/stat.h` -> ["Sys", "Stat"]
    """
    path = _INSTALL_PREFIX.sub("", header.replace("\\", "/"))
    path = _EXTENSION.sub("", path)
    path = sanitize_identifier(underscore(path))
    return [part for part in camelize(path).split("::") if part]


def anonymous_name(kind: str, counter: int) -> str:
    """Synthetic name for a type nothing ever named: `anonymous_struct_one`."""
    words = re.sub(r"[^a-z]+", "_", num2words(counter).lower()).strip("_")
    return f"anonymous_{kind}_{words}"


def member_label(member, index: int) -> str:
    """Field name for a member; C11 anonymous members get a positional one."""
    return member.name or f"anonymous_{index}"
