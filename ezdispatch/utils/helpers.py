"""Naming helpers shared by the parser, the synthesizers and the config loader."""

import re

_WORD_BOUNDARY = re.compile(r"[_\W]+")


def to_camel_case(name: str) -> str:
    """Convert a method name to the CamelCase variant name (``get_user`` -> ``GetUser``)."""
    parts = [part for part in _WORD_BOUNDARY.split(name) if part]
    return "".join(part[0].upper() + part[1:] for part in parts)


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
