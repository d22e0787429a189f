"""Identifier casing transforms shared by emission and link matching."""

from __future__ import annotations

import re
from enum import Enum

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])|[_\-\s]+")


def split_words(name: str) -> list[str]:
    """Split an identifier into words at case changes and separators."""
    return [w for w in _WORD_BOUNDARY.split(name) if w]


def camel_case(name: str) -> str:
    if not name:
        return name
    return name[0].lower() + name[1:]


def pascal_case(name: str) -> str:
    if not name:
        return name
    return name[0].upper() + name[1:]


def snake_case(name: str) -> str:
    return "_".join(w.lower() for w in split_words(name))


class NamingStyle(Enum):
    """Casing applied to generated type and property names."""

    NONE = "none"
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"

    def transform(self, name: str) -> str:
        if self == NamingStyle.CAMEL_CASE:
            return camel_case(name)
        if self == NamingStyle.PASCAL_CASE:
            return pascal_case(name)
        if self == NamingStyle.SNAKE_CASE:
            return snake_case(name)
        return name


class MethodStyle(Enum):
    """Casing applied to emitted method names."""

    NONE = "none"
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"

    def transform(self, name: str) -> str:
        if self == MethodStyle.CAMEL_CASE:
            return camel_case(name)
        if self == MethodStyle.PASCAL_CASE:
            return pascal_case(name)
        return name
