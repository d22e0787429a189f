"""Type expression parser — builds type descriptors from source-language text.

Accepts the notation hub interfaces are written in, e.g.
``Task<IAsyncEnumerable<int>>``, ``List<App.Dtos.User>``, ``string[]``,
``int?`` or ``CancellationToken``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Iterable

from hubgen.errors import TypeSyntaxError
from hubgen.ir.models import (
    VOID,
    Array,
    CancellationMarker,
    Named,
    Primitive,
    StreamKind,
    StreamMarker,
    TaskMarker,
    TypeDescriptor,
)


# Keywords and well-known value types, keyed by every spelling we accept
PRIMITIVE_ALIASES = {
    "bool": "bool", "Boolean": "bool",
    "byte": "byte", "Byte": "byte",
    "sbyte": "sbyte", "SByte": "sbyte",
    "short": "short", "Int16": "short",
    "ushort": "ushort", "UInt16": "ushort",
    "int": "int", "Int32": "int",
    "uint": "uint", "UInt32": "uint",
    "long": "long", "Int64": "long",
    "ulong": "ulong", "UInt64": "ulong",
    "float": "float", "Single": "float",
    "double": "double", "Double": "double",
    "decimal": "decimal", "Decimal": "decimal",
    "char": "char", "Char": "char",
    "string": "string", "String": "string",
    "object": "object", "Object": "object",
    "void": "void", "Void": "void",
    "Guid": "Guid",
    "Uri": "Uri",
    "DateTime": "DateTime",
    "DateTimeOffset": "DateTimeOffset",
    "TimeSpan": "TimeSpan",
}

TASK_NAMES = {"Task", "ValueTask"}
STREAM_NAMES = {
    "IAsyncEnumerable": StreamKind.ASYNC_SEQUENCE,
    "ChannelReader": StreamKind.CHANNEL_READER,
}
CANCELLATION_NAMES = {"CancellationToken"}

# Namespaces that prefix the well-known names above
SYSTEM_PREFIXES = (
    "System.Threading.Tasks.",
    "System.Threading.Channels.",
    "System.Collections.Generic.",
    "System.Threading.",
    "System.",
)

_TOKEN = re.compile(r"\s*(?:(?P<name>[A-Za-z_][\w.]*)|(?P<punct>[<>,\[\]?]))")


class _Parser:
    def __init__(self, text: str, external: dict[str, str]):
        self.text = text
        self.external = external
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> list[str]:
        tokens = []
        pos = 0
        stripped = text.rstrip()
        while pos < len(stripped):
            match = _TOKEN.match(stripped, pos)
            if not match:
                raise TypeSyntaxError(f"Unexpected character at {pos} in type '{self.text}'")
            tokens.append(match.group("name") or match.group("punct"))
            pos = match.end()
        if not tokens:
            raise TypeSyntaxError("Empty type expression")
        return tokens

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def expect(self, token: str) -> None:
        if self.peek() != token:
            raise TypeSyntaxError(f"Expected '{token}' in type '{self.text}', got {self.peek()!r}")
        self.pos += 1

    def parse(self) -> TypeDescriptor:
        result = self.parse_type()
        if self.peek() is not None:
            raise TypeSyntaxError(f"Unexpected '{self.peek()}' in type '{self.text}'")
        return result

    def parse_type(self) -> TypeDescriptor:
        name = self.peek()
        if name is None or not (name[0].isalpha() or name[0] == "_"):
            raise TypeSyntaxError(f"Expected a type name in '{self.text}', got {name!r}")
        self.pos += 1

        args: list[TypeDescriptor] = []
        if self.peek() == "<":
            self.pos += 1
            args.append(self.parse_type())
            while self.peek() == ",":
                self.pos += 1
                args.append(self.parse_type())
            self.expect(">")

        try:
            descriptor = self.build(name, args)
            while self.peek() in ("[", "?"):
                if self.peek() == "[":
                    self.pos += 1
                    self.expect("]")
                    descriptor = Array(descriptor)
                else:
                    self.pos += 1
                    descriptor = Named("System.Nullable", (descriptor,))
        except ValueError as e:
            raise TypeSyntaxError(f"Invalid type '{self.text}': {e}") from e
        return descriptor

    def build(self, name: str, args: list[TypeDescriptor]) -> TypeDescriptor:
        short = _strip_system_prefix(name)

        if short in TASK_NAMES:
            if len(args) > 1:
                raise TypeSyntaxError(f"{short} takes at most one type argument")
            return TaskMarker(args[0] if args else VOID)
        if short in STREAM_NAMES:
            if len(args) != 1:
                raise TypeSyntaxError(f"{short} takes exactly one type argument")
            return StreamMarker(args[0], STREAM_NAMES[short])
        if short in CANCELLATION_NAMES and not args:
            return CancellationMarker()
        if short in PRIMITIVE_ALIASES and not args:
            return Primitive(PRIMITIVE_ALIASES[short])

        if "." not in name and name in self.external:
            return Named(f"{self.external[name]}.{name}", args, external=True)
        namespace = name.rsplit(".", 1)[0] if "." in name else ""
        is_external = bool(namespace) and namespace in set(self.external.values())
        return Named(name, args, external=is_external)


def _strip_system_prefix(name: str) -> str:
    for prefix in SYSTEM_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def external_index(external_types: Mapping[str, Iterable[str]]) -> dict[str, str]:
    """Invert ``namespace -> names`` into ``name -> namespace``."""
    index = {}
    for namespace, names in external_types.items():
        for name in names:
            index.setdefault(name, namespace)
    return index


def parse_type(
    text: str, external_types: Mapping[str, Iterable[str]] | None = None
) -> TypeDescriptor:
    """Parse a type expression into a descriptor.

    Args:
        text: The type as written in the interface definition.
        external_types: Namespace -> type names produced by the upstream
            DTO generator. Matching types are marked external.
    """
    return _Parser(text, external_index(external_types or {})).parse()
