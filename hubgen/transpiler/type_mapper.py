"""Type mapper — renders type descriptors as TypeScript type expressions.

Stream, task and cancellation markers must be resolved by the streaming
rewriter before they get here; receiving one raises ``TypeContractError``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from hubgen.errors import TypeContractError
from hubgen.ir.models import (
    Array,
    CancellationMarker,
    Named,
    Primitive,
    StreamMarker,
    TaskMarker,
    TypeDescriptor,
)
from hubgen.logging import get_logger
from hubgen.utils.naming import NamingStyle

logger = get_logger(__name__)

UNKNOWN = "unknown"

PRIMITIVE_TYPES = {
    "bool": "boolean",
    "byte": "number",
    "sbyte": "number",
    "short": "number",
    "ushort": "number",
    "int": "number",
    "uint": "number",
    "long": "number",
    "ulong": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "char": "string",
    "string": "string",
    "object": "any",
    "void": "void",
    "Guid": "string",
    "Uri": "string",
    "TimeSpan": "string",
    "DateTime": "(Date | string)",
    "DateTimeOffset": "(Date | string)",
}


class LinkLookup(Protocol):
    def has_link(self, type_name: str) -> bool: ...


@dataclass
class TypeMapperOptions:
    """What the mapper needs beyond the descriptor itself."""

    primitives: dict[str, str] = field(default_factory=dict)  # Overrides PRIMITIVE_TYPES
    links: LinkLookup | None = None
    link_naming_style: NamingStyle = NamingStyle.NONE

    def primitive(self, name: str) -> str | None:
        return self.primitives.get(name, PRIMITIVE_TYPES.get(name))

    def is_linked(self, name: str) -> bool:
        return self.links is not None and self.links.has_link(name)


def _sequence(args: list[str]) -> str:
    return f"{_wrap(args[0])}[]"


def _dictionary(args: list[str]) -> str:
    return f"{{ [key: {args[0]}]: {args[1]} }}"


def _nullable(args: list[str]) -> str:
    return f"({args[0]} | undefined)"


# Generic library types with a structural TypeScript equivalent, keyed by
# (short name, arity).
COLLECTION_MAPPERS: dict[tuple[str, int], Callable[[list[str]], str]] = {
    **{
        (name, 1): _sequence
        for name in (
            "List", "IList", "IEnumerable", "ICollection", "IReadOnlyList",
            "IReadOnlyCollection", "HashSet", "ISet", "IReadOnlySet",
        )
    },
    **{
        (name, 2): _dictionary
        for name in ("Dictionary", "IDictionary", "IReadOnlyDictionary")
    },
    ("Nullable", 1): _nullable,
}


def _wrap(rendered: str) -> str:
    """Parenthesise unions and function types before appending ``[]``."""
    if (" | " in rendered or "=>" in rendered) and not rendered.startswith("("):
        return f"({rendered})"
    return rendered


def map_type(descriptor: TypeDescriptor, options: TypeMapperOptions | None = None) -> str:
    """Render a descriptor as a TypeScript type expression."""
    options = options or TypeMapperOptions()

    if isinstance(descriptor, Primitive):
        mapped = options.primitive(descriptor.name)
        if mapped is None:
            logger.warning("No TypeScript mapping for primitive '%s'; using %s", descriptor.name, UNKNOWN)
            return UNKNOWN
        return mapped

    if isinstance(descriptor, Array):
        return f"{_wrap(map_type(descriptor.element, options))}[]"

    if isinstance(descriptor, Named):
        return _map_named(descriptor, options)

    if isinstance(descriptor, (StreamMarker, TaskMarker, CancellationMarker)):
        raise TypeContractError(
            f"{type(descriptor).__name__} must be rewritten before type mapping: {descriptor!r}"
        )

    raise TypeContractError(f"Not a type descriptor: {descriptor!r}")


def _map_named(descriptor: Named, options: TypeMapperOptions) -> str:
    args = [map_type(a, options) for a in descriptor.type_arguments]

    mapper = COLLECTION_MAPPERS.get((descriptor.name, len(args)))
    if mapper is not None:
        return mapper(args)

    if options.is_linked(descriptor.name):
        identifier = options.link_naming_style.transform(descriptor.name)
    elif descriptor.external:
        identifier = descriptor.name
    else:
        logger.warning(
            "No TypeScript mapping for type '%s'; using %s", descriptor.qualified_name, UNKNOWN
        )
        return UNKNOWN

    if args:
        return f"{identifier}<{', '.join(args)}>"
    return identifier
