"""IR data models — normalized hub interface representation.

These models are what the definition loader builds and what the transpiler
reads to produce TypeScript declarations. Type descriptors form a closed set
of variants; every stage matches over them exhaustively.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class StreamKind(Enum):
    ASYNC_SEQUENCE = "async_sequence"  # IAsyncEnumerable<T>
    CHANNEL_READER = "channel_reader"  # ChannelReader<T>


# --- Type descriptors ---


@dataclass(frozen=True)
class Primitive:
    """A built-in type such as ``int`` or ``string``."""

    name: str


@dataclass(frozen=True)
class Array:
    """A single-dimensional array of ``element``."""

    element: TypeDescriptor

    def __post_init__(self):
        _reject_wrappers(self.element, "array element")


@dataclass(frozen=True)
class Named:
    """A user or library type, optionally generic."""

    qualified_name: str
    type_arguments: tuple[TypeDescriptor, ...] = ()
    external: bool = False  # Defined by the upstream DTO generator

    def __post_init__(self):
        object.__setattr__(self, "type_arguments", tuple(self.type_arguments))
        for arg in self.type_arguments:
            _reject_wrappers(arg, f"type argument of {self.qualified_name}")

    @property
    def name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    @property
    def namespace(self) -> str:
        if "." not in self.qualified_name:
            return ""
        return self.qualified_name.rsplit(".", 1)[0]


@dataclass(frozen=True)
class StreamMarker:
    """A sequence produced over time. Only valid at the top of a signature type."""

    element: TypeDescriptor
    kind: StreamKind = StreamKind.ASYNC_SEQUENCE

    def __post_init__(self):
        _reject_wrappers(self.element, "stream element")


@dataclass(frozen=True)
class TaskMarker:
    """An asynchronous result. ``inner`` is ``Primitive("void")`` for a bare Task."""

    inner: TypeDescriptor

    def __post_init__(self):
        if not isinstance(self.inner, StreamMarker):
            _reject_wrappers(self.inner, "task result")


@dataclass(frozen=True)
class CancellationMarker:
    """A cancellation token parameter; it has no TypeScript representation."""


TypeDescriptor = Primitive | Array | Named | StreamMarker | TaskMarker | CancellationMarker

VOID = Primitive("void")


def _reject_wrappers(descriptor: TypeDescriptor, where: str) -> None:
    if isinstance(descriptor, (StreamMarker, TaskMarker, CancellationMarker)):
        raise ValueError(f"{type(descriptor).__name__} cannot be used as {where}")


def walk(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield ``descriptor`` and every descriptor nested inside it, depth first."""
    yield descriptor
    if isinstance(descriptor, Array):
        yield from walk(descriptor.element)
    elif isinstance(descriptor, Named):
        for arg in descriptor.type_arguments:
            yield from walk(arg)
    elif isinstance(descriptor, StreamMarker):
        yield from walk(descriptor.element)
    elif isinstance(descriptor, TaskMarker):
        yield from walk(descriptor.inner)


def display_name(descriptor: TypeDescriptor) -> str:
    """Render a descriptor back into source-language notation."""
    if isinstance(descriptor, Primitive):
        return descriptor.name
    if isinstance(descriptor, Array):
        return f"{display_name(descriptor.element)}[]"
    if isinstance(descriptor, Named):
        if not descriptor.type_arguments:
            return descriptor.qualified_name
        args = ", ".join(display_name(a) for a in descriptor.type_arguments)
        return f"{descriptor.qualified_name}<{args}>"
    if isinstance(descriptor, StreamMarker):
        if descriptor.kind == StreamKind.CHANNEL_READER:
            wrapper = "System.Threading.Channels.ChannelReader"
        else:
            wrapper = "System.Collections.Generic.IAsyncEnumerable"
        return f"{wrapper}<{display_name(descriptor.element)}>"
    if isinstance(descriptor, TaskMarker):
        if descriptor.inner == VOID:
            return "System.Threading.Tasks.Task"
        return f"System.Threading.Tasks.Task<{display_name(descriptor.inner)}>"
    if isinstance(descriptor, CancellationMarker):
        return "System.Threading.CancellationToken"
    raise TypeError(f"Not a type descriptor: {descriptor!r}")


# --- Signatures and declarations ---


@dataclass
class Parameter:
    """A parameter to a hub method."""

    name: str
    type: TypeDescriptor


@dataclass
class MethodSignature:
    """A hub method: ordered parameters, a return type and its raw doc comment."""

    name: str
    parameters: list[Parameter] = field(default_factory=list)
    return_type: TypeDescriptor = VOID
    documentation: str | None = None

    def __post_init__(self):
        seen = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter '{param.name}' in method {self.name}")
            seen.add(param.name)

    @property
    def types(self) -> list[TypeDescriptor]:
        return [p.type for p in self.parameters] + [self.return_type]


@dataclass
class InterfaceDeclaration:
    """A hub (or receiver) interface discovered in an originating module."""

    name: str
    module: str  # Originating namespace
    methods: list[MethodSignature] = field(default_factory=list)
    documentation: str | None = None
    attributes: list[str] = field(default_factory=list)
    referenced: bool = False  # Comes from a referenced, not directly compiled, module

    @property
    def key(self) -> tuple[str, str]:
        return (self.module, self.name)


@dataclass
class GeneratedModule:
    """One rendered TypeScript file per originating module."""

    path: str
    module: str
    declarations: list[str] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    text: str = ""
