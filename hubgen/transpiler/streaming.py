"""Streaming rewriter — resolves stream and task wrappers at signature level.

The same async-sequence shape means "the server streams to me" in return
position and "I stream to the server" in parameter position, so the two
positions get separate rewrite functions over a shared matching core.
"""

from __future__ import annotations

from hubgen.ir.models import (
    CancellationMarker,
    MethodSignature,
    StreamMarker,
    TaskMarker,
    TypeDescriptor,
)
from hubgen.transpiler.type_mapper import TypeMapperOptions, map_type

STREAM_RESULT = "IStreamResult"
SUBJECT = "Subject"
PROMISE = "Promise"


def unwrap_stream(descriptor: TypeDescriptor) -> TypeDescriptor | None:
    """Return the element type if ``descriptor`` is a (possibly awaited) stream."""
    if isinstance(descriptor, TaskMarker):
        descriptor = descriptor.inner
    if isinstance(descriptor, StreamMarker):
        return descriptor.element
    return None


def rewrite_return(descriptor: TypeDescriptor, options: TypeMapperOptions | None = None) -> str:
    """Render a method's return type.

    ``IAsyncEnumerable<T>``, ``Task<IAsyncEnumerable<T>>`` and
    ``Task<ChannelReader<T>>`` all become ``IStreamResult<T>``.
    """
    element = unwrap_stream(descriptor)
    if element is not None:
        return f"{STREAM_RESULT}<{map_type(element, options)}>"
    if isinstance(descriptor, TaskMarker):
        return f"{PROMISE}<{map_type(descriptor.inner, options)}>"
    return map_type(descriptor, options)


def rewrite_parameter(
    descriptor: TypeDescriptor, options: TypeMapperOptions | None = None
) -> str | None:
    """Render a parameter type, or ``None`` when the parameter is omitted."""
    if isinstance(descriptor, CancellationMarker):
        return None
    element = unwrap_stream(descriptor)
    if element is not None:
        return f"{SUBJECT}<{map_type(element, options)}>"
    if isinstance(descriptor, TaskMarker):
        return f"{PROMISE}<{map_type(descriptor.inner, options)}>"
    return map_type(descriptor, options)


def render_parameters(method: MethodSignature, options: TypeMapperOptions | None = None) -> str:
    rendered = []
    for param in method.parameters:
        type_text = rewrite_parameter(param.type, options)
        if type_text is not None:
            rendered.append(f"{param.name}: {type_text}")
    return ", ".join(rendered)
