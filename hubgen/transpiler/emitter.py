"""Declaration emitter — one TypeScript module per originating namespace.

For each namespace the emitter writes the fixed preamble, the imports of
upstream DTO types the methods reference, and one ``export type`` block per
interface. Modules are returned fully rendered; nothing is written here.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

import anyio

from hubgen.config import TranspileOptions
from hubgen.errors import OperationCancelledError
from hubgen.ir.models import GeneratedModule, InterfaceDeclaration, Named, walk
from hubgen.logging import get_logger
from hubgen.sourcelink.resolver import SourceLinkResolver
from hubgen.transpiler.docs import render_interface_doc, render_method_doc
from hubgen.transpiler.streaming import render_parameters, rewrite_return
from hubgen.transpiler.type_mapper import COLLECTION_MAPPERS, TypeMapperOptions

logger = get_logger(__name__)

PREAMBLE = [
    "/* THIS (.ts) FILE IS GENERATED BY hubgen */",
    "/* eslint-disable */",
    "/* tslint:disable */",
    "// @ts-nocheck",
    "import { IStreamResult, Subject } from '@microsoft/signalr';",
]

INDENT = "    "

_NEWLINES = re.compile(r"\r\n?")


class DeclarationEmitter:
    """Renders hub interfaces into TypeScript modules."""

    def __init__(self, options: TranspileOptions, links: SourceLinkResolver | None = None):
        self.options = options
        self.links = links or SourceLinkResolver(naming_style=options.link_naming_style)
        self.mapper_options = TypeMapperOptions(
            primitives=dict(options.primitives),
            links=self.links,
            link_naming_style=self.links.naming_style,
        )

    def emit(
        self,
        interfaces: Iterable[InterfaceDeclaration],
        cancel_event: anyio.Event | None = None,
    ) -> list[GeneratedModule]:
        """Render every module. Cancellation discards all of them."""
        modules = []
        for module, group in group_by_module(interfaces).items():
            modules.append(self.emit_module(module, group, cancel_event))
        return modules

    def emit_module(
        self,
        module: str,
        interfaces: list[InterfaceDeclaration],
        cancel_event: anyio.Event | None = None,
    ) -> GeneratedModule:
        path = self.options.module_path(module)
        imports = self.render_imports(interfaces, path)

        declarations = []
        for interface in interfaces:
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(f"Emission of {module} cancelled")
            logger.info("Transpile %s.%s...", interface.module, interface.name)
            declarations.append(self.render_interface(interface))

        lines = PREAMBLE + imports + [""]
        text = "\n".join(lines) + "\n" + "".join(declarations)
        return GeneratedModule(
            path=str(path),
            module=module,
            declarations=declarations,
            imports=imports,
            text=_NEWLINES.sub("\n", text),
        )

    def render_imports(self, interfaces: list[InterfaceDeclaration], consumer: Path) -> list[str]:
        """Aggregated import lines for the DTO types the interfaces reference."""
        by_source: dict[str, list[str]] = {}
        seen: dict[str, str] = {}
        for named in self.linked_types(interfaces):
            link = self.links.get_link(named.name, consumer)
            if link is not None:
                source = link
                name = self.links.naming_style.transform(named.name)
            else:
                # Upstream modules live one level above our library directory
                source = f"../{named.namespace}"
                name = named.name
            if seen.setdefault(name, source) != source:
                logger.warning(
                    "%s is imported from both %s and %s; the generated module will not compile",
                    name,
                    seen[name],
                    source,
                )
            names = by_source.setdefault(source, [])
            if name not in names:
                names.append(name)

        return [
            f"import {{ {', '.join(names)} }} from '{source}';"
            for source, names in by_source.items()
        ]

    def linked_types(self, interfaces: list[InterfaceDeclaration]) -> list[Named]:
        """Distinct external or source-linked named types, in order of appearance."""
        found: dict[str, Named] = {}
        for interface in interfaces:
            for method in interface.methods:
                for root in method.types:
                    for descriptor in walk(root):
                        if not isinstance(descriptor, Named):
                            continue
                        arity = len(descriptor.type_arguments)
                        if (descriptor.name, arity) in COLLECTION_MAPPERS:
                            continue
                        if descriptor.external or self.links.has_link(descriptor.name):
                            found.setdefault(descriptor.qualified_name, descriptor)
        return list(found.values())

    def render_interface(self, interface: InterfaceDeclaration) -> str:
        lines = render_interface_doc(interface)
        lines.append(f"export type {interface.name} = {{")
        for method in interface.methods:
            lines.extend(render_method_doc(method, INDENT))
            name = self.options.method_style.transform(method.name)
            params = render_parameters(method, self.mapper_options)
            returns = rewrite_return(method.return_type, self.mapper_options)
            lines.append(f"{INDENT}{name}({params}): {returns};")
        lines.append("}")
        lines.append("")
        return "\n".join(lines) + "\n"


def group_by_module(
    interfaces: Iterable[InterfaceDeclaration],
) -> dict[str, list[InterfaceDeclaration]]:
    """Group interfaces by originating module, dropping repeats, keeping discovery order."""
    groups: dict[str, list[InterfaceDeclaration]] = {}
    seen = set()
    for interface in interfaces:
        if interface.key in seen:
            continue
        seen.add(interface.key)
        groups.setdefault(interface.module, []).append(interface)
    return groups
