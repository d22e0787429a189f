"""hubgen CLI — the main entry point for the hub declaration generator."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hubgen import __version__
from hubgen.errors import HubGenError
from hubgen.utils.naming import MethodStyle, NamingStyle

console = Console()

_METHOD_STYLES = [s.value for s in MethodStyle]
_NAMING_STYLES = [s.value for s in NamingStyle]


@click.group()
@click.version_option(version=__version__)
def main():
    """hubgen — TypeScript declarations for strongly-typed hub interfaces.

    Reads hub interface definitions, links the DTO types they use to the
    output of an upstream type generator, and writes one TypeScript module
    per originating namespace.
    """


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/] {escape(str(error))}")
    sys.exit(1)


# ── Generate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("definitions", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", default=None, help="Config file (default: .hubgen.yml next to DEFINITIONS)")
@click.option("--output", "-o", default=None, help="Output root directory")
@click.option("--link-source", "-l", multiple=True, help="Directory with upstream generated DTO modules")
@click.option("--method-style", type=click.Choice(_METHOD_STYLES), default=None)
@click.option("--link-naming-style", type=click.Choice(_NAMING_STYLES), default=None)
@click.option("--dry-run", is_flag=True, help="Render but do not write files")
@click.option("--verbose", "-v", is_flag=True, help="Increase log verbosity")
def generate(
    definitions: str,
    config: str | None,
    output: str | None,
    link_source: tuple,
    method_style: str | None,
    link_naming_style: str | None,
    dry_run: bool,
    verbose: bool,
):
    """Generate TypeScript declarations from a DEFINITIONS file."""
    from hubgen.config import load_config
    from hubgen.ir.loader import load_definitions, select_interfaces
    from hubgen.logging import configure_logging
    from hubgen.sourcelink import resolve_sync
    from hubgen.transpiler.emitter import DeclarationEmitter
    from hubgen.transpiler.writer import write_modules

    configure_logging(verbose=verbose)
    console.print(f"\n[bold blue]hubgen[/] — Generating from: {definitions}\n")

    try:
        options = load_config(config or Path(definitions).parent)
        if output:
            options.output_root = Path(output)
        if link_source:
            options.link_sources = [Path(p) for p in link_source]
        if method_style:
            options.method_style = MethodStyle(method_style)
        if link_naming_style:
            options.link_naming_style = NamingStyle(link_naming_style)

        defs = load_definitions(definitions)
        interfaces = select_interfaces(defs.interfaces, options)
        if not interfaces:
            console.print("[yellow]No interfaces selected for transpilation.[/]")
            return

        links = resolve_sync(
            options.link_sources,
            options.link_naming_style,
            max_concurrent_reads=options.max_concurrent_reads,
        )
        modules = DeclarationEmitter(options, links).emit(interfaces)
    except HubGenError as e:
        _fail(e)
        return

    if not dry_run:
        try:
            write_modules(modules)
        except OSError as e:
            _fail(e)
            return

    table = Table(title=f"Generated Modules ({len(modules)})")
    table.add_column("Module", style="cyan")
    table.add_column("Interfaces", justify="right")
    table.add_column("Imports", justify="right")
    table.add_column("Path")
    for module in modules:
        table.add_row(
            module.module,
            str(len(module.declarations)),
            str(len(module.imports)),
            module.path,
        )
    console.print(table)

    if dry_run:
        console.print("\n[yellow]Dry run:[/] nothing was written.")


# ── Links ────────────────────────────────────────────────────────────


@main.command()
@click.argument("directories", nargs=-1, required=True)
@click.option("--naming-style", type=click.Choice(_NAMING_STYLES), default="none")
def links(directories: tuple, naming_style: str):
    """Show the types each upstream DIRECTORY exports."""
    from hubgen.sourcelink import resolve_sync

    resolver = resolve_sync(list(directories), NamingStyle(naming_style))
    link_map = resolver.link_map

    if not link_map:
        console.print("[yellow]No exported types found.[/]")
        return

    table = Table(title=f"Source Links ({len(link_map)} directories)")
    table.add_column("Directory", style="cyan")
    table.add_column("Types", justify="right")
    table.add_column("Names")
    for directory, names in link_map.items():
        table.add_row(directory, str(len(names)), ", ".join(names))
    console.print(table)


# ── Map ──────────────────────────────────────────────────────────────


@main.command(name="map")
@click.argument("type_expression")
@click.option(
    "--position",
    type=click.Choice(["return", "parameter"]),
    default="return",
    help="Signature position the type appears in",
)
def map_command(type_expression: str, position: str):
    """Print the TypeScript rendering of a TYPE_EXPRESSION."""
    from hubgen.ir.type_parser import parse_type
    from hubgen.transpiler.streaming import rewrite_parameter, rewrite_return

    try:
        descriptor = parse_type(type_expression)
    except HubGenError as e:
        _fail(e)
        return

    if position == "parameter":
        rendered = rewrite_parameter(descriptor)
        if rendered is None:
            console.print("[dim](omitted)[/]")
        else:
            console.print(rendered, markup=False, highlight=False)
    else:
        console.print(rewrite_return(descriptor), markup=False, highlight=False)


if __name__ == "__main__":
    main()
