"""Definition loader — reads hub interface definitions from YAML.

The document lists the DTO types the upstream generator produces
(``external_types``) and the hub interfaces to transpile (``interfaces``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from hubgen.config import TranspileOptions
from hubgen.errors import DefinitionError
from hubgen.ir.models import InterfaceDeclaration, MethodSignature, Parameter
from hubgen.ir.type_parser import parse_type
from hubgen.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Definitions:
    """Everything read from one definition document."""

    interfaces: list[InterfaceDeclaration] = field(default_factory=list)
    external_types: dict[str, list[str]] = field(default_factory=dict)


def load_definitions(path: str | Path) -> Definitions:
    """Load interface definitions from a YAML file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DefinitionError(f"Cannot read definitions {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML in {path}: {e}") from e

    return parse_definitions(data or {}, source=str(path))


def parse_definitions(data: dict, source: str = "<definitions>") -> Definitions:
    """Build declarations from an already-parsed definition document."""
    if not isinstance(data, dict):
        raise DefinitionError(f"{source}: top level must be a mapping")

    external_types = {
        str(namespace): [str(n) for n in (names or [])]
        for namespace, names in (data.get("external_types") or {}).items()
    }

    interfaces = []
    for i, entry in enumerate(data.get("interfaces") or []):
        where = f"{source}: interfaces[{i}]"
        if not isinstance(entry, dict) or "name" not in entry:
            raise DefinitionError(f"{where}: an interface needs a 'name'")
        if "module" not in entry:
            raise DefinitionError(f"{where} ({entry['name']}): missing 'module'")

        methods = [
            _parse_method(method, external_types, f"{where}.{entry['name']}")
            for method in entry.get("methods") or []
        ]
        interfaces.append(
            InterfaceDeclaration(
                name=entry["name"],
                module=entry["module"],
                methods=methods,
                documentation=entry.get("documentation"),
                attributes=list(entry.get("attributes") or []),
                referenced=bool(entry.get("referenced", False)),
            )
        )

    logger.debug("Loaded %d interfaces from %s", len(interfaces), source)
    return Definitions(interfaces=interfaces, external_types=external_types)


def _parse_method(data: dict, external_types: dict[str, list[str]], where: str) -> MethodSignature:
    if not isinstance(data, dict) or "name" not in data:
        raise DefinitionError(f"{where}: a method needs a 'name'")
    where = f"{where}.{data['name']}"

    raw_params = data.get("parameters") or {}
    if isinstance(raw_params, list):
        # Also accept a list of single-key mappings
        pairs = [item for p in raw_params for item in p.items()]
    elif isinstance(raw_params, dict):
        pairs = list(raw_params.items())
    else:
        raise DefinitionError(f"{where}: 'parameters' must be a mapping")

    try:
        parameters = [
            Parameter(name=str(name), type=parse_type(str(type_text), external_types))
            for name, type_text in pairs
        ]
        return MethodSignature(
            name=data["name"],
            parameters=parameters,
            return_type=parse_type(str(data.get("returns", "void")), external_types),
            documentation=data.get("documentation"),
        )
    except DefinitionError as e:
        raise DefinitionError(f"{where}: {e}") from e
    except ValueError as e:
        raise DefinitionError(f"{where}: {e}") from e


def select_interfaces(
    interfaces: list[InterfaceDeclaration], options: TranspileOptions
) -> list[InterfaceDeclaration]:
    """Apply the attribute and referenced-module filters from the options."""
    selected = []
    markers = set(options.marker_attributes)
    for interface in interfaces:
        if interface.referenced and not options.referenced_modules:
            logger.debug("Skipping %s: defined in a referenced module", interface.name)
            continue
        if options.attribute_filtering and not markers.intersection(interface.attributes):
            logger.debug("Skipping %s: no marker attribute", interface.name)
            continue
        selected.append(interface)
    return selected
