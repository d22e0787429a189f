"""Documentation projector — XML doc comments to JSDoc blocks."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from hubgen.ir.models import (
    CancellationMarker,
    InterfaceDeclaration,
    MethodSignature,
    display_name,
)
from hubgen.logging import get_logger

logger = get_logger(__name__)

NO_SUMMARY = "Documentation unavailable."

_WHITESPACE = re.compile(r"\s+")


@dataclass
class Documentation:
    """Structured documentation extracted from a raw doc comment."""

    summary: str | None = None
    params: dict[str, str] = field(default_factory=dict)
    returns: str | None = None


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    text = _WHITESPACE.sub(" ", "".join(element.itertext())).strip()
    return text or None


def parse_documentation(raw: str | None) -> Documentation | None:
    """Parse a doc-comment blob; ``None`` when there is none or it is malformed."""
    if not raw or not raw.strip():
        return None
    try:
        # Doc comments are usually fragments without a single root element
        root = ET.fromstring(f"<doc>{raw}</doc>")
    except ET.ParseError as e:
        logger.warning("Ignoring malformed documentation comment: %s", e)
        return None

    params = {}
    for element in root.iter("param"):
        name = element.get("name")
        text = _text(element)
        if name and text and name not in params:
            params[name] = text

    return Documentation(
        summary=_text(root.find(".//summary")),
        params=params,
        returns=_text(root.find(".//returns")),
    )


def render_method_doc(method: MethodSignature, indent: str = "    ") -> list[str]:
    """Render the JSDoc lines that precede a method member."""
    doc = parse_documentation(method.documentation)
    lines = [f"{indent}/**"]

    if doc is not None:
        lines.append(f"{indent}* {doc.summary or NO_SUMMARY}")

    for param in method.parameters:
        if isinstance(param.type, CancellationMarker):
            continue
        origin = display_name(param.type)
        description = doc.params.get(param.name) if doc else None
        if description:
            lines.append(f"{indent}* @param {param.name} {description} (Transpiled from {origin})")
        else:
            lines.append(f"{indent}* @param {param.name} Transpiled from {origin}")

    origin = display_name(method.return_type)
    if doc is not None and doc.returns:
        lines.append(f"{indent}* @returns {doc.returns} (Transpiled from {origin})")
    else:
        lines.append(f"{indent}* @returns Transpiled from {origin}")

    lines.append(f"{indent}*/")
    return lines


def render_interface_doc(interface: InterfaceDeclaration) -> list[str]:
    doc = parse_documentation(interface.documentation)
    if doc is None or not doc.summary:
        return []
    return ["/**", f"* {doc.summary}", "*/"]
