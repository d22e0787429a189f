"""Writes fully rendered modules to disk."""

from __future__ import annotations

from pathlib import Path

from hubgen.ir.models import GeneratedModule
from hubgen.logging import get_logger

logger = get_logger(__name__)


def write_modules(modules: list[GeneratedModule]) -> list[Path]:
    """Write every module, creating parent directories. Returns the written paths."""
    written = []
    for module in modules:
        path = Path(module.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(module.text)
        logger.info("Wrote %s", path)
        written.append(path)
    return written
