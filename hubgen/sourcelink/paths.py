"""Relative import paths between generated output locations."""

from __future__ import annotations

import os
import re
from pathlib import Path

_SEPARATORS = re.compile(r"[\\/]")


def _segments(path: str) -> list[str]:
    return [s for s in _SEPARATORS.split(path) if s]


def make_relative(full_path: str | Path, base_dir: str | Path) -> str:
    """Express ``full_path`` relative to ``base_dir``.

    Segments are compared case-insensitively. When the two paths share no
    leading segment (e.g. different drives) the absolute target is returned.
    """
    item_path = os.path.abspath(str(full_path))
    base_path = os.path.abspath(str(base_dir))

    target = _segments(item_path)
    base = _segments(base_path)

    common = 0
    while common < len(target) and common < len(base):
        if target[common].lower() != base[common].lower():
            break
        common += 1

    if common == 0:
        return item_path

    parts = [".."] * (len(base) - common) + target[common:]
    return "/".join(parts) if parts else "."


def relative_import_path(target_dir: str | Path, consumer_file: str | Path) -> str:
    """Module specifier that imports ``target_dir`` from ``consumer_file``."""
    relative = make_relative(target_dir, Path(os.path.abspath(str(consumer_file))).parent)
    relative = relative.replace("\\", "/")
    if relative == ".":
        return "./"
    if relative.startswith("..") or os.path.isabs(relative):
        return relative
    return f"./{relative}"
