"""Export conventions of upstream generated directories.

A directory either has a barrel file (``index.ts``) that re-exports every
type, or holds loose per-type files. The barrel always wins; the two are
never mixed. Everything here works on names and text only, so it can be
tested without touching the file system.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from enum import Enum

BARREL_FILE = "index.ts"

# export { A, B as C } from './a';   export type { D };
_BARREL_EXPORT = re.compile(r"^\s*export\s+(?:type\s+)?\{([^}]*)\}", re.MULTILINE)
# export interface A / export enum B / export const enum C / export type D = ...
_LOOSE_EXPORT = re.compile(
    r"^export\s+(?:declare\s+)?(?:interface|enum|const\s+enum|type|class)\s+(\w+)",
    re.MULTILINE,
)


class Convention(Enum):
    INDEX = "index"  # One barrel file re-exports everything
    LOOSE = "loose"  # Every file is scanned for its own exports


def find_barrel(file_names: Iterable[str]) -> str | None:
    """Return the barrel file among ``file_names`` (case-insensitive), if any."""
    for name in file_names:
        if _base_name(name).lower() == BARREL_FILE:
            return name
    return None


def detect_convention(file_names: Iterable[str]) -> Convention:
    return Convention.INDEX if find_barrel(file_names) is not None else Convention.LOOSE


def parse_barrel(text: str) -> list[str]:
    """Names re-exported by a barrel file, in order of appearance."""
    names = []
    for match in _BARREL_EXPORT.finditer(text):
        for item in match.group(1).split(","):
            item = item.strip()
            if not item:
                continue
            # "type A" and "A as B" export the last word
            exported = item.split()[-1]
            if exported not in names:
                names.append(exported)
    return names


def parse_loose(text: str) -> list[str]:
    """Top-level exported interface/enum-like declarations in one file."""
    return [m.group(1) for m in _LOOSE_EXPORT.finditer(text)]


def files_to_read(file_names: list[str]) -> tuple[Convention, list[str]]:
    """Decide which files a directory scan must read."""
    barrel = find_barrel(file_names)
    if barrel is not None:
        return Convention.INDEX, [barrel]
    return Convention.LOOSE, list(file_names)


def collect_exports(file_names: list[str], read: Callable[[str], str]) -> list[str]:
    """Apply the convention decision synchronously using ``read`` for contents."""
    convention, to_read = files_to_read(file_names)
    return extract_names(convention, [read(name) for name in to_read])


def extract_names(convention: Convention, contents: list[str]) -> list[str]:
    """Union of exported names across ``contents``, first occurrence wins."""
    if convention == Convention.INDEX:
        return parse_barrel(contents[0]) if contents else []

    names: list[str] = []
    for text in contents:
        for name in parse_loose(text):
            if name not in names:
                names.append(name)
    return names


def _base_name(name: str) -> str:
    return re.split(r"[\\/]", name)[-1]
