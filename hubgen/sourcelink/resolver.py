"""Source link resolver — finds which upstream directory exports a DTO type.

The resolver scans every link source once, fully, before it can be queried.
The resulting map is read-only for the rest of the run.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

import anyio

from hubgen.errors import OperationCancelledError
from hubgen.logging import get_logger
from hubgen.sourcelink.conventions import Convention, extract_names, files_to_read
from hubgen.sourcelink.paths import relative_import_path
from hubgen.utils.naming import NamingStyle

logger = get_logger(__name__)

SOURCE_SUFFIX = ".ts"


class SourceLinkMap(Mapping[str, tuple[str, ...]]):
    """Directory -> names exported there, in scan order."""

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None):
        self._entries = MappingProxyType(
            {directory: tuple(names) for directory, names in (entries or {}).items()}
        )

    def __getitem__(self, directory: str) -> tuple[str, ...]:
        return self._entries[directory]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, name: str) -> str | None:
        """First directory whose export set contains ``name`` exactly."""
        for directory, names in self._entries.items():
            if name in names:
                return directory
        return None


class SourceLinkResolver:
    """Answers "where is this DTO type exported?" for one run."""

    def __init__(
        self,
        link_map: SourceLinkMap | None = None,
        naming_style: NamingStyle = NamingStyle.NONE,
    ):
        self._map = link_map if link_map is not None else SourceLinkMap()
        self.naming_style = naming_style

    @property
    def link_map(self) -> SourceLinkMap:
        return self._map

    def directory_for(self, type_name: str) -> str | None:
        return self._map.find(self.naming_style.transform(type_name))

    def has_link(self, type_name: str) -> bool:
        return self.directory_for(type_name) is not None

    def get_link(self, type_name: str, consumer_path: str | Path) -> str | None:
        """Import path for ``type_name`` as seen from the ``consumer_path`` file."""
        directory = self.directory_for(type_name)
        if directory is None:
            return None
        return relative_import_path(directory, consumer_path)

    def exported_names(self, directory: str | Path) -> tuple[str, ...]:
        return self._map.get(str(Path(directory).resolve()), ())


async def resolve(
    directories: str | Path | Sequence[str | Path] | None,
    naming_style: NamingStyle = NamingStyle.NONE,
    *,
    max_concurrent_reads: int = 8,
    cancel_event: anyio.Event | None = None,
) -> SourceLinkResolver:
    """Scan link source directories and build a resolver.

    Missing or unreadable directories contribute nothing. ``cancel_event``
    is checked between file reads; once set, the scan raises
    ``OperationCancelledError`` and no resolver is returned.
    """
    if directories is None:
        directories = []
    elif isinstance(directories, (str, Path)):
        directories = [directories]

    limiter = anyio.CapacityLimiter(max_concurrent_reads)
    entries: dict[str, list[str]] = {}

    for directory in directories:
        _check_cancelled(cancel_event)
        names = await _scan_directory(Path(directory), limiter, cancel_event)
        if names is None:
            continue
        key = str(Path(directory).resolve())
        merged = entries.setdefault(key, [])
        for name in names:
            if name in merged:
                logger.debug("'%s' is exported more than once in %s", name, key)
                continue
            merged.append(name)

    _check_cancelled(cancel_event)
    logger.debug("Source link map covers %d directories", len(entries))
    return SourceLinkResolver(SourceLinkMap(entries), naming_style)


def resolve_sync(
    directories: str | Path | Sequence[str | Path] | None,
    naming_style: NamingStyle = NamingStyle.NONE,
    *,
    max_concurrent_reads: int = 8,
) -> SourceLinkResolver:
    async def _run() -> SourceLinkResolver:
        return await resolve(
            directories, naming_style, max_concurrent_reads=max_concurrent_reads
        )

    return anyio.run(_run)


async def _scan_directory(
    directory: Path, limiter: anyio.CapacityLimiter, cancel_event: anyio.Event | None
) -> list[str] | None:
    try:
        file_names = sorted(
            [
                p.name
                async for p in anyio.Path(directory).iterdir()
                if p.suffix.lower() == SOURCE_SUFFIX and await p.is_file()
            ]
        )
    except OSError as e:
        logger.warning("Link source %s is not readable, no links from it: %s", directory, e)
        return None

    convention, to_read = files_to_read(file_names)
    logger.debug("%s uses the %s convention (%d files)", directory, convention.value, len(to_read))

    contents: list[str | None] = [None] * len(to_read)

    async with anyio.create_task_group() as tg:

        async def read(index: int, name: str) -> None:
            async with limiter:
                if cancel_event is not None and cancel_event.is_set():
                    tg.cancel_scope.cancel()
                    return
                try:
                    contents[index] = await anyio.Path(directory / name).read_text(
                        encoding="utf-8"
                    )
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning(
                        "Skipping unreadable link source file %s: %s", directory / name, e
                    )

        for index, name in enumerate(to_read):
            tg.start_soon(read, index, name)

    _check_cancelled(cancel_event)
    readable = [text for text in contents if text is not None]
    if convention == Convention.INDEX and not readable:
        return []
    return extract_names(convention, readable)


def _check_cancelled(cancel_event: anyio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError("Source link scan cancelled")
