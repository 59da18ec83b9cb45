"""Update sources: where ``N.sql`` files come from.

The engine never touches the filesystem directly. It reads a flat listing and
file contents from an :class:`~sqlschema.core.protocols.UpdateSource`, which
can be a real directory, an in-memory mapping (tests, generated schemas) or
resources bundled inside an installed package.

Usage::

    from sqlschema.core.sources import DirectorySource, MemorySource, PackageSource

    DirectorySource("./sql")
    MemorySource({"1.sql": "CREATE TABLE a (id INTEGER);"})
    PackageSource("myapp", "sql")

    as_source("./sql")            # -> DirectorySource
    as_source({"1.sql": "..."})   # -> MemorySource
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

from sqlschema.core.errors import UpdateSourceError
from sqlschema.core.protocols import SourceEntry, UpdateSource


class _TraversableSource:
    """Shared listing/reading for anything exposing the Traversable API."""

    def __init__(self, root: Traversable, description: str) -> None:
        self._root = root
        self._description = description

    def list_entries(self) -> list[SourceEntry]:
        try:
            return [SourceEntry(child.name, child.is_dir()) for child in self._root.iterdir()]
        except OSError as e:
            raise UpdateSourceError(
                f"open updates: cannot list {self._description}", cause=e
            ).with_context(source=self._description) from e

    def read(self, name: str) -> bytes:
        try:
            return self._root.joinpath(name).read_bytes()
        except OSError as e:
            raise UpdateSourceError(f"reading {name}", cause=e).with_context(
                filename=name, source=self._description
            ) from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._description!r})"


class DirectorySource(_TraversableSource):
    """Update files stored in a directory on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(self.path, str(self.path))


class PackageSource(_TraversableSource):
    """Update files shipped as resources of an importable package.

    ``PackageSource("myapp", "sql")`` reads ``myapp/sql/*.sql`` whether the
    package is installed as a directory or inside a zip/wheel.
    """

    def __init__(self, package: str, *parts: str) -> None:
        try:
            root = resources.files(package)
        except ModuleNotFoundError as e:
            raise UpdateSourceError(f"open updates: no package {package!r}", cause=e) from e
        for part in parts:
            root = root.joinpath(part)
        super().__init__(root, "/".join([package, *parts]))


class MemorySource:
    """Update files held in memory.

    Keys are file names, values are ``str`` (encoded as UTF-8) or ``bytes``.
    A key containing ``/`` makes its first segment appear as a directory,
    which lets tests build invalid collections without touching disk.
    """

    def __init__(self, files: Mapping[str, str | bytes]) -> None:
        self._files: dict[str, bytes] = {
            name: data.encode("utf-8") if isinstance(data, str) else bytes(data)
            for name, data in files.items()
        }

    def list_entries(self) -> list[SourceEntry]:
        entries: dict[str, SourceEntry] = {}
        for name in self._files:
            head, sep, _ = name.partition("/")
            entries.setdefault(head, SourceEntry(head, is_dir=bool(sep)))
        return list(entries.values())

    def read(self, name: str) -> bytes:
        try:
            return self._files[name]
        except KeyError as e:
            raise UpdateSourceError(f"reading {name}: no such file", cause=e).with_context(
                filename=name, source="memory"
            ) from e

    def __repr__(self) -> str:
        return f"MemorySource({sorted(self._files)!r})"


def as_source(updates: Any) -> UpdateSource:
    """Coerce a path, mapping or existing source into an UpdateSource."""
    if isinstance(updates, (str, os.PathLike)):
        return DirectorySource(updates)
    if isinstance(updates, Mapping):
        return MemorySource(updates)
    if isinstance(updates, UpdateSource):
        return updates
    raise TypeError(
        f"Cannot use {type(updates).__name__} as an update source; "
        "pass a directory path, a mapping or an UpdateSource"
    )


__all__ = [
    "DirectorySource",
    "PackageSource",
    "MemorySource",
    "as_source",
]
