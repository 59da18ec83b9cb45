"""Discovery and validation of the update set.

Turns a flat collection of ``N.sql`` files into an ordered list of
:class:`~sqlschema.core.migrations.models.Update` records, or raises
:class:`~sqlschema.core.errors.InvalidUpdateFilesError` without touching the
database.
"""

from __future__ import annotations

import re
from typing import Any

from sqlschema.core.errors import InvalidUpdateFilesError
from sqlschema.core.hashing import compute_checksum
from sqlschema.core.logging import get_logger
from sqlschema.core.migrations.models import Update
from sqlschema.core.sources import as_source

logger = get_logger(__name__)

UPDATE_FILE_PATTERN = re.compile(r"^[0-9]+\.sql$")


def is_update_filename(name: str) -> bool:
    """Return True if *name* looks like ``N.sql``."""
    return UPDATE_FILE_PATTERN.fullmatch(name) is not None


def parse_sequence(name: str) -> int:
    """Parse the sequence number of an update file (``"0002.sql"`` -> 2)."""
    if not is_update_filename(name):
        raise InvalidUpdateFilesError(
            f"file {name} doesn't match regex {UPDATE_FILE_PATTERN.pattern}"
        ).with_context(filename=name)
    return int(name[: -len(".sql")])


def load_updates(updates: Any) -> list[Update]:
    """Load and validate every update in *updates*.

    Args:
        updates: An UpdateSource, a directory path or a name -> SQL mapping

    Returns:
        Updates ordered by ascending sequence, numbered 1..N with no gaps

    Raises:
        InvalidUpdateFilesError: The collection is empty, contains a
            directory or a badly named file, or is not numbered 1..N
        UpdateSourceError: The collection could not be listed or read
    """
    source = as_source(updates)
    entries = source.list_entries()

    if not entries:
        raise InvalidUpdateFilesError("no update files in given directory").with_context(
            source=repr(source)
        )

    for entry in entries:
        if entry.is_dir:
            raise InvalidUpdateFilesError(
                f"updates should only contain files: {entry.name} is a directory"
            ).with_context(filename=entry.name)
        if not is_update_filename(entry.name):
            raise InvalidUpdateFilesError(
                f"file {entry.name} doesn't match regex {UPDATE_FILE_PATTERN.pattern}"
            ).with_context(filename=entry.name)

    numbered = sorted((parse_sequence(e.name), e.name) for e in entries)

    previous: tuple[int, str] | None = None
    for sequence, name in numbered:
        if previous is None:
            if sequence != 1:
                raise InvalidUpdateFilesError(
                    f"first update file ({name}) should match /^0*1.sql$/"
                ).with_context(filename=name, sequence=sequence)
        elif sequence - previous[0] != 1:
            raise InvalidUpdateFilesError(
                f"update files must be in sequence ({previous[1]} followed by {name})"
            ).with_context(filename=name, sequence=sequence)
        previous = (sequence, name)

    loaded = []
    for sequence, name in numbered:
        raw = source.read(name)
        try:
            contents = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUpdateFilesError(
                f"update file {name} is not valid UTF-8", cause=e
            ).with_context(filename=name, sequence=sequence) from e
        loaded.append(
            Update(
                filename=name,
                sequence=sequence,
                checksum=compute_checksum(raw),
                contents=contents,
            )
        )

    logger.debug("updates.loaded", count=len(loaded), source=repr(source))
    return loaded
