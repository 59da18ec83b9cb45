"""Reconciliation of the loaded update set against the applied log.

The applied log is the source of truth for what actually ran. Any
disagreement between it and the current files (a missing file, a reordered
file or a changed file) is reported as corruption and never re-applied.
"""

from __future__ import annotations

from sqlschema.core.errors import UpdateSchemaError
from sqlschema.core.migrations.models import SELECT_LOG_ENTRIES, AppliedLogEntry, Update
from sqlschema.core.protocols import Transaction


def read_applied(tx: Transaction) -> list[AppliedLogEntry]:
    """Return the applied log ordered by ascending sequence."""
    try:
        rows = tx.query(SELECT_LOG_ENTRIES)
    except Exception as e:
        raise UpdateSchemaError("check existing updates", cause=e) from e

    try:
        return [AppliedLogEntry.from_row(tuple(row)) for row in rows]
    except (TypeError, ValueError) as e:
        raise UpdateSchemaError("reading applied updates", cause=e) from e


def filter_pending(updates: list[Update], tx: Transaction) -> list[Update]:
    """Return the updates that have not been applied yet.

    Walks the applied log and *updates* in lock-step from the front; every
    applied entry must match the update at the same position in both
    sequence and checksum.

    Raises:
        UpdateSchemaError: The log references an update with no file, the
            log and files disagree on ordering, or a file changed after it
            was applied
    """
    applied = read_applied(tx)

    for i, entry in enumerate(applied):
        if i >= len(updates):
            raise UpdateSchemaError(
                f"unknown update {entry.sequence} already applied"
            ).with_context(sequence=entry.sequence, filename=entry.filename)

        expected = updates[i]
        if entry.sequence != expected.sequence:
            raise UpdateSchemaError(
                f"update {entry.sequence} seen instead of expected {expected.sequence}"
            ).with_context(sequence=entry.sequence, filename=entry.filename)

        if entry.checksum != expected.checksum:
            raise UpdateSchemaError(
                f"checksum of applied update {entry.sequence} ({entry.checksum}) "
                f"does not match expected ({expected.checksum})"
            ).with_context(sequence=entry.sequence, filename=expected.filename)

    return updates[len(applied):]
