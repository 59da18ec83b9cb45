"""Execution of pending updates and recording in the applied log."""

from __future__ import annotations

from sqlschema.core.errors import UpdateSchemaError
from sqlschema.core.logging import get_logger
from sqlschema.core.migrations.models import CREATE_LOG_TABLE, INSERT_LOG_ENTRY, Update
from sqlschema.core.protocols import Transaction
from sqlschema.core.timestamps import utc_now

logger = get_logger(__name__)


def ensure_log_table(tx: Transaction) -> None:
    """Create the ``schema_updates`` table inside *tx* if it is missing."""
    try:
        tx.execute(CREATE_LOG_TABLE)
    except Exception as e:
        raise UpdateSchemaError("create schema table", cause=e) from e


def apply_updates(updates: list[Update], tx: Transaction) -> list[Update]:
    """Execute each update and append its log row, in order.

    Nothing is committed here; the caller owns *tx*. The first failure stops
    the batch.

    Raises:
        UpdateSchemaError: Executing or recording an update failed
    """
    for update in updates:
        try:
            tx.execute_script(update.contents)
        except Exception as e:
            raise UpdateSchemaError(
                f"apply update {update.sequence} ({update.filename})", cause=e
            ).with_context(sequence=update.sequence, filename=update.filename) from e

        try:
            tx.execute(
                INSERT_LOG_ENTRY,
                {
                    "filename": update.filename,
                    "sequence": update.sequence,
                    "checksum": update.checksum,
                    "timestamp": utc_now().isoformat(),
                    "contents": update.contents,
                },
            )
        except Exception as e:
            raise UpdateSchemaError(
                f"record update {update.sequence} ({update.filename})", cause=e
            ).with_context(sequence=update.sequence, filename=update.filename) from e

        logger.info("update.applied", sequence=update.sequence, filename=update.filename)

    return list(updates)
