"""SQL migration runner.

Loads ``N.sql`` files from an update source, reconciles them against the
``schema_updates`` log and applies the missing ones, all inside a single
transaction. Either every pending update is applied and logged, or the
database is left exactly as it was.

State machine (terminal on first failure)::

    load ──► BEGIN ──► ensure log table ──► reconcile ──► apply ──► COMMIT
      │         │                 │               │          │         │
      ▼         ▼                 ▼               ▼          ▼         ▼
    Invalid   Database     ◄──────────── ROLLBACK, UpdateSchemaError ──┘
    UpdateFiles Error
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlschema.core.connection import as_database, create_database
from sqlschema.core.errors import DatabaseError, SchemaError, UpdateSchemaError
from sqlschema.core.logging import LogContext, get_logger
from sqlschema.core.migrations.applicator import apply_updates, ensure_log_table
from sqlschema.core.migrations.loader import load_updates
from sqlschema.core.migrations.models import (
    AppliedLogEntry,
    MigrationResult,
    MigrationStatus,
    Update,
)
from sqlschema.core.migrations.reconcile import filter_pending, read_applied
from sqlschema.core.protocols import Database, Transaction
from sqlschema.core.sources import as_source

logger = get_logger(__name__)


def _safe_rollback(tx: Transaction) -> None:
    # Rollback errors are logged, never raised.
    try:
        tx.rollback()
    except Exception as e:
        logger.warning("migration.rollback_failed", error=str(e), error_type=type(e).__name__)


def _begin(db: Database) -> Transaction:
    try:
        return db.begin()
    except SchemaError:
        raise
    except Exception as e:
        raise DatabaseError("begin transaction", cause=e) from e


@contextmanager
def _transaction(db: Database) -> Iterator[Transaction]:
    """Commit on success, roll back and re-raise on any failure."""
    tx = _begin(db)
    try:
        yield tx
        try:
            tx.commit()
        except Exception as e:
            raise UpdateSchemaError("commit updates", cause=e) from e
    except BaseException as exc:
        _safe_rollback(tx)
        if isinstance(exc, SchemaError):
            logger.error("migration.failed", **exc.to_dict())
        raise


@contextmanager
def _read_only(db: Database) -> Iterator[Transaction]:
    """A transaction that is always rolled back."""
    tx = _begin(db)
    try:
        ensure_log_table(tx)
        yield tx
    finally:
        _safe_rollback(tx)


class MigrationRunner:
    """Applies numbered SQL updates to a database.

    Parameters
    ----------
    db
        A ``Database`` handle, a ``sqlite3.Connection`` or a SQLAlchemy
        ``Engine``.
    updates
        An ``UpdateSource``, a directory path or a ``{"1.sql": "..."}`` mapping.

    Example::

        import sqlite3
        from sqlschema.core.migrations import MigrationRunner

        conn = sqlite3.connect("app.db")
        runner = MigrationRunner(conn, "sql/")
        result = runner.apply_pending()
        print(f"Applied {result.applied_count} updates")
    """

    def __init__(self, db: Any, updates: Any) -> None:
        self._db = as_database(db)
        self._source = as_source(updates)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def apply_pending(self) -> MigrationResult:
        """Apply every update missing from the log, in one transaction.

        Raises
        ------
        InvalidUpdateFilesError
            The update files are malformed; the database was not touched.
        UpdateSchemaError
            The log conflicts with the files, or a statement failed; the
            transaction was rolled back.
        DatabaseError
            A transaction could not be started.
        """
        with LogContext(operation="apply"):
            updates = load_updates(self._source)

            with _transaction(self._db) as tx:
                ensure_log_table(tx)
                pending = filter_pending(updates, tx)
                logger.info("updates.pending", count=len(pending), total=len(updates))
                applied = apply_updates(pending, tx)

            logger.info("migration.committed", applied=len(applied))
            skipped = updates[: len(updates) - len(pending)]
            return MigrationResult(applied=applied, skipped=skipped)

    def apply_unsafe(self) -> MigrationResult:
        """Apply every loaded update without reconciling against the log.

        Bootstrap only: the log table must be absent or empty. Against a
        database that already has updates logged, this re-runs them.
        """
        with LogContext(operation="apply_unsafe"):
            updates = load_updates(self._source)
            logger.warning("migration.unsafe", count=len(updates))

            with _transaction(self._db) as tx:
                ensure_log_table(tx)
                applied = apply_updates(updates, tx)

            logger.info("migration.committed", applied=len(applied))
            return MigrationResult(applied=applied)

    def get_applied(self) -> list[AppliedLogEntry]:
        """Return the applied log without changing the database."""
        with _read_only(self._db) as tx:
            return read_applied(tx)

    def get_pending(self) -> list[Update]:
        """Return the updates an ``apply_pending()`` would run now."""
        return self.status().pending

    def status(self) -> MigrationStatus:
        """Return applied and pending updates without changing the database.

        Raises the same errors as ``apply_pending()`` when the files are
        malformed or conflict with the log.
        """
        updates = load_updates(self._source)
        with _read_only(self._db) as tx:
            pending = filter_pending(updates, tx)
            return MigrationStatus(applied=read_applied(tx), pending=pending)

    def verify(self) -> None:
        """Check the log against the files; raise UpdateSchemaError on drift."""
        self.status()


def apply(db: Any, updates: Any) -> MigrationResult:
    """Ensure *db* has had every update from *updates* applied. See MigrationRunner."""
    return MigrationRunner(db, updates).apply_pending()


def apply_unsafe(db: Any, updates: Any) -> MigrationResult:
    """Apply all updates without reconciliation (fresh databases only)."""
    return MigrationRunner(db, updates).apply_unsafe()


def open_database(url: str | None, updates: Any) -> Database:
    """Open a database and ensure every update has been applied to it.

    ::

        sql/
          0001.sql
          0002.sql
          0003.sql

        db = open_database("app.db", "sql/")

    The handle is closed again if applying fails.
    """
    db, _info = create_database(url)
    try:
        MigrationRunner(db, updates).apply_pending()
    except BaseException:
        db.close()
        raise
    return db
