"""
Canonical protocol definitions for sqlschema.

The migration engine depends on shapes, not classes. Any database driver or
file collection matching these protocols can be handed to the runner.

Architecture:
    ::

        protocols.py
        ├── Transaction   : execute / execute_script / query / commit / rollback
        ├── Database      : begin() -> Transaction, close()
        ├── SourceEntry   : (name, is_dir) listing record
        └── UpdateSource  : list_entries() / read(name)

    Implementations:
    ┌────────────────────────────────────────────────────────────────┐
    │ Database     → SqliteDatabase, SqlAlchemyDatabase (adapters/)  │
    │ UpdateSource → DirectorySource, MemorySource, PackageSource    │
    └────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Import sqlite3 or SQLAlchemy from migration code
    ✅ DO: Accept a Database / Transaction and let adapters hide the driver

Tags:
    protocol, database, transaction, update-source, sqlschema
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple, Protocol, runtime_checkable


@runtime_checkable
class Transaction(Protocol):
    """
    An open database transaction.

    Statements run through ``execute`` use named ``:param`` binds, which both
    ``sqlite3`` and SQLAlchemy ``text()`` understand. ``execute_script`` runs a
    multi-statement batch verbatim and must not commit implicitly.
    """

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> None:
        """Execute a single statement."""
        ...

    def execute_script(self, sql: str) -> None:
        """Execute a batch of statements verbatim, inside this transaction."""
        ...

    def query(self, sql: str) -> list[tuple]:
        """Execute a query and return all rows as tuples."""
        ...

    def commit(self) -> None:
        """Commit the transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the transaction. No-op if it has already finished."""
        ...


@runtime_checkable
class Database(Protocol):
    """The only capability the engine needs from a database handle."""

    def begin(self) -> Transaction:
        """Start a new transaction."""
        ...

    def close(self) -> None:
        """Release the handle."""
        ...


class SourceEntry(NamedTuple):
    """One entry of an update source listing."""

    name: str
    is_dir: bool = False


@runtime_checkable
class UpdateSource(Protocol):
    """A flat, read-only collection of named files."""

    def list_entries(self) -> list[SourceEntry]:
        """List the top-level entries of the collection."""
        ...

    def read(self, name: str) -> bytes:
        """Return the raw bytes of the named file."""
        ...


__all__ = [
    "Transaction",
    "Database",
    "SourceEntry",
    "UpdateSource",
]
