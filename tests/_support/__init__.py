"""
Test support utilities for sqlschema tests.

Helpers that are not fixtures but are shared across test modules.
"""

from __future__ import annotations

import hashlib
import sqlite3
import textwrap
from collections.abc import Mapping
from pathlib import Path
from typing import Any

UPDATE_1 = textwrap.dedent("""\
    CREATE TABLE accounts (
        id INTEGER PRIMARY KEY,
        email TEXT NOT NULL UNIQUE
    );
""")

UPDATE_2 = textwrap.dedent("""\
    -- Orders reference accounts
    CREATE TABLE orders (
        id INTEGER PRIMARY KEY,
        account_id INTEGER NOT NULL REFERENCES accounts(id),
        note TEXT DEFAULT 'n/a; pending'
    );
    CREATE INDEX idx_orders_account ON orders(account_id);
""")

UPDATE_3 = textwrap.dedent("""\
    ALTER TABLE accounts ADD COLUMN created_at TEXT;
""")


def table_names(conn: sqlite3.Connection) -> set[str]:
    """Names of all tables in a SQLite database."""
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {row[0] for row in rows}


def log_rows(conn: sqlite3.Connection) -> list[tuple]:
    """``(filename, sequence, checksum)`` rows of the applied log, in order."""
    return conn.execute(
        "SELECT filename, sequence, checksum FROM schema_updates ORDER BY sequence"
    ).fetchall()


def sha1_of(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def file_digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class RecordingTransaction:
    """In-memory ``Transaction`` that records calls and can be told to fail.

    ``fail_on`` maps a method name to the exception it raises.
    """

    def __init__(
        self,
        rows: list[tuple] | None = None,
        fail_on: Mapping[str, Exception] | None = None,
    ) -> None:
        self.rows = rows or []
        self.fail_on = dict(fail_on or {})
        self.calls: list[tuple[str, Any]] = []
        self.committed = False
        self.rolled_back = False

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise self.fail_on[method]

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> None:
        self._maybe_fail("execute")
        self.calls.append(("execute", dict(params or {})))

    def execute_script(self, sql: str) -> None:
        self._maybe_fail("execute_script")
        self.calls.append(("execute_script", sql))

    def query(self, sql: str) -> list[tuple]:
        self._maybe_fail("query")
        return list(self.rows)

    def commit(self) -> None:
        self._maybe_fail("commit")
        self.committed = True

    def rollback(self) -> None:
        self._maybe_fail("rollback")
        self.rolled_back = True


class RecordingDatabase:
    """``Database`` handing out a single RecordingTransaction."""

    def __init__(self, tx: RecordingTransaction | None = None, begin_error: Exception | None = None):
        self.tx = tx or RecordingTransaction()
        self.begin_error = begin_error
        self.closed = False

    def begin(self) -> RecordingTransaction:
        if self.begin_error is not None:
            raise self.begin_error
        return self.tx

    def close(self) -> None:
        self.closed = True
