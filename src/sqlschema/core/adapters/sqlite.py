"""SQLite database adapter.

Wraps the built-in :mod:`sqlite3` driver to satisfy the
:class:`~sqlschema.core.protocols.Database` protocol.

The connection runs with ``isolation_level=None`` and every transaction is
opened with an explicit ``BEGIN``. That keeps DDL inside the transaction and
sidesteps ``Connection.executescript()``, which commits any pending
transaction before running. Scripts are instead split into complete
statements with :func:`sqlite3.complete_statement` and executed one by one.

Usage::

    from sqlschema.core.adapters.sqlite import SqliteDatabase

    db = SqliteDatabase("app.db")
    tx = db.begin()
    tx.execute_script("CREATE TABLE a (id INTEGER); CREATE TABLE b (id INTEGER);")
    tx.commit()
    db.close()
"""

from __future__ import annotations

import re
import sqlite3
from collections.abc import Mapping
from typing import Any

from sqlschema.core.errors import DatabaseOpenError

_COMMENTS = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)


def _has_sql(chunk: str) -> bool:
    return bool(_COMMENTS.sub("", chunk).strip())


def split_statements(script: str) -> list[str]:
    """Split a SQL script into complete statements.

    Semicolons inside string literals, comments and trigger bodies do not
    end a statement. Chunks holding only whitespace or comments are dropped.

    >>> split_statements("CREATE TABLE a (x); INSERT INTO a VALUES (';');")
    ['CREATE TABLE a (x);', "INSERT INTO a VALUES (';');"]
    """
    statements = []
    buffer = ""
    pieces = script.split(";")
    for piece in pieces[:-1]:
        buffer += piece + ";"
        if sqlite3.complete_statement(buffer):
            if _has_sql(buffer):
                statements.append(buffer.strip())
            buffer = ""

    buffer += pieces[-1]
    if _has_sql(buffer):
        statements.append(buffer.strip())
    return statements


class SqliteTransaction:
    """A transaction on a SQLite connection opened with ``BEGIN``."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._cursor = conn.cursor()

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> None:
        self._cursor.execute(sql, dict(params or {}))

    def execute_script(self, sql: str) -> None:
        for statement in split_statements(sql):
            self._cursor.execute(statement)

    def query(self, sql: str) -> list[tuple]:
        self._cursor.execute(sql)
        return [tuple(row) for row in self._cursor.fetchall()]

    def commit(self) -> None:
        self._conn.execute("COMMIT")

    def rollback(self) -> None:
        if self._conn.in_transaction:
            self._conn.execute("ROLLBACK")


class SqliteDatabase:
    """Adapter: ``sqlite3.Connection`` → ``Database`` protocol."""

    def __init__(self, path: str = ":memory:", *, timeout: float = 5.0) -> None:
        self.path = path
        try:
            conn = sqlite3.connect(
                path,
                timeout=timeout,
                isolation_level=None,
                check_same_thread=False,
                uri=path.startswith("file:"),
            )
        except sqlite3.Error as e:
            raise DatabaseOpenError(
                f"Failed to connect to SQLite: {path}", cause=e
            ).with_context(url=path) from e
        self._conn = conn

    @classmethod
    def from_connection(cls, conn: sqlite3.Connection) -> SqliteDatabase:
        """Wrap an already-open connection.

        The connection is switched to manual transaction control, which
        commits any transaction it had pending.
        """
        conn.isolation_level = None
        db = cls.__new__(cls)
        db.path = "<connection>"
        db._conn = conn
        return db

    def begin(self) -> SqliteTransaction:
        self._conn.execute("BEGIN")
        return SqliteTransaction(self._conn)

    def close(self) -> None:
        self._conn.close()

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for queries in tests)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteDatabase({self.path!r})"


__all__ = [
    "SqliteDatabase",
    "SqliteTransaction",
    "split_statements",
]
