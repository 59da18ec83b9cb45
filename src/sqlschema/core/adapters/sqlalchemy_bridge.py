"""SQLAlchemy engine bridge.

Makes any SQLAlchemy :class:`~sqlalchemy.engine.Engine` satisfy the
:class:`~sqlschema.core.protocols.Database` protocol, so PostgreSQL, MySQL
and other backends only need their DBAPI driver installed.

Scripts are sent to the driver verbatim through ``exec_driver_sql`` with
``no_parameters`` so that ``%`` and ``:name`` in update files are never
treated as bind markers. Drivers such as psycopg accept several statements
in one call.

SQLite engines are adjusted the way the SQLAlchemy documentation recommends
for transactional DDL with pysqlite: the DBAPI connection runs in autocommit
mode and the ``begin`` event emits ``BEGIN`` explicitly. Because pysqlite
refuses multi-statement strings, SQLite scripts are split first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection as SAConnection
from sqlalchemy.engine import Engine, RootTransaction

from sqlschema.core.adapters.sqlite import split_statements
from sqlschema.core.errors import DatabaseOpenError

_NO_PARAMETERS = {"no_parameters": True}


def _autocommit_driver(dbapi_connection: Any, _rec: Any) -> None:
    dbapi_connection.isolation_level = None


def _emit_begin(conn: SAConnection) -> None:
    # Connections pooled before the listeners were attached skipped "connect".
    driver = conn.connection.driver_connection
    if driver is not None and driver.isolation_level is not None:
        driver.isolation_level = None
    conn.exec_driver_sql("BEGIN")


def _enable_sqlite_transactional_ddl(engine: Engine) -> None:
    # The same engine may be wrapped more than once.
    if event.contains(engine, "begin", _emit_begin):
        return
    event.listen(engine, "connect", _autocommit_driver)
    event.listen(engine, "begin", _emit_begin)


class SqlAlchemyTransaction:
    """A transaction on a dedicated SQLAlchemy connection."""

    def __init__(
        self,
        conn: SAConnection,
        trans: RootTransaction,
        *,
        split_scripts: bool = False,
    ) -> None:
        self._conn = conn
        self._trans = trans
        self._split_scripts = split_scripts

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> None:
        self._conn.execute(text(sql), dict(params or {}))

    def execute_script(self, sql: str) -> None:
        if self._split_scripts:
            statements = split_statements(sql)
        else:
            statements = [sql] if sql.strip() else []
        for statement in statements:
            self._conn.exec_driver_sql(statement, execution_options=_NO_PARAMETERS)

    def query(self, sql: str) -> list[tuple]:
        result = self._conn.execute(text(sql))
        return [tuple(row) for row in result.fetchall()]

    def commit(self) -> None:
        self._trans.commit()
        self._conn.close()

    def rollback(self) -> None:
        try:
            if self._trans.is_active:
                self._trans.rollback()
        finally:
            self._conn.close()


class SqlAlchemyDatabase:
    """Adapter: SQLAlchemy ``Engine`` → ``Database`` protocol.

    Parameters
    ----------
    engine
        An existing engine, or a URL passed to ``sqlalchemy.create_engine``.
    **engine_kwargs
        Extra arguments for ``create_engine`` when a URL is given.
    """

    def __init__(self, engine: Engine | str, **engine_kwargs: Any) -> None:
        if isinstance(engine, str):
            engine = create_engine(engine, **engine_kwargs)
        self.engine = engine
        self._split_scripts = engine.dialect.name == "sqlite"
        if self._split_scripts:
            _enable_sqlite_transactional_ddl(engine)

    def begin(self) -> SqlAlchemyTransaction:
        try:
            conn = self.engine.connect()
        except Exception as e:
            raise DatabaseOpenError(
                f"Failed to connect to {self.engine.url.render_as_string(hide_password=True)}",
                cause=e,
            ) from e
        try:
            trans = conn.begin()
        except Exception:
            conn.close()
            raise
        return SqlAlchemyTransaction(conn, trans, split_scripts=self._split_scripts)

    def close(self) -> None:
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"SqlAlchemyDatabase({self.engine.url.render_as_string(hide_password=True)!r})"


__all__ = [
    "SqlAlchemyDatabase",
    "SqlAlchemyTransaction",
]
