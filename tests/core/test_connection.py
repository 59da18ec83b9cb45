"""Tests for the database factory."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from sqlschema.core.adapters import SqlAlchemyDatabase, SqliteDatabase
from sqlschema.core.connection import ConnectionInfo, _parse_url, as_database, create_database
from sqlschema.core.errors import DatabaseOpenError
from sqlschema.core.protocols import Database


class TestParseUrl:
    @pytest.mark.parametrize("url", [None, "", "memory", ":memory:", "sqlite://", "sqlite:///:memory:"])
    def test_memory(self, url):
        assert _parse_url(url) == ("memory", ":memory:")

    def test_sqlite_url(self):
        assert _parse_url("sqlite:///data/app.db") == ("sqlite", "data/app.db")
        assert _parse_url("sqlite:////abs/app.db") == ("sqlite", "/abs/app.db")

    def test_bare_path(self):
        assert _parse_url("./app.db") == ("sqlite", "./app.db")

    def test_sqlite_uri(self):
        assert _parse_url("file:app.db?mode=ro") == ("sqlite", "file:app.db?mode=ro")

    def test_postgres_alias_normalised(self):
        assert _parse_url("postgres://u@h/db") == ("url", "postgresql://u@h/db")

    def test_other_url(self):
        assert _parse_url("mysql+pymysql://u@h/db") == ("url", "mysql+pymysql://u@h/db")


class TestCreateDatabase:
    def test_memory(self):
        db, info = create_database()
        try:
            assert isinstance(db, SqliteDatabase)
            assert info == ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")
            assert info.is_sqlite
        finally:
            db.close()

    def test_file_creates_parent_dirs(self, tmp_path: Path):
        target = tmp_path / "nested" / "deeper" / "app.db"
        db, info = create_database(str(target))
        try:
            assert target.parent.is_dir()
            assert info.persistent is True
            assert info.resolved_path == str(target.resolve())
            assert "path=" in repr(info)
        finally:
            db.close()

    def test_must_exist_refuses_missing_file(self, tmp_path: Path):
        target = tmp_path / "missing.db"
        with pytest.raises(DatabaseOpenError, match="does not exist") as exc_info:
            create_database(str(target), must_exist=True)
        assert exc_info.value.retryable is False
        assert not target.exists()

    def test_must_exist_opens_existing_file(self, tmp_path: Path):
        target = tmp_path / "app.db"
        sqlite3.connect(target).close()
        db, info = create_database(str(target), must_exist=True)
        db.close()
        assert info.resolved_path == str(target.resolve())

    def test_must_exist_ignored_for_memory(self):
        db, info = create_database("memory", must_exist=True)
        db.close()
        assert info.persistent is False

    def test_sqlite_url(self, tmp_path: Path):
        db, info = create_database(f"sqlite:///{tmp_path / 'app.db'}")
        db.close()
        assert info.backend == "sqlite"
        assert (tmp_path / "app.db").exists()

    def test_sqlalchemy_url(self):
        db, info = create_database("sqlite+pysqlite:///:memory:")
        try:
            assert isinstance(db, SqlAlchemyDatabase)
            assert info.backend == "sqlite"
            assert "url=" in repr(info)
        finally:
            db.close()

    def test_unknown_dialect(self):
        with pytest.raises(DatabaseOpenError) as exc_info:
            create_database("nosuchdialect://host/db")
        assert exc_info.value.retryable is True
        assert exc_info.value.context.url == "nosuchdialect://host/db"


class TestAsDatabase:
    def test_sqlite_connection(self, conn: sqlite3.Connection):
        db = as_database(conn)
        assert isinstance(db, SqliteDatabase)
        assert db.raw is conn

    def test_engine(self):
        engine = create_engine("sqlite://")
        assert isinstance(as_database(engine), SqlAlchemyDatabase)
        engine.dispose()

    def test_database_passthrough(self):
        db = SqliteDatabase()
        assert as_database(db) is db
        assert isinstance(db, Database)
        db.close()

    def test_rejects_other_types(self):
        with pytest.raises(TypeError, match="as a database"):
            as_database("app.db")
