"""
Shared pytest fixtures for sqlschema tests.

This module provides:
- In-memory SQLite connections
- A helper that writes numbered update files into a temp directory
- Isolation from ``SQLSCHEMA_*`` variables and ``.env`` files of the caller
"""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from tests._support import UPDATE_1, UPDATE_2, UPDATE_3


# ── Environment isolation ────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Drop SQLSCHEMA_* variables and run from an empty directory."""
    for key in ("DATABASE_URL", "UPDATES_DIR", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(f"SQLSCHEMA_{key}", raising=False)
    monkeypatch.chdir(tmp_path)


# ── Databases ────────────────────────────────────────────────────────


@pytest.fixture()
def conn() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite connection."""
    c = sqlite3.connect(":memory:")
    yield c
    c.close()


# ── Update files ─────────────────────────────────────────────────────


@pytest.fixture()
def write_updates(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes ``{name: sql}`` into a directory.

    Usage::

        d = write_updates({"1.sql": "CREATE TABLE a (id INTEGER);"})
        write_updates({"2.sql": "..."}, into=d)   # add/overwrite files
    """
    counter = iter(range(1_000))

    def _write(files: dict[str, str | bytes], into: Path | None = None) -> Path:
        d = into or tmp_path / f"updates_{next(counter)}"
        d.mkdir(parents=True, exist_ok=True)
        for name, sql in files.items():
            path = d / name
            if isinstance(sql, bytes):
                path.write_bytes(sql)
            else:
                path.write_text(sql, encoding="utf-8")
        return d

    return _write


@pytest.fixture()
def three_updates(write_updates: Callable[..., Path]) -> Path:
    """Directory with 1.sql, 2.sql and 3.sql."""
    return write_updates({"1.sql": UPDATE_1, "2.sql": UPDATE_2, "3.sql": UPDATE_3})
