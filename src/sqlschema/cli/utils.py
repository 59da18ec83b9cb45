"""
CLI utility helpers -- output formatting and database handles.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlschema.core.connection import create_database
from sqlschema.core.errors import SchemaError
from sqlschema.core.protocols import Database
from sqlschema.core.settings import SchemaSettings

console = Console()
err_console = Console(stderr=True)


# ── Settings / connection helpers ────────────────────────────────────────


def resolve_options(
    database: str | None, updates: Path | None
) -> tuple[str, Path]:
    """Fill unset ``--database`` / ``--updates`` from ``SQLSCHEMA_*`` settings."""
    settings = SchemaSettings()
    return database or settings.database_url, updates or settings.updates_dir


@contextmanager
def open_handle(database: str, *, must_exist: bool = False) -> Iterator[Database]:
    """Open a database for one command and close it afterwards."""
    try:
        db, _info = create_database(database, must_exist=must_exist)
    except SchemaError as e:
        fail(e)
    try:
        yield db
    finally:
        db.close()


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: SchemaError) -> NoReturn:
    """Print *error* with its kind and exit with status 1."""
    err_console.print(
        f"[bold red]Error[/bold red] ({error.kind.value}): {escape(str(error))}",
        soft_wrap=True,
    )
    raise typer.Exit(code=1)


def output_json(payload: dict[str, Any]) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)
