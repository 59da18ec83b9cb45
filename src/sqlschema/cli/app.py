"""
Root Typer application for the sqlschema CLI.

Every command accepts ``--database/-d``, ``--updates/-u`` and ``--json``.
Unset options fall back to ``SQLSCHEMA_DATABASE_URL`` and
``SQLSCHEMA_UPDATES_DIR``. Any ``SchemaError`` exits with status 1.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path

import typer
from typer import Typer

from sqlschema import __version__
from sqlschema.cli.utils import (
    console,
    fail,
    open_handle,
    output_json,
    print_table,
    resolve_options,
)
from sqlschema.core.errors import SchemaError
from sqlschema.core.logging import configure_logging
from sqlschema.core.migrations import MigrationRunner
from sqlschema.core.settings import SchemaSettings

app = Typer(
    name="sqlschema",
    help="sqlschema: apply numbered SQL update files to a database, exactly once.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("sqlschema")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"sqlschema {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sqlschema CLI: apply, inspect and verify schema updates."""
    settings = SchemaSettings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)


# ── Shared options ───────────────────────────────────────────────────────

DatabaseOpt = typer.Option(None, "--database", "-d", help="Database URL or SQLite path")
UpdatesOpt = typer.Option(None, "--updates", "-u", help="Directory of N.sql update files")
JsonOpt = typer.Option(False, "--json", help="JSON output")


# ── Commands ─────────────────────────────────────────────────────────────


@app.command()
def apply(
    database: str | None = DatabaseOpt,
    updates: Path | None = UpdatesOpt,
    unsafe: bool = typer.Option(
        False, "--unsafe", help="Skip reconciliation (fresh databases only)"
    ),
    json_out: bool = JsonOpt,
) -> None:
    """Apply every pending update in one transaction."""
    database, updates = resolve_options(database, updates)

    with open_handle(database) as db:
        runner = MigrationRunner(db, updates)
        try:
            result = runner.apply_unsafe() if unsafe else runner.apply_pending()
        except SchemaError as e:
            fail(e)

    if json_out:
        output_json(result.to_dict())
        return
    if not result.applied:
        console.print("[green]Schema up to date[/green] (no pending updates)")
        return
    for update in result.applied:
        console.print(f"  [cyan]applied[/cyan] {update.filename}")
    console.print(f"[green]Applied {result.applied_count} update(s)[/green]")


@app.command()
def status(
    database: str | None = DatabaseOpt,
    updates: Path | None = UpdatesOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Show applied and pending updates without changing the database."""
    database, updates = resolve_options(database, updates)

    with open_handle(database, must_exist=True) as db:
        try:
            state = MigrationRunner(db, updates).status()
        except SchemaError as e:
            fail(e)

    if json_out:
        output_json(state.to_dict())
        return
    payload = state.to_dict()
    print_table(payload["applied"], title="Applied Updates")
    if state.pending:
        console.print(f"[yellow]Pending:[/yellow] {', '.join(payload['pending'])}")
    else:
        console.print("[green]Schema up to date[/green]")


@app.command()
def verify(
    database: str | None = DatabaseOpt,
    updates: Path | None = UpdatesOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Check that the applied log matches the update files."""
    database, updates = resolve_options(database, updates)

    with open_handle(database, must_exist=True) as db:
        try:
            state = MigrationRunner(db, updates).status()
        except SchemaError as e:
            fail(e)

    if json_out:
        output_json(
            {"ok": True, "applied": len(state.applied), "pending": len(state.pending)}
        )
        return
    console.print(
        f"[green]OK[/green] {len(state.applied)} applied, {len(state.pending)} pending"
    )
