"""
CLI layer for sqlschema.

A Typer application that delegates to ``sqlschema.core.migrations``. This
package only handles terminal transport: option parsing, settings defaults,
coloured output and exit codes.

Entry point::

    sqlschema --help
"""

from sqlschema.cli.app import app

__all__ = ["app"]
