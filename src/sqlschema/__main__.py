"""Allow ``python -m sqlschema``."""

from sqlschema.cli.app import app

app(prog_name="sqlschema")
