"""Schema migration engine for sqlschema.

Applies numbered ``N.sql`` update files exactly once, tracking what has
already been applied in the ``schema_updates`` table and refusing to run
when that history conflicts with the current files.

Modules
-------
models      Update, AppliedLogEntry, MigrationResult, MigrationStatus
loader      load_updates() - discovery and validation of the update set
reconcile   filter_pending() - diff of the applied log against the files
applicator  apply_updates() - execution and log recording
runner      MigrationRunner, apply(), apply_unsafe(), open_database()

Tags:
    sqlschema, migrations, schema, database, idempotent, DDL
"""

from sqlschema.core.migrations.loader import is_update_filename, load_updates, parse_sequence
from sqlschema.core.migrations.models import (
    LOG_TABLE,
    AppliedLogEntry,
    MigrationResult,
    MigrationStatus,
    Update,
)
from sqlschema.core.migrations.runner import (
    MigrationRunner,
    apply,
    apply_unsafe,
    open_database,
)

__all__ = [
    "LOG_TABLE",
    "AppliedLogEntry",
    "MigrationResult",
    "MigrationRunner",
    "MigrationStatus",
    "Update",
    "apply",
    "apply_unsafe",
    "is_update_filename",
    "load_updates",
    "open_database",
    "parse_sequence",
]
