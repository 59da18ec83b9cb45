"""
sqlschema - embedded SQL schema migrations.

Usage::

    import sqlschema

    db = sqlschema.open_database("app.db", "sql/")

    # or, with a connection you already hold
    sqlschema.apply(sqlite3.connect("app.db"), "sql/")
"""

__version__ = "0.1.0"

from sqlschema.core.connection import ConnectionInfo, create_database
from sqlschema.core.errors import (
    DatabaseError,
    DatabaseOpenError,
    ErrorKind,
    InvalidUpdateFilesError,
    SchemaError,
    UpdateSchemaError,
    UpdateSourceError,
    error_kind,
)
from sqlschema.core.migrations import (
    AppliedLogEntry,
    MigrationResult,
    MigrationRunner,
    MigrationStatus,
    Update,
    apply,
    apply_unsafe,
    open_database,
)
from sqlschema.core.sources import DirectorySource, MemorySource, PackageSource

__all__ = [
    "__version__",
    # operations
    "apply",
    "apply_unsafe",
    "open_database",
    "create_database",
    "MigrationRunner",
    # records
    "Update",
    "AppliedLogEntry",
    "MigrationResult",
    "MigrationStatus",
    "ConnectionInfo",
    # sources
    "DirectorySource",
    "MemorySource",
    "PackageSource",
    # errors
    "ErrorKind",
    "SchemaError",
    "InvalidUpdateFilesError",
    "UpdateSchemaError",
    "UpdateSourceError",
    "DatabaseError",
    "DatabaseOpenError",
    "error_kind",
]
