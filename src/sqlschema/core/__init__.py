"""sqlschema core -- the embedded schema-migration engine.

Manifesto:
    An application that owns its database should be able to bring the schema
    up to date on startup, from a directory of numbered SQL files, with no
    external tool and no half-applied states. The engine applies each update
    exactly once, records what it ran, and refuses to continue when that
    record disagrees with the files on disk.

    - **All or nothing:** Every pending update runs in one transaction
    - **History is authoritative:** A changed, missing or reordered file is an error
    - **Protocol-first:** Database and UpdateSource are protocols, not classes
    - **Closed error set:** Failures are classified by ErrorKind

Architecture::

    Layer 1 -- Types & Errors
        errors.py          SchemaError hierarchy (ErrorKind, ErrorContext)
        protocols.py       Database, Transaction, UpdateSource
        hashing.py         SHA-1 checksums of update files
        timestamps.py      UTC helpers (stdlib-only)

    Layer 2 -- Inputs & Storage
        sources.py         DirectorySource, MemorySource, PackageSource
        adapters/          SqliteDatabase, SqlAlchemyDatabase
        connection.py      create_database() URL routing

    Layer 3 -- Engine
        migrations/        loader, reconcile, applicator, runner

    Layer 4 -- Ambient
        logging.py         structlog configuration
        settings.py        SchemaSettings (pydantic-settings)

Tags:
    sqlschema, core, migrations, schema, database
"""
