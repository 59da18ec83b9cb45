"""Database adapters satisfying :class:`sqlschema.core.protocols.Database`.

Modules
-------
sqlite             SqliteDatabase (stdlib ``sqlite3``, manual BEGIN/COMMIT)
sqlalchemy_bridge  SqlAlchemyDatabase (any SQLAlchemy engine)
"""

from sqlschema.core.adapters.sqlalchemy_bridge import SqlAlchemyDatabase
from sqlschema.core.adapters.sqlite import SqliteDatabase

__all__ = ["SqliteDatabase", "SqlAlchemyDatabase"]
