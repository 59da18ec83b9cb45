"""
PostgreSQL integration tests.

Run against a disposable database::

    SQLSCHEMA_TEST_POSTGRES_URL=postgresql://postgres@localhost/sqlschema_test \
        pytest -m integration
"""

from __future__ import annotations

import os

import pytest

from sqlschema.core.connection import create_database
from sqlschema.core.errors import UpdateSchemaError
from sqlschema.core.migrations import MigrationRunner

POSTGRES_URL = os.environ.get("SQLSCHEMA_TEST_POSTGRES_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not POSTGRES_URL, reason="SQLSCHEMA_TEST_POSTGRES_URL not set"),
]

UPDATES = {
    "1.sql": "CREATE TABLE sqlschema_it_accounts (id SERIAL PRIMARY KEY, email TEXT);",
    "2.sql": (
        "CREATE TABLE sqlschema_it_orders (id SERIAL PRIMARY KEY, note TEXT DEFAULT '100%');\n"
        "CREATE INDEX sqlschema_it_orders_note ON sqlschema_it_orders (note);"
    ),
}


@pytest.fixture()
def db():
    handle, info = create_database(POSTGRES_URL)
    assert info.backend == "postgresql"
    yield handle
    tx = handle.begin()
    tx.execute_script(
        "DROP TABLE IF EXISTS sqlschema_it_orders, sqlschema_it_accounts, schema_updates"
    )
    tx.commit()
    handle.close()


def _tables(db) -> set[str]:
    tx = db.begin()
    rows = tx.query(
        "SELECT table_name FROM information_schema.tables "
        "WHERE table_name LIKE 'sqlschema_it_%' OR table_name = 'schema_updates'"
    )
    tx.rollback()
    return {row[0] for row in rows}


class TestPostgres:
    def test_apply_and_idempotent(self, db):
        runner = MigrationRunner(db, UPDATES)
        assert runner.apply_pending().applied_count == 2
        assert runner.apply_pending().applied_count == 0
        assert [e.sequence for e in runner.get_applied()] == [1, 2]

    def test_failed_batch_rolls_back_ddl(self, db):
        broken = dict(UPDATES, **{"2.sql": "CREATE TABLE sqlschema_it_orders (;"})
        with pytest.raises(UpdateSchemaError, match=r"apply update 2"):
            MigrationRunner(db, broken).apply_pending()
        assert _tables(db) == set()
