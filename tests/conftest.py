"""Shared fixtures: a scripted DB-API connection and sample tables."""

import pytest

from schema_export.metadata.base import MetadataExtractor
from schema_export.models import Column, ForeignKey, RuleAction, Table


class FakeCursor:
    """DB-API cursor returning canned rows for matching SQL."""

    def __init__(self, connection):
        self.connection = connection
        self._rows = []
        self.closed = False

    def execute(self, sql, params=None, **named):
        self.connection.executed.append((sql, params, named))
        for marker, rows in self.connection.responses:
            if marker in sql:
                if isinstance(rows, Exception):
                    raise rows
                self._rows = list(rows)
                return
        self._rows = []

    def fetchall(self):
        return self._rows

    def close(self):
        self.closed = True


class FakeConnection:
    """
    Scripted connection.

    ``responses`` is a list of (sql_marker, rows) pairs; the first marker
    found in the executed SQL selects the rows. Rows may be an exception
    instance to simulate a failing query.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.executed = []
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connection_factory():
    """Build FakeConnection instances from (marker, rows) pairs."""
    return FakeConnection


@pytest.fixture
def customer_table():
    """CUSTOMER with a simple PK and a cascading FK to REGION."""
    return Table(
        name="CUSTOMER",
        schema="SALES",
        columns=[
            Column(name="ID", type_name="INTEGER", length=4, nullable=False),
            Column(name="NAME", type_name="VARCHAR", length=50, nullable=False),
            Column(name="REGION_ID", type_name="INTEGER", length=4, nullable=True),
        ],
        primary_key_columns=["ID"],
        primary_key_name="PK_CUSTOMER",
        foreign_keys=[
            ForeignKey(
                name="FK_CUSTOMER_REGION",
                source_columns=["REGION_ID"],
                target_table="REGION",
                target_columns=["ID"],
                on_delete=RuleAction.CASCADE,
            ),
        ],
    )


@pytest.fixture
def bare_table():
    """A table without comment, PK or FKs."""
    return Table(
        name="AUDIT_LOG",
        schema="SALES",
        columns=[
            Column(name="MESSAGE", type_name="VARCHAR", length=200),
            Column(name="LOGGED_AT", type_name="TIMESTAMP", nullable=False,
                   default_value="CURRENT TIMESTAMP"),
        ],
    )


class StubExtractor(MetadataExtractor):
    """In-memory extractor serving a fixed set of tables."""

    engine = "stub"

    def __init__(self, tables, failing=()):
        super().__init__(connection=FakeConnection())
        self.tables = {table.name: table for table in tables}
        self.failing = set(failing)
        self.foreign_key_calls = 0

    def _open_connection(self, connection_string):
        return FakeConnection()

    def _table(self, table_name):
        if table_name in self.failing:
            raise RuntimeError(f"catalog lookup failed for {table_name}")
        return self.tables[table_name]

    def list_tables(self, schema):
        return sorted(set(self.tables) | self.failing)

    def table_comment(self, schema, table_name):
        return self._table(table_name).comment

    def columns(self, schema, table_name):
        return list(self._table(table_name).columns)

    def primary_key_columns(self, schema, table_name):
        return list(self._table(table_name).primary_key_columns)

    def primary_key_name(self, schema, table_name):
        return self._table(table_name).primary_key_name

    def foreign_keys(self, schema, table_name):
        self.foreign_key_calls += 1
        return list(self._table(table_name).foreign_keys)

    def format_type(self, column):
        if column.length and column.type_name == "VARCHAR":
            return f"VARCHAR({column.length})"
        return column.type_name

    def format_default(self, default_value, type_name):
        return (default_value or "").strip()


@pytest.fixture
def stub_extractor(customer_table, bare_table):
    """Extractor serving CUSTOMER and AUDIT_LOG."""
    return StubExtractor([customer_table, bare_table])


@pytest.fixture
def stub_extractor_factory():
    return StubExtractor
