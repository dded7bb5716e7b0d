"""Tests for the DB2 metadata extractor against a scripted connection."""

import pytest

from schema_export.metadata import Db2MetadataExtractor, create_extractor
from schema_export.metadata.base import MetadataExtractor
from schema_export.models import Column, RuleAction


@pytest.fixture
def db2_connection(fake_connection_factory):
    return fake_connection_factory([
        ("SELECT TABNAME FROM SYSCAT.TABLES", [("CUSTOMER  ",), ("REGION    ",)]),
        ("SELECT REMARKS FROM SYSCAT.TABLES", [("  Store customers  ",)]),
        ("FROM SYSCAT.COLUMNS", [
            ("ID      ", "INTEGER   ", 4, 0, "N", None, None),
            ("NAME    ", "VARCHAR   ", 50, 0, "N", "''", "Full name"),
            ("BALANCE ", "DECIMAL   ", 12, 2, "Y", "0", None),
            ("REGION_ID", "INTEGER  ", 4, 0, "Y", None, None),
        ]),
        ("FROM SYSCAT.REFERENCES", [
            ("FK_CUST_REGION ", "REGION_ID ", "REGION ", "ID ", "C", "A", 1),
        ]),
        ("FROM SYSCAT.KEYCOLUSE", [("ID      ",)]),
        ("SELECT CONSTNAME FROM SYSCAT.TABCONST", [("PK_CUSTOMER  ",)]),
    ])


@pytest.fixture
def extractor(db2_connection):
    return Db2MetadataExtractor(connection=db2_connection)


class TestDb2Queries:
    """Tests for DB2 catalog queries."""

    def test_list_tables(self, extractor, db2_connection):
        assert extractor.list_tables("sales") == ["CUSTOMER", "REGION"]

        sql, params, _ = db2_connection.executed[0]
        assert "TYPE = 'T'" in sql
        assert "ORDER BY TABNAME" in sql
        assert params == ("SALES",)

    def test_table_comment(self, extractor):
        assert extractor.table_comment("SALES", "CUSTOMER") == "Store customers"

    def test_blank_comment_is_absent(self, fake_connection_factory):
        conn = fake_connection_factory([("SELECT REMARKS", [("   ",)])])
        assert Db2MetadataExtractor(connection=conn).table_comment("SALES", "T") is None

    def test_missing_comment_row_is_absent(self, fake_connection_factory):
        conn = fake_connection_factory([("SELECT REMARKS", [])])
        assert Db2MetadataExtractor(connection=conn).table_comment("SALES", "T") is None

    def test_comment_failure_is_absent(self, fake_connection_factory):
        conn = fake_connection_factory([("SELECT REMARKS", RuntimeError("SQL0204N"))])
        assert Db2MetadataExtractor(connection=conn).table_comment("SALES", "T") is None

    def test_columns(self, extractor):
        columns = extractor.columns("SALES", "CUSTOMER")

        assert [c.name for c in columns] == ["ID", "NAME", "BALANCE", "REGION_ID"]
        name = columns[1]
        assert name.type_name == "VARCHAR"
        assert name.length == 50
        assert name.nullable is False
        assert name.default_value == "''"
        assert name.comment == "Full name"
        assert columns[2].nullable is True
        assert columns[2].scale == 2

    def test_primary_key(self, extractor, db2_connection):
        assert extractor.primary_key_columns("SALES", "CUSTOMER") == ["ID"]
        sql, _, _ = db2_connection.executed[-1]
        assert "ORDER BY KC.COLSEQ" in sql

        assert extractor.primary_key_name("SALES", "CUSTOMER") == "PK_CUSTOMER"

    def test_no_primary_key_name(self, fake_connection_factory):
        conn = fake_connection_factory([("SYSCAT.TABCONST", [])])
        assert Db2MetadataExtractor(connection=conn).primary_key_name("SALES", "T") is None

    def test_foreign_keys(self, extractor):
        fks = extractor.foreign_keys("SALES", "CUSTOMER")

        assert len(fks) == 1
        fk = fks[0]
        assert fk.name == "FK_CUST_REGION"
        assert fk.source_columns == ("REGION_ID",)
        assert fk.target_table == "REGION"
        assert fk.target_columns == ("ID",)
        assert fk.on_delete == RuleAction.CASCADE
        assert fk.on_update == RuleAction.NO_ACTION

    def test_cursors_closed(self, extractor, db2_connection):
        cursors = []
        original = db2_connection.cursor

        def tracking_cursor():
            cursor = original()
            cursors.append(cursor)
            return cursor

        db2_connection.cursor = tracking_cursor
        extractor.list_tables("SALES")
        assert all(c.closed for c in cursors)


class TestDb2Formatting:
    """Tests for DB2 type and default formatting."""

    @pytest.fixture
    def extractor(self):
        return Db2MetadataExtractor()

    def test_character_types(self, extractor):
        assert extractor.format_type(Column(name="A", type_name="CHARACTER", length=3)) == "CHARACTER(3)"
        assert extractor.format_type(Column(name="A", type_name="VARCHAR", length=120)) == "VARCHAR(120)"

    def test_decimal(self, extractor):
        assert extractor.format_type(Column(name="A", type_name="DECIMAL", length=12, scale=2)) == "DECIMAL(12,2)"
        assert extractor.format_type(Column(name="A", type_name="DECIMAL", length=9, scale=0)) == "DECIMAL(9,0)"
        assert extractor.format_type(Column(name="A", type_name="DECIMAL", length=9)) == "DECIMAL(9,0)"

    def test_other_types_bare(self, extractor):
        assert extractor.format_type(Column(name="A", type_name="INTEGER", length=4)) == "INTEGER"
        assert extractor.format_type(Column(name="A", type_name="TIMESTAMP", length=10)) == "TIMESTAMP"

    @pytest.mark.parametrize("raw, type_name, expected", [
        ("current timestamp", "TIMESTAMP", "CURRENT TIMESTAMP"),
        (" Current Date ", "DATE", "CURRENT DATE"),
        ("CURRENT TIME", "TIME", "CURRENT TIME"),
        ("''", "VARCHAR", "''"),
        ("''", "CHARACTER", "''"),
        ("0", "INTEGER", "0"),
        ("1.50", "DECIMAL", "1.50"),
        ("'ACTIVE'", "VARCHAR", "'ACTIVE'"),
        ("NEXT VALUE FOR SEQ_ID", "BIGINT", "NEXT VALUE FOR SEQ_ID"),
        ("CURRENT SCHEMA", "VARCHAR", "CURRENT SCHEMA"),
        (None, "INTEGER", ""),
    ])
    def test_format_default(self, extractor, raw, type_name, expected):
        assert extractor.format_default(raw, type_name) == expected


class TestDb2Connection:
    """Tests for connection handling."""

    def test_existing_connection_not_closed(self, fake_connection_factory):
        conn = fake_connection_factory()
        with Db2MetadataExtractor(connection=conn) as extractor:
            assert extractor.connection is conn
        assert conn.closed is False

    def test_owned_connection_closed(self, fake_connection_factory, monkeypatch):
        conn = fake_connection_factory()
        monkeypatch.setattr(Db2MetadataExtractor, "_open_connection", lambda self, dsn: conn)

        with Db2MetadataExtractor(connection_string="DATABASE=SAMPLE;") as extractor:
            assert extractor.connection is conn
        assert conn.closed is True

    def test_no_connection_configured(self):
        with pytest.raises(RuntimeError):
            Db2MetadataExtractor().connect()

    def test_engines_must_open_their_own_connections(self):
        assert "_open_connection" in MetadataExtractor.__abstractmethods__


class TestCreateExtractor:
    """Tests for engine selection."""

    def test_known_engines(self):
        assert create_extractor("db2").engine == "db2"
        assert create_extractor("ORACLE").engine == "oracle"

    def test_unknown_engine(self):
        with pytest.raises(ValueError, match="Unsupported database engine"):
            create_extractor("sybase")
