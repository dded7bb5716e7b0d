"""
DB2 metadata extractor using ibm_db_dbi.

Extracts table, column, primary key and foreign key metadata from the
SYSCAT catalog views.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from schema_export.metadata.base import MetadataExtractor, is_numeric, strip_or_none
from schema_export.metadata.foreign_keys import (
    DB2_DELETE_RULES,
    DB2_UPDATE_RULES,
    ForeignKeyRow,
    assemble_foreign_keys,
)
from schema_export.models import Column, ForeignKey

logger = logging.getLogger(__name__)


DB2_CHARACTER_TYPES = ("CHARACTER", "VARCHAR")
DB2_NUMERIC_TYPES = ("DECIMAL", "INTEGER", "SMALLINT", "BIGINT")

CURRENT_SPECIAL_REGISTER = re.compile(r"CURRENT (DATE|TIMESTAMP|TIME)")


class Db2MetadataExtractor(MetadataExtractor):
    """
    Extracts metadata from the DB2 catalog.

    Uses SYSCAT views:
    - SYSCAT.TABLES
    - SYSCAT.COLUMNS
    - SYSCAT.TABCONST
    - SYSCAT.KEYCOLUSE
    - SYSCAT.REFERENCES
    """

    engine = "db2"

    def _open_connection(self, connection_string: str) -> Any:
        """Connect with a DB2 CLI connection string (DATABASE=...;HOSTNAME=...;...)."""
        import ibm_db_dbi

        conn = ibm_db_dbi.connect(connection_string, "", "")
        logger.info("Connected to DB2 database")
        return conn

    def list_tables(self, schema: str) -> List[str]:
        rows = self._fetch_all(
            """
            SELECT TABNAME FROM SYSCAT.TABLES
            WHERE TABSCHEMA = ? AND TYPE = 'T'
            ORDER BY TABNAME
            """,
            schema.upper(),
        )
        return [row[0].strip() for row in rows]

    def table_comment(self, schema: str, table_name: str) -> Optional[str]:
        try:
            rows = self._fetch_all(
                """
                SELECT REMARKS FROM SYSCAT.TABLES
                WHERE TABSCHEMA = ? AND TABNAME = ?
                """,
                schema.upper(),
                table_name.upper(),
            )
        except Exception as e:
            logger.debug(f"Could not read comment for {schema}.{table_name}: {e}")
            return None

        if not rows:
            return None
        return strip_or_none(rows[0][0])

    def columns(self, schema: str, table_name: str) -> List[Column]:
        rows = self._fetch_all(
            """
            SELECT COLNAME, TYPENAME, LENGTH, SCALE, NULLS, DEFAULT, REMARKS
            FROM SYSCAT.COLUMNS
            WHERE TABSCHEMA = ? AND TABNAME = ?
            ORDER BY COLNO
            """,
            schema.upper(),
            table_name,
        )

        columns = []
        for row in rows:
            col_name, type_name, length, scale, nulls, default, remarks = row
            columns.append(Column(
                name=col_name.strip(),
                type_name=type_name.strip(),
                length=length,
                scale=scale,
                nullable=nulls == "Y",
                default_value=default,
                comment=remarks,
            ))

        return columns

    def primary_key_columns(self, schema: str, table_name: str) -> List[str]:
        rows = self._fetch_all(
            """
            SELECT KC.COLNAME
            FROM SYSCAT.KEYCOLUSE KC
            JOIN SYSCAT.TABCONST C
                ON KC.CONSTNAME = C.CONSTNAME
                AND KC.TABSCHEMA = C.TABSCHEMA
                AND KC.TABNAME = C.TABNAME
            WHERE C.TABSCHEMA = ? AND C.TABNAME = ? AND C.TYPE = 'P'
            ORDER BY KC.COLSEQ
            """,
            schema.upper(),
            table_name,
        )
        return [row[0].strip() for row in rows]

    def primary_key_name(self, schema: str, table_name: str) -> Optional[str]:
        rows = self._fetch_all(
            """
            SELECT CONSTNAME FROM SYSCAT.TABCONST
            WHERE TABSCHEMA = ? AND TABNAME = ? AND TYPE = 'P'
            """,
            schema.upper(),
            table_name,
        )
        return rows[0][0].strip() if rows else None

    def foreign_keys(self, schema: str, table_name: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            """
            SELECT
                R.CONSTNAME,
                KC1.COLNAME AS FK_COLUMN,
                R.REFTABNAME,
                KC2.COLNAME AS REF_COLUMN,
                R.DELETERULE,
                R.UPDATERULE,
                KC1.COLSEQ
            FROM SYSCAT.REFERENCES R
            JOIN SYSCAT.KEYCOLUSE KC1
                ON R.CONSTNAME = KC1.CONSTNAME
                AND R.TABSCHEMA = KC1.TABSCHEMA
                AND R.TABNAME = KC1.TABNAME
            JOIN SYSCAT.KEYCOLUSE KC2
                ON R.REFKEYNAME = KC2.CONSTNAME
                AND R.REFTABSCHEMA = KC2.TABSCHEMA
                AND R.REFTABNAME = KC2.TABNAME
                AND KC1.COLSEQ = KC2.COLSEQ
            WHERE R.TABSCHEMA = ? AND R.TABNAME = ?
            ORDER BY R.CONSTNAME, KC1.COLSEQ
            """,
            schema.upper(),
            table_name,
        )

        return assemble_foreign_keys(
            (ForeignKeyRow(*row) for row in rows),
            delete_rules=DB2_DELETE_RULES,
            update_rules=DB2_UPDATE_RULES,
        )

    def format_type(self, column: Column) -> str:
        type_name = column.type_name
        if type_name in DB2_CHARACTER_TYPES:
            return f"{type_name}({column.length})"
        if type_name == "DECIMAL":
            scale = column.scale if column.scale and column.scale > 0 else 0
            return f"DECIMAL({column.length},{scale})"
        return type_name

    def format_default(self, default_value: Optional[str], type_name: str) -> str:
        if default_value is None:
            return ""
        value = default_value.strip()

        # Special registers
        if CURRENT_SPECIAL_REGISTER.fullmatch(value.upper()):
            return value.upper()

        if type_name in DB2_CHARACTER_TYPES and value == "''":
            return "''"

        if type_name in DB2_NUMERIC_TYPES and is_numeric(value):
            return value

        # Quoted literals and anything else pass through
        return value
