"""
Oracle metadata extractor using oracledb.

Extracts table metadata, column definitions, and PK/FK constraints
from Oracle data dictionary views.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from schema_export.metadata.base import MetadataExtractor, is_numeric, strip_or_none
from schema_export.metadata.foreign_keys import ForeignKeyRow, assemble_foreign_keys
from schema_export.models import Column, ForeignKey, RuleAction

logger = logging.getLogger(__name__)


# ALL_CONSTRAINTS.DELETE_RULE values; Oracle has no update rule
ORACLE_DELETE_RULES = {
    "CASCADE": RuleAction.CASCADE,
    "SET NULL": RuleAction.SET_NULL,
    "NO ACTION": RuleAction.NO_ACTION,
    "RESTRICT": RuleAction.RESTRICT,
}

ORACLE_CHARACTER_TYPES = ("VARCHAR2", "NVARCHAR2", "CHAR", "NCHAR", "VARCHAR")
ORACLE_LENGTH_TYPES = ORACLE_CHARACTER_TYPES + ("RAW",)
ORACLE_NUMERIC_TYPES = ("NUMBER", "INTEGER", "FLOAT", "BINARY_FLOAT", "BINARY_DOUBLE")
ORACLE_DATETIME_KEYWORDS = (
    "SYSDATE",
    "SYSTIMESTAMP",
    "CURRENT_DATE",
    "CURRENT_TIMESTAMP",
    "LOCALTIMESTAMP",
)


class OracleMetadataExtractor(MetadataExtractor):
    """
    Extracts metadata from Oracle database catalog.

    Uses Oracle data dictionary views:
    - ALL_TABLES / ALL_TAB_COMMENTS
    - ALL_TAB_COLUMNS / ALL_COL_COMMENTS
    - ALL_CONSTRAINTS
    - ALL_CONS_COLUMNS
    """

    engine = "oracle"

    def _open_connection(self, connection_string: str) -> Any:
        """Connect with a user/pwd@host:port/service connection string."""
        import oracledb

        parts = connection_string.split("@")
        user_pwd = parts[0]
        host_service = parts[1] if len(parts) > 1 else ""

        user, password = user_pwd.split("/", 1) if "/" in user_pwd else (user_pwd, "")

        # Build DSN
        if ":" in host_service:
            host_port, service = host_service.rsplit("/", 1) if "/" in host_service else (host_service, "")
            host, port = host_port.split(":") if ":" in host_port else (host_port, "1521")
            dsn = oracledb.makedsn(host, int(port), service_name=service)
        else:
            dsn = host_service

        conn = oracledb.connect(user=user, password=password, dsn=dsn)
        logger.info(f"Connected to Oracle database as {user}")
        return conn

    def list_tables(self, schema: str) -> List[str]:
        rows = self._fetch_all(
            """
            SELECT table_name
            FROM all_tables
            WHERE owner = :owner
            ORDER BY table_name
            """,
            owner=schema.upper(),
        )
        return [row[0] for row in rows]

    def table_comment(self, schema: str, table_name: str) -> Optional[str]:
        try:
            rows = self._fetch_all(
                """
                SELECT comments
                FROM all_tab_comments
                WHERE owner = :owner AND table_name = :table_name
                """,
                owner=schema.upper(),
                table_name=table_name.upper(),
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
            SELECT
                c.column_name,
                c.data_type,
                c.data_length,
                c.char_length,
                c.data_precision,
                c.data_scale,
                c.nullable,
                c.data_default,
                cc.comments
            FROM all_tab_columns c
            LEFT JOIN all_col_comments cc
                ON c.owner = cc.owner
                AND c.table_name = cc.table_name
                AND c.column_name = cc.column_name
            WHERE c.owner = :owner AND c.table_name = :table_name
            ORDER BY c.column_id
            """,
            owner=schema.upper(),
            table_name=table_name.upper(),
        )

        columns = []
        for row in rows:
            col_name, data_type, data_length, char_length, precision, scale, nullable, default, comment = row

            # NUMBER length is its precision; character types count characters, not bytes
            if data_type.upper() == "NUMBER":
                length = precision
            elif data_type.upper() in ORACLE_CHARACTER_TYPES:
                length = char_length
            else:
                length = data_length

            columns.append(Column(
                name=col_name,
                type_name=data_type,
                length=length,
                scale=scale,
                nullable=nullable == "Y",
                default_value=default.strip() if default else None,
                comment=comment,
            ))

        return columns

    def primary_key_columns(self, schema: str, table_name: str) -> List[str]:
        rows = self._fetch_all(
            """
            SELECT cc.column_name
            FROM all_constraints c
            JOIN all_cons_columns cc
                ON c.owner = cc.owner
                AND c.constraint_name = cc.constraint_name
            WHERE c.owner = :owner
                AND c.table_name = :table_name
                AND c.constraint_type = 'P'
            ORDER BY cc.position
            """,
            owner=schema.upper(),
            table_name=table_name.upper(),
        )
        return [row[0] for row in rows]

    def primary_key_name(self, schema: str, table_name: str) -> Optional[str]:
        rows = self._fetch_all(
            """
            SELECT constraint_name
            FROM all_constraints
            WHERE owner = :owner
                AND table_name = :table_name
                AND constraint_type = 'P'
            """,
            owner=schema.upper(),
            table_name=table_name.upper(),
        )
        return rows[0][0] if rows else None

    def foreign_keys(self, schema: str, table_name: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            """
            SELECT
                c.constraint_name,
                cc.column_name,
                rc.table_name,
                rcc.column_name,
                c.delete_rule,
                NULL,
                cc.position
            FROM all_constraints c
            JOIN all_cons_columns cc
                ON c.owner = cc.owner
                AND c.constraint_name = cc.constraint_name
            JOIN all_constraints rc
                ON c.r_owner = rc.owner
                AND c.r_constraint_name = rc.constraint_name
            JOIN all_cons_columns rcc
                ON rc.owner = rcc.owner
                AND rc.constraint_name = rcc.constraint_name
                AND cc.position = rcc.position
            WHERE c.owner = :owner
                AND c.table_name = :table_name
                AND c.constraint_type = 'R'
            ORDER BY c.constraint_name, cc.position
            """,
            owner=schema.upper(),
            table_name=table_name.upper(),
        )

        return assemble_foreign_keys(
            (ForeignKeyRow(*row) for row in rows),
            delete_rules=ORACLE_DELETE_RULES,
            update_rules={},
        )

    def format_type(self, column: Column) -> str:
        type_name = column.type_name
        if type_name in ORACLE_LENGTH_TYPES and column.length:
            return f"{type_name}({column.length})"
        if type_name == "NUMBER" and column.length is not None:
            return f"NUMBER({column.length},{column.scale or 0})"
        return type_name

    def format_default(self, default_value: Optional[str], type_name: str) -> str:
        if default_value is None:
            return ""
        value = default_value.strip()

        if value.upper() in ORACLE_DATETIME_KEYWORDS:
            return value.upper()

        if type_name in ORACLE_NUMERIC_TYPES and is_numeric(value):
            return value

        return value
