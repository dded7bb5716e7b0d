"""
Base contract for engine-specific metadata extractors.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from schema_export.models import Column, ForeignKey

logger = logging.getLogger(__name__)


class MetadataExtractor(ABC):
    """
    Extracts structural metadata from a database catalog.

    One subclass per database engine. Subclasses implement the catalog
    queries and the engine-specific formatting of types and defaults;
    connection handling is shared.
    """

    engine: str = ""

    def __init__(
        self,
        connection_string: Optional[str] = None,
        connection: Optional[Any] = None,
    ):
        """
        Initialize extractor.

        Args:
            connection_string: Engine-specific connection string used by connect()
            connection: Existing DB-API connection (not closed by the extractor)
        """
        self.connection_string = connection_string
        self._conn = connection
        self._owns_conn = False

    def connect(self) -> None:
        """Establish database connection."""
        if self._conn is not None:
            return
        if not self.connection_string:
            raise RuntimeError(f"No connection configured for {self.engine} extractor")
        self._conn = self._open_connection(self.connection_string)
        self._owns_conn = True

    def disconnect(self) -> None:
        """Close database connection if we opened it."""
        if self._owns_conn and self._conn:
            self._conn.close()
            self._conn = None
            self._owns_conn = False

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    @property
    def connection(self) -> Any:
        """Get the connection, opening it on first use."""
        if self._conn is None:
            self.connect()
        return self._conn

    @abstractmethod
    def _open_connection(self, connection_string: str) -> Any:
        """Open a driver connection from a connection string."""

    def _fetch_all(self, sql: str, *params: Any, **named: Any) -> List[Sequence[Any]]:
        """Run a catalog query and return all rows."""
        cursor = self.connection.cursor()
        try:
            if named:
                cursor.execute(sql, **named)
            else:
                cursor.execute(sql, params)
            return list(cursor.fetchall())
        finally:
            cursor.close()

    @abstractmethod
    def list_tables(self, schema: str) -> List[str]:
        """Get base table names in a schema, alphabetically."""

    @abstractmethod
    def table_comment(self, schema: str, table_name: str) -> Optional[str]:
        """Get the table comment, or None if absent or unavailable."""

    @abstractmethod
    def columns(self, schema: str, table_name: str) -> List[Column]:
        """Get columns in physical order."""

    @abstractmethod
    def primary_key_columns(self, schema: str, table_name: str) -> List[str]:
        """Get primary key columns in key-sequence order."""

    @abstractmethod
    def primary_key_name(self, schema: str, table_name: str) -> Optional[str]:
        """Get the primary key constraint name."""

    @abstractmethod
    def foreign_keys(self, schema: str, table_name: str) -> List[ForeignKey]:
        """Get foreign keys where the table is the referencing side."""

    @abstractmethod
    def format_type(self, column: Column) -> str:
        """Format a column type for display."""

    @abstractmethod
    def format_default(self, default_value: Optional[str], type_name: str) -> str:
        """Normalize a default value expression for display."""


def strip_or_none(value: Optional[str]) -> Optional[str]:
    """Strip catalog padding, mapping blank text to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def is_numeric(value: str) -> bool:
    try:
        float(value)
        return True
    except ValueError:
        return False
