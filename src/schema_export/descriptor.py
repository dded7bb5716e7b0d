"""
Assembles the structural description of a table from an extractor.
"""

from __future__ import annotations

import logging

from schema_export.metadata.base import MetadataExtractor
from schema_export.models import Table

logger = logging.getLogger(__name__)


class TableDescriptorBuilder:
    """Builds Table records from catalog metadata."""

    def __init__(self, extractor: MetadataExtractor, include_foreign_keys: bool = True):
        self.extractor = extractor
        self.include_foreign_keys = include_foreign_keys

    def build(self, schema: str, table_name: str) -> Table:
        """
        Collect comment, columns, primary key and foreign keys for a table.

        Any extractor failure propagates; no partial Table is returned.
        """
        extractor = self.extractor

        comment = extractor.table_comment(schema, table_name)
        columns = extractor.columns(schema, table_name)
        pk_columns = extractor.primary_key_columns(schema, table_name)
        pk_name = extractor.primary_key_name(schema, table_name)
        foreign_keys = extractor.foreign_keys(schema, table_name) if self.include_foreign_keys else []

        table = Table(
            name=table_name,
            schema=schema,
            comment=comment,
            columns=columns,
            primary_key_columns=pk_columns,
            primary_key_name=pk_name,
            foreign_keys=foreign_keys,
        )

        logger.debug(
            f"Described {table.full_name}: {len(table.columns)} columns, "
            f"{len(table.primary_key_columns)} PK columns, {len(table.foreign_keys)} FKs"
        )
        return table
