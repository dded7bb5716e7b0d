"""
Metadata introspection module for DB2 and Oracle databases.

Provides a common extractor interface over each engine's catalog, plus the
foreign key assembly shared by all engines.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

from schema_export.metadata.base import MetadataExtractor
from schema_export.metadata.db2 import Db2MetadataExtractor
from schema_export.metadata.foreign_keys import (
    ForeignKeyRow,
    assemble_foreign_keys,
    map_delete_rule,
    map_update_rule,
)
from schema_export.metadata.oracle import OracleMetadataExtractor

EXTRACTORS: Dict[str, Type[MetadataExtractor]] = {
    "db2": Db2MetadataExtractor,
    "oracle": OracleMetadataExtractor,
}


def create_extractor(
    engine: str,
    connection_string: Optional[str] = None,
    connection: Optional[Any] = None,
) -> MetadataExtractor:
    """
    Create the extractor for a database engine.

    Args:
        engine: Engine name ("db2" or "oracle")
        connection_string: Connection string for the engine's driver
        connection: Existing DB-API connection

    Returns:
        MetadataExtractor for the engine
    """
    extractor_cls = EXTRACTORS.get(engine.lower())
    if extractor_cls is None:
        supported = ", ".join(sorted(EXTRACTORS))
        raise ValueError(f"Unsupported database engine: {engine} (supported: {supported})")
    return extractor_cls(connection_string=connection_string, connection=connection)


__all__ = [
    "EXTRACTORS",
    "MetadataExtractor",
    "Db2MetadataExtractor",
    "OracleMetadataExtractor",
    "ForeignKeyRow",
    "assemble_foreign_keys",
    "map_delete_rule",
    "map_update_rule",
    "create_extractor",
]
