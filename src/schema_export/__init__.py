"""
Schema Export - Database structure documentation for LLM ingestion

Inspects a relational database catalog and writes one human/LLM-readable
text document per table, describing its columns, primary key and foreign keys.

Features:
- DB2 (SYSCAT) and Oracle (data dictionary) catalog extraction
- Multi-column foreign key reconstruction
- Deterministic, diff-friendly text documents
"""

__version__ = "0.1.0"

from schema_export.models import (
    Column,
    ExportConfig,
    ForeignKey,
    RuleAction,
    Table,
)

from schema_export.metadata import (
    Db2MetadataExtractor,
    MetadataExtractor,
    OracleMetadataExtractor,
    create_extractor,
)

from schema_export.descriptor import TableDescriptorBuilder
from schema_export.exporter import ExportResult, SchemaExporter
from schema_export.output import ReportRenderer, ReportWriter

__all__ = [
    # Core models
    "Column",
    "ExportConfig",
    "ForeignKey",
    "RuleAction",
    "Table",
    # Metadata
    "MetadataExtractor",
    "Db2MetadataExtractor",
    "OracleMetadataExtractor",
    "create_extractor",
    # Export
    "TableDescriptorBuilder",
    "SchemaExporter",
    "ExportResult",
    "ReportRenderer",
    "ReportWriter",
]
